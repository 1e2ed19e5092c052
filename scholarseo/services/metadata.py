"""Page metadata generation.

:func:`generate_page_metadata` never raises for bad entity data: a payload the
normalizer cannot resolve degrades to the not-found metadata for its entity
type.  Only an unknown page variant (a programming error) raises.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from scholarseo.config import (
    DEFAULT_OG_IMAGE,
    LOCALE,
    OG_IMAGE_HEIGHT,
    OG_IMAGE_WIDTH,
    SITE_NAME,
    TWITTER_HANDLE,
    build_canonical_url,
    current_year,
    format_title_with_suffix,
)
from scholarseo.models.filters import FilterState
from scholarseo.models.metadata import (
    Alternates,
    MetadataResult,
    OpenGraph,
    OpenGraphImage,
    Robots,
    TwitterCard,
)
from scholarseo.models.requests import ListingFacets
from scholarseo.services.cannibalization import get_filter_canonical_strategy
from scholarseo.services.normalizer import NormalizedEntity, normalize, slugify
from scholarseo.services.slug_codec import build_listing_path
from scholarseo.services.templates import (
    MetadataTemplate,
    article_template,
    author_template,
    college_template,
    exam_template,
    filter_template,
    static_template,
)

logger = logging.getLogger(__name__)

_TEMPLATES: Dict[str, Callable[[NormalizedEntity, Any], MetadataTemplate]] = {
    "college": college_template,
    "college-tab": college_template,
    "exam": exam_template,
    "exam-silo": exam_template,
    "article": article_template,
    "author": author_template,
    "filter": filter_template,
    "static": static_template,
}

# Entity wording used by the not-found fallback of each page type
ENTITY_LABELS = {
    "college": "college",
    "college-tab": "college",
    "exam": "exam",
    "exam-silo": "exam",
    "article": "article",
    "author": "author",
    "static": "page",
}

_OG_TYPES = {"article": "article", "author": "profile"}


def _og_images(image: Optional[str], alt: str) -> List[OpenGraphImage]:
    if not image:
        return []
    return [OpenGraphImage(url=image, width=OG_IMAGE_WIDTH, height=OG_IMAGE_HEIGHT, alt=alt)]


def _build_result(
    title: str,
    description: str,
    keywords: List[str],
    canonical_path: Optional[str],
    image: Optional[str],
    og_type: str = "website",
    robots: Optional[Robots] = None,
) -> MetadataResult:
    canonical_url = build_canonical_url(canonical_path) if canonical_path else None
    return MetadataResult(
        title=format_title_with_suffix(title),
        description=description,
        keywords=keywords,
        robots=robots or Robots(),
        alternates=Alternates(canonical=canonical_url) if canonical_url else None,
        open_graph=OpenGraph(
            title=title,
            description=description,
            url=canonical_url,
            site_name=SITE_NAME,
            type=og_type,
            locale=LOCALE,
            images=_og_images(image, title),
        ),
        twitter=TwitterCard(
            title=title,
            description=description,
            images=[image] if image else [],
            creator=TWITTER_HANDLE,
        ),
    )


def _page_robots(page) -> Robots:
    """Static pages honour their ``no_index`` flag; thin filter pages are not indexed."""
    if page.type == "static":
        return Robots(index=not page.data.no_index, follow=True)
    if page.type == "filter":
        strategy = get_filter_canonical_strategy(page.data)
        if not strategy.should_index:
            logger.info("Filter page not indexed: %s", strategy.reason)
        return strategy.robots
    return Robots(index=True, follow=True)


def generate_page_metadata(page) -> MetadataResult:
    """Build the ``<head>`` metadata for any page variant.

    Raises:
        ValueError: if *page* is not a known page variant.
    """
    entity = normalize(page)

    if page.type == "error":
        return generate_error_metadata(page.data.kind, page.data.entity_type)
    if not entity.resolved:
        logger.warning("Serving not-found metadata for unresolved %s page", page.type)
        return generate_error_metadata("not-found", ENTITY_LABELS.get(page.type))

    template = _TEMPLATES[page.type](entity, page.data)
    robots = _page_robots(page)

    result = _build_result(
        template.title,
        template.description,
        template.keywords,
        template.canonical_path,
        template.og_image,
        og_type=_OG_TYPES.get(page.type, "website"),
        robots=robots,
    )

    if page.type == "article":
        result.open_graph.published_time = entity.published_at
        result.open_graph.modified_time = entity.modified_at
        result.open_graph.authors = [entity.author_name] if entity.author_name else []

    return result


def generate_error_metadata(kind: str = "not-found", entity_type: Optional[str] = None) -> MetadataResult:
    """Metadata for not-found and error pages; never indexed, links still followed."""
    noun = entity_type or "page"
    label = noun[:1].upper() + noun[1:]

    if kind == "not-found":
        title = f"{label} Not Found"
        description = (
            f"The requested {noun} could not be found. "
            f"Browse our comprehensive database on {SITE_NAME}."
        )
    else:
        title = f"Error Loading {label}"
        description = f"We encountered an error while loading this {noun}. Please try again later."

    return MetadataResult(
        title=format_title_with_suffix(title),
        description=description,
        robots=Robots(index=False, follow=True),
        open_graph=OpenGraph(
            title=title,
            description=description,
            site_name=SITE_NAME,
            locale=LOCALE,
        ),
        twitter=TwitterCard(title=title, description=description),
    )


_LISTING_TITLES = {
    "colleges": "Top Colleges in India",
    "exams": "Entrance Exams in India",
    "articles": "Education Articles & News",
}


def _listing_description(entity_type: str, year: int) -> str:
    if entity_type == "colleges":
        return (
            f"Discover top colleges in India {year}. Compare courses, fees, placements, "
            "and rankings to find the best fit for your academic goals."
        )
    if entity_type == "exams":
        return (
            f"Complete list of entrance exams in India {year}. Get exam dates, "
            "eligibility, syllabus, and preparation tips."
        )
    return (
        "Latest education news, college updates, exam notifications, and expert "
        f"articles on {SITE_NAME}."
    )


def generate_listing_metadata(
    entity_type: str,
    facets: Optional[ListingFacets] = None,
) -> MetadataResult:
    """Metadata for the college, exam and article index pages.

    Facets (display names) only apply to college and exam listings; the
    canonical path is the slug codec's listing path for the selected facets.
    """
    if entity_type not in _LISTING_TITLES:
        raise ValueError(f"Unknown listing type: {entity_type!r}")

    year = current_year()
    title = _LISTING_TITLES[entity_type]
    description = _listing_description(entity_type, year)
    canonical_path = f"/{entity_type}"

    if facets is not None and entity_type != "articles":
        label = "Colleges" if entity_type == "colleges" else "Exams"
        place = facets.city or facets.state

        if facets.stream and place:
            title = f"{facets.stream} {label} in {place} {year}"
        elif place:
            title = f"{label} in {place} {year}"
        elif facets.stream:
            title = f"Top {facets.stream} {label} in India {year}"

        state = FilterState(
            stream=slugify(facets.stream) if facets.stream else None,
            city=slugify(facets.city) if facets.city else None,
            state=slugify(facets.state) if facets.state and not facets.city else None,
        )
        canonical_path = build_listing_path(entity_type, state)

    return _build_result(title, description, [], canonical_path, DEFAULT_OG_IMAGE)


_NESTED_FIELDS = ("open_graph", "twitter", "alternates")


def merge_metadata(
    generated: MetadataResult,
    overrides: Union[MetadataResult, Mapping[str, Any]],
) -> MetadataResult:
    """Return *generated* with *overrides* applied.

    Top-level fields are replaced; ``open_graph``, ``twitter`` and
    ``alternates`` are merged one level deep so a partial override keeps the
    generated values it does not mention.
    """
    if isinstance(overrides, MetadataResult):
        overrides = overrides.model_dump(exclude_unset=True)

    merged = generated.model_dump()
    for key, value in overrides.items():
        current = merged.get(key)
        if key in _NESTED_FIELDS and isinstance(value, Mapping) and isinstance(current, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return MetadataResult.model_validate(merged)
