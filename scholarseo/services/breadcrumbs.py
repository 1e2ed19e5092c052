"""Breadcrumb trails for every page type.

Every trail starts at ``Home`` and marks exactly one item, the last, as
``current``.  Tab and silo labels come from the lookup tables in
:mod:`scholarseo.config`; the default ``info`` section collapses onto the
entity's own crumb instead of adding a fourth node.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from scholarseo.config import (
    BASE_URL,
    BREADCRUMB_NAME_MAX_LENGTH,
    build_canonical_url,
    resolve_college_tab,
    resolve_exam_silo,
    truncate_text,
)
from scholarseo.models.breadcrumb import BreadcrumbItem
from scholarseo.models.entities import FacetRef
from scholarseo.models.filters import FilterState
from scholarseo.services.normalizer import normalize, slugify
from scholarseo.services.slug_codec import build_listing_path, build_slug_id

_HOME = ("Home", "/")

FacetInput = Union[FacetRef, Mapping[str, str]]


def _trail(*crumbs: Tuple[str, str]) -> List[BreadcrumbItem]:
    """Turn ``(name, href)`` pairs into items, marking only the last as current."""
    last = len(crumbs) - 1
    return [
        BreadcrumbItem(name=name, href=href, current=index == last)
        for index, (name, href) in enumerate(crumbs)
    ]


def build_college_breadcrumb_trail(
    college_name: str,
    college_slug: str,
    tab: Optional[str] = None,
) -> List[BreadcrumbItem]:
    """Home → Colleges → <college> [→ <tab>].

    *college_slug* is the canonical ``<slug>-<id>`` segment.
    """
    root = f"/colleges/{college_slug}"
    crumbs = [_HOME, ("Colleges", "/colleges"), (college_name, root)]
    section = resolve_college_tab(tab)
    if section is not None:
        crumbs.append((section.label, f"{root}{section.path}"))
    return _trail(*crumbs)


def build_exam_breadcrumb_trail(
    exam_name: str,
    exam_slug: str,
    silo: Optional[str] = None,
) -> List[BreadcrumbItem]:
    """Home → Exams → <exam> [→ <silo>]."""
    root = f"/exams/{exam_slug}"
    crumbs = [_HOME, ("Exams", "/exams"), (exam_name, root)]
    section = resolve_exam_silo(silo)
    if section is not None:
        crumbs.append((section.label, f"{root}{section.path}"))
    return _trail(*crumbs)


def build_article_breadcrumb_trail(
    article_title: str,
    article_slug: str,
    category: Optional[str] = None,
) -> List[BreadcrumbItem]:
    """Home → Articles → <title>.

    Articles use a flat taxonomy: *category* is accepted but never becomes a
    crumb.
    """
    return _trail(
        _HOME,
        ("Articles", "/articles"),
        (truncate_text(article_title, BREADCRUMB_NAME_MAX_LENGTH), f"/articles/{article_slug}"),
    )


def _facet(value: Optional[FacetInput]) -> Optional[FacetRef]:
    if value is None or isinstance(value, FacetRef):
        return value
    return FacetRef.model_validate(value)


def _facet_slug(facet: FacetRef) -> str:
    return slugify(facet.slug or facet.name)


def build_filter_breadcrumb_trail(
    entity_type: str,
    filters: Mapping[str, Optional[FacetInput]],
) -> List[BreadcrumbItem]:
    """Home → <Colleges|Exams> [→ <Stream> <label>] [→ <label> in <City|State>].

    *entity_type* is ``colleges``/``exams`` (singular forms are accepted too).
    *filters* maps ``stream``, ``city`` and ``state`` to ``{name, slug}``
    pairs; state is only used when no city is selected.
    """
    root = "exams" if entity_type in ("exam", "exams") else "colleges"
    label = root.capitalize()
    stream = _facet(filters.get("stream"))
    city = _facet(filters.get("city"))
    state = _facet(filters.get("state"))

    crumbs = [_HOME, (label, f"/{root}")]
    selected = FilterState()

    if stream is not None:
        selected = selected.model_copy(update={"stream": _facet_slug(stream)})
        crumbs.append((f"{stream.name} {label}", build_listing_path(root, selected)))

    if city is not None:
        selected = selected.model_copy(update={"city": _facet_slug(city)})
        crumbs.append((f"{label} in {city.name}", build_listing_path(root, selected)))
    elif state is not None:
        selected = selected.model_copy(update={"state": _facet_slug(state)})
        crumbs.append((f"{label} in {state.name}", build_listing_path(root, selected)))

    return _trail(*crumbs)


def build_author_breadcrumb_trail(author_name: str, author_slug: str) -> List[BreadcrumbItem]:
    return _trail(_HOME, ("Authors", "/authors"), (author_name, f"/authors/{author_slug}"))


def build_static_breadcrumb_trail(page_name: str, page_href: str) -> List[BreadcrumbItem]:
    return _trail(_HOME, (page_name, page_href))


def build_college_news_breadcrumb_trail(
    college_name: str,
    college_slug: str,
    news_title: str,
    news_slug: str,
) -> List[BreadcrumbItem]:
    root = f"/colleges/{college_slug}"
    return _trail(
        _HOME,
        ("Colleges", "/colleges"),
        (college_name, root),
        ("News", f"{root}/news"),
        (truncate_text(news_title, BREADCRUMB_NAME_MAX_LENGTH), f"{root}/news/{news_slug}"),
    )


def build_exam_news_breadcrumb_trail(
    exam_name: str,
    exam_slug: str,
    news_title: str,
    news_slug: str,
) -> List[BreadcrumbItem]:
    root = f"/exams/{exam_slug}"
    return _trail(
        _HOME,
        ("Exams", "/exams"),
        (exam_name, root),
        ("News", f"{root}/news"),
        (truncate_text(news_title, BREADCRUMB_NAME_MAX_LENGTH), f"{root}/news/{news_slug}"),
    )


def _is_home(href: str) -> bool:
    return href.rstrip("/") in ("", BASE_URL)


def normalize_trail(items: Iterable[BreadcrumbItem]) -> List[BreadcrumbItem]:
    """Reshape a caller-supplied trail into a well-formed one.

    ``Home`` is prepended when the trail does not start at the site root, and
    the ``current`` flags are recomputed so only the last item carries one.
    """
    crumbs = [(item.name, item.href) for item in items]
    if not crumbs or not _is_home(crumbs[0][1]):
        crumbs.insert(0, _HOME)
    return _trail(*crumbs)


def build_breadcrumbs(page) -> List[BreadcrumbItem]:
    """Return the trail for any page variant.

    An explicit ``page.breadcrumbs`` wins, reshaped by
    :func:`normalize_trail`.  Unresolved entities and error pages get a single
    current ``Home`` crumb.
    """
    if page.breadcrumbs:
        return normalize_trail(page.breadcrumbs)

    entity = normalize(page)
    if not entity.resolved:
        return _trail(_HOME)

    if page.type in ("college", "college-tab"):
        slug_id = build_slug_id(entity.slug, entity.entity_id, "college")
        return build_college_breadcrumb_trail(entity.name, slug_id, entity.section)
    if page.type in ("exam", "exam-silo"):
        slug_id = build_slug_id(entity.slug, entity.entity_id, "exam")
        return build_exam_breadcrumb_trail(entity.name, slug_id, entity.section)
    if page.type == "article":
        slug_id = build_slug_id(entity.slug, entity.entity_id, "article")
        return build_article_breadcrumb_trail(entity.name, slug_id, page.data.category)
    if page.type == "author":
        slug_id = build_slug_id(entity.slug, entity.entity_id, "author")
        return build_author_breadcrumb_trail(entity.name, slug_id)
    if page.type == "filter":
        facets: Dict[str, Optional[FacetRef]] = {
            "stream": page.data.stream,
            "city": page.data.city,
            "state": page.data.state,
        }
        return build_filter_breadcrumb_trail(page.data.entity_type, facets)
    if page.type == "static":
        return build_static_breadcrumb_trail(entity.name, page.data.canonical_path)

    raise ValueError(f"Unknown page type: {page.type!r}")


def _is_absolute(href: str) -> bool:
    parsed = urlparse(href)
    return bool(parsed.scheme or parsed.netloc)


def absolutize_breadcrumbs(crumbs: List[BreadcrumbItem]) -> List[BreadcrumbItem]:
    """Prefix relative hrefs with the site base URL; absolute hrefs pass through."""
    return [
        crumb if _is_absolute(crumb.href)
        else crumb.model_copy(update={"href": build_canonical_url(crumb.href)})
        for crumb in crumbs
    ]
