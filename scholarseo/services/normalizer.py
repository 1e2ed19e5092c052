"""Entity normalisation: slugification and per-page-type field extraction.

Each page variant carries a differently shaped payload.  :func:`normalize`
reduces all of them to one :class:`NormalizedEntity` so the metadata, schema
and breadcrumb generators can share the same structural fallbacks.  Only
structural defaults are filled in here (blank strings become ``None``, a
missing location is derived from city/state); narrative fallbacks belong to
the metadata templates.
"""

import logging
import re
import unicodedata
from typing import Callable, Dict, NamedTuple, Optional

from scholarseo.models.page import (
    ArticlePage,
    AuthorPage,
    CollegePage,
    CollegeTabPage,
    ErrorPage,
    ExamPage,
    ExamSiloPage,
    FilterPage,
    StaticPage,
)

logger = logging.getLogger(__name__)


class UnresolvableEntity(LookupError):
    """The page's entity could not be identified from the supplied payload."""

    def __init__(self, page_type: str):
        super().__init__(f"Could not resolve {page_type} entity.")
        self.page_type = page_type


class NormalizedEntity(NamedTuple):
    page_type: str
    entity_id: Optional[int] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    slug: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    published_at: Optional[str] = None
    modified_at: Optional[str] = None
    author_name: Optional[str] = None
    count: Optional[int] = None
    section: Optional[str] = None  # college tab / exam silo key
    resolved: bool = True


def slugify(value: str) -> str:
    """Return a lowercase, ASCII-only, hyphen-separated slug for *value*.

    Returns an empty string when nothing slug-legal survives.
    """
    slug = unicodedata.normalize("NFKD", value)
    slug = slug.encode("ascii", "ignore").decode("ascii")

    # Lowercase and replace runs of non-alphanumeric chars with a single hyphen
    slug = re.sub(r"[^a-z0-9]+", "-", slug.lower())
    return slug.strip("-")


def format_location(city: Optional[str], state: Optional[str]) -> Optional[str]:
    city = _blank_to_none(city)
    state = _blank_to_none(state)
    if city and state:
        return f"{city}, {state}"
    return city or state


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _normalize_college(page) -> NormalizedEntity:
    data = page.data
    name = _blank_to_none(data.college_name)
    return NormalizedEntity(
        page_type=page.type,
        entity_id=data.college_id,
        name=name,
        display_name=name,
        slug=_blank_to_none(data.slug),
        city=_blank_to_none(data.city),
        state=_blank_to_none(data.state),
        location=_blank_to_none(data.location) or format_location(data.city, data.state),
        image=_blank_to_none(data.logo_img),
        section=getattr(data, "tab", None),
        resolved=bool(name) and data.college_id is not None,
    )


def _normalize_exam(page) -> NormalizedEntity:
    data = page.data
    name = _blank_to_none(data.exam_name)
    return NormalizedEntity(
        page_type=page.type,
        entity_id=data.exam_id,
        name=name,
        display_name=_blank_to_none(data.exam_full_name) or name,
        slug=_blank_to_none(data.slug),
        image=_blank_to_none(data.logo_img),
        section=getattr(data, "silo", None),
        resolved=bool(name) and data.exam_id is not None,
    )


def _normalize_article(page: ArticlePage) -> NormalizedEntity:
    data = page.data
    title = _blank_to_none(data.title)
    author_name = _blank_to_none(data.author.author_name) if data.author else None
    return NormalizedEntity(
        page_type=page.type,
        entity_id=data.article_id,
        name=title,
        display_name=title,
        slug=_blank_to_none(data.slug),
        image=_blank_to_none(data.img1_url) or _blank_to_none(data.img2_url),
        published_at=_blank_to_none(data.created_at),
        modified_at=_blank_to_none(data.updated_at),
        author_name=author_name,
        resolved=bool(title) and data.article_id is not None,
    )


def _normalize_author(page: AuthorPage) -> NormalizedEntity:
    data = page.data
    name = _blank_to_none(data.view_name) or _blank_to_none(data.author_name)
    return NormalizedEntity(
        page_type=page.type,
        entity_id=data.author_id,
        name=name,
        display_name=name,
        slug=slugify(name) if name else None,
        image=_blank_to_none(data.image_url),
        count=data.article_count,
        resolved=bool(name) and data.author_id is not None,
    )


def _normalize_filter(page: FilterPage) -> NormalizedEntity:
    data = page.data
    label = "Colleges" if data.entity_type == "college" else "Exams"
    city = _blank_to_none(data.city.name) if data.city else None
    state = _blank_to_none(data.state.name) if data.state else None
    return NormalizedEntity(
        page_type=page.type,
        name=label,
        display_name=label,
        city=city,
        state=state,
        location=format_location(city, state),
        count=data.result_count,
    )


def _normalize_static(page: StaticPage) -> NormalizedEntity:
    title = _blank_to_none(page.data.title)
    return NormalizedEntity(
        page_type=page.type,
        name=title,
        display_name=title,
        image=_blank_to_none(page.data.og_image),
        resolved=bool(title),
    )


def _normalize_error(page: ErrorPage) -> NormalizedEntity:
    return NormalizedEntity(page_type=page.type, resolved=False)


_NORMALIZERS: Dict[type, Callable[..., NormalizedEntity]] = {
    CollegePage: _normalize_college,
    CollegeTabPage: _normalize_college,
    ExamPage: _normalize_exam,
    ExamSiloPage: _normalize_exam,
    ArticlePage: _normalize_article,
    AuthorPage: _normalize_author,
    FilterPage: _normalize_filter,
    StaticPage: _normalize_static,
    ErrorPage: _normalize_error,
}


def normalize(page) -> NormalizedEntity:
    """Extract the shared field set from a page variant.

    Raises:
        ValueError: if *page* is not one of the known page variants.
    """
    try:
        normalizer = _NORMALIZERS[type(page)]
    except KeyError:
        raise ValueError(f"Unknown page type: {getattr(page, 'type', page)!r}") from None

    entity = normalizer(page)
    if not entity.resolved and entity.page_type != "error":
        logger.info("Unresolved %s payload: missing name or id", entity.page_type)
    return entity


def ensure_resolved(entity: NormalizedEntity) -> NormalizedEntity:
    """Return *entity* unchanged, or raise :class:`UnresolvableEntity`."""
    if not entity.resolved:
        raise UnresolvableEntity(entity.page_type)
    return entity
