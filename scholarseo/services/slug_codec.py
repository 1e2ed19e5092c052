"""Slug codec: filter state <-> listing URL segment, and ``<slug>-<id>`` parsing.

Listing grammar
---------------
A filter state is encoded as ``keyword-value`` segments joined by ``_``::

    stream-engineering_city-new-delhi_type-government_type-private_fee-2-5-lakh

Facets always appear in the order stream, city, state, course group
(``for``), institute type (``type``) and fee range (``fee``).  Multi-valued
facets repeat their segment once per value, sorted by the facet's declared
option list.  Values are slugified to ``[a-z0-9-]``, so the ``_`` separator
can never occur inside a value and two different states never share a slug.

Entity slugs
------------
Detail pages use ``<slug>-<id>``.  The id is the last hyphen-delimited run of
digits; every trailing ``-<digits>`` group is stripped from the slug so that
slugs damaged by an earlier double encoding (``iit-delhi-123-123``) still
resolve to the same canonical form.
"""

import re
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple
from urllib.parse import unquote

from scholarseo.models.filters import FilterState
from scholarseo.services.normalizer import slugify


class InvalidSlug(ValueError):
    """A URL segment could not be parsed; callers treat it as "not found"."""


class SlugId(NamedTuple):
    slug: str
    id: int


SEGMENT_SEPARATOR = "_"

# (FilterState field, URL keyword) in canonical encoding order
_FACETS: Tuple[Tuple[str, str], ...] = (
    ("stream", "stream"),
    ("city", "city"),
    ("state", "state"),
    ("course_group", "for"),
    ("type_of_institute", "type"),
    ("fee_range", "fee"),
)
_KEYWORD_TO_FACET: Dict[str, str] = {keyword: facet for facet, keyword in _FACETS}
_MULTI_VALUED = frozenset({"type_of_institute", "fee_range"})

TYPE_OF_INSTITUTE_OPTIONS = (
    "government",
    "private",
    "deemed",
    "autonomous",
    "public-private",
)
FEE_RANGE_OPTIONS = (
    "below-1-lakh",
    "1-2-lakh",
    "2-5-lakh",
    "5-10-lakh",
    "above-10-lakh",
)
_DECLARED_OPTIONS: Dict[str, Tuple[str, ...]] = {
    "type_of_institute": TYPE_OF_INSTITUTE_OPTIONS,
    "fee_range": FEE_RANGE_OPTIONS,
}

LISTING_ROOTS = ("colleges", "exams")
_ENTITY_ROOTS = {
    "college": "colleges",
    "exam": "exams",
    "article": "articles",
    "author": "authors",
}

_TRAILING_IDS_RE = re.compile(r"(?:-\d+)+$")
_LAST_ID_RE = re.compile(r"-(\d+)$")


# ---------------------------------------------------------------------------
# Filter state
# ---------------------------------------------------------------------------

def _canonical_values(facet: str, values: Iterable[str]) -> List[str]:
    """Slugify, de-duplicate and sort *values* by the facet's declared options.

    Values outside the declared list sort after it, alphabetically.
    """
    options = _DECLARED_OPTIONS[facet]
    slugs = {slugify(v) for v in values} - {""}
    return sorted(
        slugs,
        key=lambda v: (options.index(v) if v in options else len(options), v),
    )


def _canonical_single(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return slugify(value) or None


def normalize_filters(filters: FilterState) -> FilterState:
    """Return the canonical form of *filters* (slugified, de-duplicated, ordered)."""
    return FilterState(
        stream=_canonical_single(filters.stream),
        city=_canonical_single(filters.city),
        state=_canonical_single(filters.state),
        course_group=_canonical_single(filters.course_group),
        type_of_institute=_canonical_values("type_of_institute", filters.type_of_institute),
        fee_range=_canonical_values("fee_range", filters.fee_range),
    )


def encode(filters: FilterState) -> str:
    """Encode *filters* as a canonical listing slug (``""`` for no filters)."""
    canonical = normalize_filters(filters)
    segments: List[str] = []
    for facet, keyword in _FACETS:
        value = getattr(canonical, facet)
        if not value:
            continue
        if facet in _MULTI_VALUED:
            segments.extend(f"{keyword}-{v}" for v in value)
        else:
            segments.append(f"{keyword}-{value}")
    return SEGMENT_SEPARATOR.join(segments)


def decode(segment: str, strip_id: bool = False) -> FilterState:
    """Parse a listing slug produced by :func:`encode`.

    Segments are accepted in any order; the result is always normalised, so
    ``encode(decode(s))`` yields the canonical slug.  With *strip_id* a
    trailing ``-<id>`` run (as used by detail pages) is removed first.

    Raises:
        InvalidSlug: on an unknown facet keyword, an empty value, or two
            different values for a single-valued facet.
    """
    value = unquote(segment).strip().strip("/")
    if strip_id:
        value = _TRAILING_IDS_RE.sub("", value)
    if not value:
        return FilterState()

    single: Dict[str, str] = {}
    multi: Dict[str, List[str]] = {facet: [] for facet in _MULTI_VALUED}

    for part in value.split(SEGMENT_SEPARATOR):
        keyword, sep, raw = part.partition("-")
        facet = _KEYWORD_TO_FACET.get(keyword)
        if facet is None:
            raise InvalidSlug(f"Unrecognized facet token '{keyword}' in '{segment}'.")
        facet_value = slugify(raw) if sep else ""
        if not facet_value:
            raise InvalidSlug(f"Facet '{keyword}' has no value in '{segment}'.")

        if facet in _MULTI_VALUED:
            multi[facet].append(facet_value)
        elif single.setdefault(facet, facet_value) != facet_value:
            raise InvalidSlug(f"Facet '{keyword}' selected twice in '{segment}'.")

    return normalize_filters(FilterState(**single, **multi))


def _listing_root(entity_type: str) -> str:
    root = _ENTITY_ROOTS.get(entity_type, entity_type)
    if root not in LISTING_ROOTS:
        raise ValueError(f"No filtered listing for entity type {entity_type!r}.")
    return root


def build_listing_path(entity_type: str, filters: Optional[FilterState] = None) -> str:
    """Return ``/colleges`` or ``/colleges/<encoded filters>`` (same for exams)."""
    root = _listing_root(entity_type)
    slug = encode(filters) if filters is not None else ""
    return f"/{root}/{slug}" if slug else f"/{root}"


def parse_listing_path(path: str) -> Tuple[str, FilterState]:
    """Split a listing path into its root (``colleges``/``exams``) and filter state."""
    value = unquote(path).strip().strip("/")
    root, _, rest = value.partition("/")
    if root not in LISTING_ROOTS:
        raise InvalidSlug(f"'{path}' is not a listing path.")
    return root, decode(rest)


# ---------------------------------------------------------------------------
# Entity slugs
# ---------------------------------------------------------------------------

def clean_slug(slug: Optional[str]) -> str:
    """Strip every trailing ``-<digits>`` group from *slug*."""
    if not slug:
        return ""
    return _TRAILING_IDS_RE.sub("", slug)


def parse_slug_id(slug_id: str) -> SlugId:
    """Split ``<slug>-<id>`` into its parts.

    Raises:
        InvalidSlug: if there is no trailing id or nothing precedes it.
    """
    value = unquote(slug_id).strip().strip("/")
    match = _LAST_ID_RE.search(value)
    if not match:
        raise InvalidSlug(f"'{slug_id}' has no trailing id.")
    slug = clean_slug(value)
    if not slug:
        raise InvalidSlug(f"'{slug_id}' has an id but no slug.")
    return SlugId(slug=slug, id=int(match.group(1)))


def build_slug_id(slug: Optional[str], entity_id: int, fallback: str) -> str:
    """Return the canonical ``<slug>-<id>`` for an entity.

    Any id-like suffix already present on *slug* is dropped before the
    canonical id is appended, so the result is stable under repetition.
    """
    base = clean_slug(slugify(slug or "")) or fallback
    return f"{base}-{entity_id}"


def build_entity_path(entity_type: str, slug: Optional[str], entity_id: int) -> str:
    root = _ENTITY_ROOTS[entity_type]
    return f"/{root}/{build_slug_id(slug, entity_id, entity_type)}"


def build_college_path(slug: Optional[str], college_id: int) -> str:
    return build_entity_path("college", slug, college_id)


def build_exam_path(slug: Optional[str], exam_id: int) -> str:
    return build_entity_path("exam", slug, exam_id)


def build_article_path(slug: Optional[str], article_id: int) -> str:
    return build_entity_path("article", slug, article_id)


def build_author_path(name: Optional[str], author_id: int) -> str:
    return build_entity_path("author", name, author_id)
