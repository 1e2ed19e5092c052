"""Internal linking: hub-and-spoke links and related-content discovery.

Every entity page links up to its listing hub, across to its own tabs or
silos, sideways to related entities, and out to the filtered listings that
share its stream or location.  All hrefs are root-relative and built with
the slug codec, so they match the canonical paths used elsewhere.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from scholarseo.config import COLLEGE_TABS, DEFAULT_SECTION, EXAM_SILOS
from scholarseo.models.filters import FilterState
from scholarseo.models.linking import (
    CrossEntityLink,
    EntityLink,
    HubLink,
    HubSpokeLinks,
    LinkCandidate,
    RelatedColleges,
    RelatedItem,
    SpokeLink,
)
from scholarseo.services.normalizer import slugify
from scholarseo.services.slug_codec import build_entity_path, build_listing_path

logger = logging.getLogger(__name__)

CROSS_LINK_STREAM_LIMIT = 2
CROSS_ENTITY_STREAM_LIMIT = 3
SUGGESTION_LIMIT = 6
RELATED_LIMIT = 5
# Colleges ranked at or above this show up as trending
TRENDING_RANK_CUTOFF = 50


def _href(entity_type: str, candidate: LinkCandidate) -> str:
    return build_entity_path(entity_type, candidate.slug or candidate.name, candidate.id)


def _listing_href(entity_type: str, **facets: str) -> str:
    return build_listing_path(entity_type, FilterState(**{k: slugify(v) for k, v in facets.items()}))


def _linkable_streams(streams: Sequence[str], limit: int) -> List[str]:
    return [stream for stream in streams if slugify(stream)][:limit]


def _overlap(first: Iterable[str], second: Iterable[str]) -> int:
    return len(set(first) & set(second))


# ---------------------------------------------------------------------------
# Hub and spoke
# ---------------------------------------------------------------------------

def _child_pages(
    table,
    base_path: str,
    current: Optional[str],
    available: Optional[Sequence[str]],
    include_default: bool,
) -> List[SpokeLink]:
    current = current or DEFAULT_SECTION
    pages = [
        SpokeLink(label=config.label, href=f"{base_path}{config.path}", priority=config.priority)
        for key, config in table.items()
        if key != current
        and (include_default or key != DEFAULT_SECTION)
        and (available is None or key in available)
    ]
    pages.sort(key=lambda page: page.priority, reverse=True)
    return pages


def _entity_links(entity_type: str, related: Iterable[LinkCandidate]) -> List[EntityLink]:
    return [
        EntityLink(id=c.id, name=c.name, href=_href(entity_type, c), location=c.city)
        for c in related
    ]


def college_hub_spoke_links(
    college: LinkCandidate,
    current_tab: Optional[str] = DEFAULT_SECTION,
    available_tabs: Optional[Sequence[str]] = None,
    related: Iterable[LinkCandidate] = (),
) -> HubSpokeLinks:
    """Links for a college page or one of its tabs.

    Child pages are the college's other tabs that have content
    (*available_tabs*, every tab when omitted), highest priority first.
    Cross links point at the stream, city and state listings.
    """
    cross_links = [
        HubLink(label=f"{stream} Colleges", href=_listing_href("college", stream=stream), priority=0.7)
        for stream in _linkable_streams(college.streams, CROSS_LINK_STREAM_LIMIT)
    ]
    if college.city and slugify(college.city):
        cross_links.append(
            HubLink(label=f"Colleges in {college.city}", href=_listing_href("college", city=college.city), priority=0.7)
        )
    if college.state and slugify(college.state):
        cross_links.append(
            HubLink(label=f"Colleges in {college.state}", href=_listing_href("college", state=college.state), priority=0.6)
        )

    return HubSpokeLinks(
        hub_page=HubLink(
            label="All Colleges",
            href=build_listing_path("college"),
            priority=0.9,
            description="Browse all colleges in India",
        ),
        child_pages=_child_pages(COLLEGE_TABS, _href("college", college), current_tab, available_tabs, True),
        related_entities=_entity_links("college", related),
        cross_links=cross_links,
    )


def exam_hub_spoke_links(
    exam: LinkCandidate,
    current_silo: Optional[str] = DEFAULT_SECTION,
    available_silos: Optional[Sequence[str]] = None,
    related: Iterable[LinkCandidate] = (),
) -> HubSpokeLinks:
    """Links for an exam page; the default silo is never a child link."""
    cross_links: List[HubLink] = []
    for stream in _linkable_streams(exam.streams, CROSS_LINK_STREAM_LIMIT):
        cross_links.append(HubLink(label=f"{stream} Exams", href=_listing_href("exam", stream=stream), priority=0.7))
        cross_links.append(
            HubLink(label=f"{stream} Colleges", href=_listing_href("college", stream=stream), priority=0.6)
        )

    return HubSpokeLinks(
        hub_page=HubLink(
            label="All Exams",
            href=build_listing_path("exam"),
            priority=0.9,
            description="Browse all entrance exams in India",
        ),
        child_pages=_child_pages(EXAM_SILOS, _href("exam", exam), current_silo, available_silos, False),
        related_entities=_entity_links("exam", related),
        cross_links=cross_links,
    )


def cross_entity_links(entity_type: str, streams: Sequence[str]) -> List[CrossEntityLink]:
    """College pages link to their streams' exams; exam pages to the colleges."""
    links: List[CrossEntityLink] = []
    for stream in _linkable_streams(streams, CROSS_ENTITY_STREAM_LIMIT):
        if entity_type == "college":
            links.append(
                CrossEntityLink(label=f"{stream} Entrance Exams", href=_listing_href("exam", stream=stream), type="exam")
            )
        else:
            links.append(
                CrossEntityLink(label=f"{stream} Colleges", href=_listing_href("college", stream=stream), type="college")
            )
    return links


# ---------------------------------------------------------------------------
# Related content
# ---------------------------------------------------------------------------

def related_suggestions(
    entity_type: str,
    current: LinkCandidate,
    candidates: Iterable[LinkCandidate],
    limit: int = SUGGESTION_LIMIT,
) -> List[EntityLink]:
    """Suggestion ("you may also like") links: same city scores 3, each shared stream 2."""
    scored = []
    for candidate in candidates:
        if candidate.id == current.id:
            continue
        score = _overlap(current.streams, candidate.streams) * 2
        if current.city and candidate.city == current.city:
            score += 3
        scored.append((score, candidate))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return _entity_links(entity_type, (candidate for _, candidate in scored[:limit]))


def college_relevance(current: LinkCandidate, other: LinkCandidate) -> float:
    score = 0.0
    if current.city and other.city == current.city:
        score += 4
    if current.state and other.state == current.state:
        score += 2
    score += _overlap(current.streams, other.streams) * 3
    if current.college_type and other.college_type == current.college_type:
        score += 2
    if other.ranking is not None and other.ranking <= 100:
        score += (100 - other.ranking) / 20
    return score


def exam_relevance(current: LinkCandidate, other: LinkCandidate) -> float:
    score = float(_overlap(current.streams, other.streams) * 3)
    if current.exam_level and other.exam_level == current.exam_level:
        score += 2
    if current.conducting_body and other.conducting_body == current.conducting_body:
        score += 2
    return score


def article_relevance(current: LinkCandidate, other: LinkCandidate) -> float:
    score = float(_overlap(current.tags, other.tags) * 2)
    if current.category and other.category == current.category:
        score += 5
    return score


_SCORERS: Dict[str, Callable[[LinkCandidate, LinkCandidate], float]] = {
    "college": college_relevance,
    "exam": exam_relevance,
    "article": article_relevance,
}


def _related_item(entity_type: str, candidate: LinkCandidate, score: float) -> RelatedItem:
    return RelatedItem(
        id=candidate.id,
        type=entity_type,
        name=candidate.name,
        href=_href(entity_type, candidate),
        relevance_score=score,
        city=candidate.city,
        state=candidate.state,
        stream=candidate.streams[0] if candidate.streams else None,
        category=candidate.category,
    )


def _top(items: List[RelatedItem], limit: int) -> List[RelatedItem]:
    items.sort(key=lambda item: item.relevance_score, reverse=True)
    return items[:limit]


def rank_related(
    entity_type: str,
    current: LinkCandidate,
    candidates: Iterable[LinkCandidate],
    limit: int = RELATED_LIMIT,
) -> List[RelatedItem]:
    """The *limit* candidates most relevant to *current*, best first.

    Raises:
        ValueError: if *entity_type* has no relevance score.
    """
    try:
        scorer = _SCORERS[entity_type]
    except KeyError:
        raise ValueError(f"No related content for entity type {entity_type!r}.") from None
    items = [
        _related_item(entity_type, candidate, scorer(current, candidate))
        for candidate in candidates
        if candidate.id != current.id
    ]
    return _top(items, limit)


def find_related_colleges(
    current: LinkCandidate,
    candidates: Iterable[LinkCandidate],
    max_results: int = RELATED_LIMIT,
) -> RelatedColleges:
    """Related colleges grouped by why they are related.

    The location group matches on city, or on state when the current college
    has no city.  Trending colleges are the top-ranked ones regardless of
    similarity.
    """
    others = [c for c in candidates if c.id != current.id]

    def ranked(pool: Iterable[LinkCandidate]) -> List[RelatedItem]:
        return _top([_related_item("college", c, college_relevance(current, c)) for c in pool], max_results)

    result = RelatedColleges()
    if current.streams:
        result.same_stream = ranked(c for c in others if _overlap(current.streams, c.streams))
    if current.city:
        result.same_location = ranked(c for c in others if c.city == current.city)
    elif current.state:
        result.same_location = ranked(c for c in others if c.state == current.state)
    if current.college_type:
        result.same_type = ranked(c for c in others if c.college_type == current.college_type)
    result.trending = _top(
        [
            _related_item("college", c, 100 - c.ranking)
            for c in others
            if c.ranking is not None and c.ranking <= TRENDING_RANK_CUTOFF
        ],
        max_results,
    )
    logger.debug(
        "Related colleges found",
        extra={"college_id": current.id, "same_stream": len(result.same_stream), "trending": len(result.trending)},
    )
    return result
