"""Filter-page canonical strategy and keyword cannibalization checks.

Filtered listings compete with each other and with entity pages for the same
queries.  :func:`get_filter_canonical_strategy` decides whether a filter
combination deserves to be indexed, :func:`generate_unique_filter_keywords`
gives each combination a keyword set no broader combination shares, and
:func:`detect_keyword_cannibalization` reports keywords targeted by more than
one page.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence

from scholarseo.config import MIN_FILTER_RESULTS, build_canonical_url, current_year
from scholarseo.models.cannibalization import (
    AvailableFacets,
    CannibalizationReport,
    CompetingPage,
    FilterCanonical,
    KeywordConflict,
    KeywordOverlap,
    PageKeywords,
    Severity,
)
from scholarseo.models.entities import FacetRef, FilterPageData
from scholarseo.models.filters import FilterState
from scholarseo.models.metadata import Robots
from scholarseo.services.normalizer import slugify
from scholarseo.services.slug_codec import build_listing_path

logger = logging.getLogger(__name__)

_LISTING_ROOTS = {"college": "colleges", "exam": "exams"}

# Share of the smaller keyword set two pages may have in common
OVERLAP_THRESHOLD = 0.5
ALTERNATIVE_KEYWORDS_MAX_COUNT = 5
# A conflict family with more keywords than this earns its own recommendation
PATTERN_CONFLICT_LIMIT = 3

_SEVERITY_ORDER: Dict[str, int] = {"high": 0, "medium": 1, "low": 2}
_HIGH_VALUE_RE = re.compile(
    r"\b(college|university|admission|exam|cutoff|fees|placements)\b",
    re.IGNORECASE,
)
_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Filter canonicals
# ---------------------------------------------------------------------------

def _facet_slug(facet: Optional[FacetRef]) -> Optional[str]:
    if facet is None:
        return None
    return slugify(facet.slug or facet.name) or None


def filter_state_for(data: FilterPageData) -> FilterState:
    """The codec state behind a filter page; state is dropped when a city is set."""
    return FilterState(
        stream=_facet_slug(data.stream),
        city=_facet_slug(data.city),
        state=None if data.city else _facet_slug(data.state),
    )


def filter_specificity(data: FilterPageData) -> int:
    """Stream counts once, a city twice, a state (without city) once."""
    level = 1 if data.stream else 0
    if data.city:
        level += 2
    elif data.state:
        level += 1
    return level


def _listing_path(data: FilterPageData, state: FilterState) -> str:
    return build_listing_path(_LISTING_ROOTS[data.entity_type], state)


def find_more_specific_canonical(
    data: FilterPageData,
    available: AvailableFacets,
) -> Optional[str]:
    """Path of a narrower combination that returns the same results, if any.

    A missing stream is filled in when exactly one stream is available; a
    state without a city is replaced by the city when exactly one city is
    available.
    """
    state = filter_state_for(data)

    if data.stream is None and len(available.streams) == 1:
        return _listing_path(data, state.model_copy(update={"stream": _facet_slug(available.streams[0])}))

    if data.state is not None and data.city is None and len(available.cities) == 1:
        narrower = state.model_copy(update={"city": _facet_slug(available.cities[0]), "state": None})
        return _listing_path(data, narrower)

    return None


def _noindex(path: str, specificity: int, reason: str, more_specific: Optional[str] = None) -> FilterCanonical:
    return FilterCanonical(
        canonical_path=path,
        canonical_url=build_canonical_url(path),
        specificity=specificity,
        is_canonical=more_specific is None,
        should_index=False,
        robots=Robots(index=False, follow=True),
        reason=reason,
        more_specific_path=more_specific,
    )


def get_filter_canonical_strategy(
    data: FilterPageData,
    available: Optional[AvailableFacets] = None,
) -> FilterCanonical:
    """Decide the canonical path and robots directive for a filter page.

    Empty and thin result sets (fewer than ``MIN_FILTER_RESULTS``) are never
    indexed; an unknown ``result_count`` is not held against the page.  When
    *available* shows that a narrower combination returns the same results,
    the page defers to it and is not indexed either.  Links are always
    followed.
    """
    path = _listing_path(data, filter_state_for(data))
    specificity = filter_specificity(data)
    count = data.result_count

    if count == 0:
        return _noindex(path, specificity, "No results for this filter combination")
    if count is not None and count < MIN_FILTER_RESULTS:
        return _noindex(path, specificity, f"Only {count} results - thin content")

    more_specific = find_more_specific_canonical(data, available) if available else None
    if more_specific is not None:
        return _noindex(path, specificity, "More specific filter combination exists", more_specific)

    return FilterCanonical(
        canonical_path=path,
        canonical_url=build_canonical_url(path),
        specificity=specificity,
        is_canonical=True,
        should_index=True,
        robots=Robots(index=True, follow=True),
    )


def generate_unique_filter_keywords(data: FilterPageData) -> List[str]:
    """Keywords specific to this facet combination; empty without facets."""
    label = _LISTING_ROOTS[data.entity_type]
    stream = data.stream.name if data.stream else None
    city = data.city.name if data.city else None
    state = data.state.name if data.state else None

    if stream and city:
        keywords = [
            f"{stream} {label} in {city}",
            f"best {stream.lower()} {label} {city}",
            f"top {stream.lower()} {label} in {city}",
        ]
    elif stream and state:
        keywords = [f"{stream} {label} in {state}", f"{state} {stream.lower()} {label}"]
    elif stream:
        keywords = [
            f"{stream} {label}",
            f"best {stream.lower()} {label} in India",
            f"top {stream.lower()} {label}",
        ]
    elif city:
        keywords = [f"{label} in {city}", f"best {label} in {city}", f"top {label} {city}"]
    elif state:
        keywords = [f"{label} in {state}", f"{state} {label}"]
    else:
        keywords = []
    return keywords


# ---------------------------------------------------------------------------
# Keyword overlap between pages
# ---------------------------------------------------------------------------

def detect_cannibalization(first: PageKeywords, second: PageKeywords) -> KeywordOverlap:
    """Compare two pages' keyword sets, case-insensitively.

    The pages cannibalize each other when they share more than half of the
    smaller set.
    """
    first_set = {k.lower() for k in first.keywords}
    second_set = {k.lower() for k in second.keywords}
    overlapping = [k for k in dict.fromkeys(k.lower() for k in first.keywords) if k in second_set]

    smaller = min(len(first_set), len(second_set))
    ratio = len(overlapping) / smaller if smaller else 0.0

    if ratio > OVERLAP_THRESHOLD:
        return KeywordOverlap(
            has_cannibalization=True,
            overlapping_keywords=overlapping,
            recommendation=(
                f"Consider consolidating {first.url} and {second.url} "
                "or differentiating their target keywords"
            ),
        )
    return KeywordOverlap(
        has_cannibalization=False,
        overlapping_keywords=overlapping,
        recommendation="No significant keyword overlap detected",
    )


def normalize_keyword(keyword: str) -> str:
    keyword = _WHITESPACE_RE.sub(" ", keyword.lower().strip())
    return _NON_WORD_RE.sub("", keyword)


def keyword_relevance(keyword: str, page: PageKeywords) -> int:
    """0-100 score of how strongly *page* targets *keyword*."""
    score = 50
    if keyword.lower() in page.title.lower():
        score += 30

    normalized = [normalize_keyword(k) for k in page.keywords]
    target = normalize_keyword(keyword)
    if target in normalized:
        position = normalized.index(target)
        if position == 0:
            score += 20
        elif position <= 2:
            score += 10
    return min(100, score)


def _severity(page_count: int, keyword: str) -> Severity:
    if page_count >= 4:
        return "high"
    if page_count >= 3:
        return "medium"
    if _HIGH_VALUE_RE.search(keyword):
        return "medium"
    return "low"


def _conflict_recommendation(keyword: str, ranked: Sequence[PageKeywords]) -> str:
    winner, losers = ranked[0], ranked[1:]
    if len(losers) == 1:
        return f'Keep "{keyword}" on {winner.url}, remove or modify on {losers[0].url}'
    return f'Keep "{keyword}" on {winner.url}, consider using different keywords on {len(losers)} other pages'


def _overall_recommendations(conflicts: Iterable[KeywordConflict]) -> List[str]:
    conflicts = list(conflicts)
    recommendations: List[str] = []

    high = sum(1 for c in conflicts if c.severity == "high")
    medium = sum(1 for c in conflicts if c.severity == "medium")
    if high:
        recommendations.append(f"Address {high} high-severity keyword conflicts immediately")
    if medium:
        recommendations.append(f"Review {medium} medium-severity conflicts for optimization")

    if sum(1 for c in conflicts if "college" in c.keyword) > PATTERN_CONFLICT_LIMIT:
        recommendations.append(
            "Consider creating more specific college landing pages (by city, stream, course) "
            "to reduce generic keyword competition"
        )
    if sum(1 for c in conflicts if "exam" in c.keyword) > PATTERN_CONFLICT_LIMIT:
        recommendations.append(
            "Differentiate exam pages by focusing on specific aspects (syllabus, dates, results) "
            "in titles and keywords"
        )

    return recommendations or ["No significant keyword cannibalization detected"]


def detect_keyword_cannibalization(pages: Iterable[PageKeywords]) -> CannibalizationReport:
    """Report every normalized keyword that more than one page targets.

    Conflicts are ordered high, medium, low severity; the overall score is
    the share of distinct keywords (0-100) that only one page targets.
    """
    keyword_pages: Dict[str, List[PageKeywords]] = {}
    for page in pages:
        for keyword in dict.fromkeys(normalize_keyword(k) for k in page.keywords):
            if keyword:
                keyword_pages.setdefault(keyword, []).append(page)

    conflicts: List[KeywordConflict] = []
    for keyword, competing in keyword_pages.items():
        if len(competing) < 2:
            continue
        ranked = sorted(competing, key=lambda p: keyword_relevance(keyword, p), reverse=True)
        conflicts.append(
            KeywordConflict(
                keyword=keyword,
                competing_pages=[
                    CompetingPage(url=p.url, title=p.title, relevance_score=keyword_relevance(keyword, p))
                    for p in competing
                ],
                severity=_severity(len(competing), keyword),
                recommendation=_conflict_recommendation(keyword, ranked),
            )
        )
    conflicts.sort(key=lambda c: _SEVERITY_ORDER[c.severity])

    total = len(keyword_pages)
    score = round((total - len(conflicts)) / total * 100) if total else 100
    if conflicts:
        logger.info("Keyword cannibalization found", extra={"conflicts": len(conflicts), "keywords": total})

    return CannibalizationReport(
        conflicts=conflicts,
        recommendations=_overall_recommendations(conflicts),
        overall_score=score,
    )


def suggest_alternative_keywords(
    keyword: str,
    name: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    stream: Optional[str] = None,
    year: Optional[int] = None,
) -> List[str]:
    """Location, year, stream and name variants of a contested keyword."""
    alternatives: List[str] = []
    if city:
        alternatives += [f"{keyword} {city}", f"{keyword} in {city}"]
    elif state:
        alternatives.append(f"{keyword} {state}")
    alternatives.append(f"{keyword} {year or current_year()}")
    if stream:
        alternatives.append(f"{stream} {keyword}")
    if name:
        alternatives.append(f"{name} {keyword}")
    return alternatives[:ALTERNATIVE_KEYWORDS_MAX_COUNT]
