from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from scholarseo.models.entities import FacetRef, FilterPageData
from scholarseo.models.metadata import Robots

Severity = Literal["high", "medium", "low"]


class FilterCanonical(BaseModel):
    """Canonical path and indexability of one filter combination."""

    canonical_path: str
    canonical_url: str
    specificity: int
    is_canonical: bool
    should_index: bool
    robots: Robots
    reason: Optional[str] = None
    # Narrower combination the page should defer to, when one is known
    more_specific_path: Optional[str] = None


class AvailableFacets(BaseModel):
    """Facet values that still return results under the current selection."""

    streams: List[FacetRef] = []
    cities: List[FacetRef] = []
    states: List[FacetRef] = []


class FilterCanonicalRequest(BaseModel):
    filter: FilterPageData
    available: Optional[AvailableFacets] = None


class PageKeywords(BaseModel):
    url: str
    title: str = ""
    keywords: List[str] = []
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None


class KeywordOverlap(BaseModel):
    has_cannibalization: bool
    overlapping_keywords: List[str]
    recommendation: str


class KeywordOverlapRequest(BaseModel):
    first: PageKeywords
    second: PageKeywords


class CompetingPage(BaseModel):
    url: str
    title: str
    relevance_score: int


class KeywordConflict(BaseModel):
    keyword: str
    competing_pages: List[CompetingPage]
    severity: Severity
    recommendation: str


class CannibalizationReport(BaseModel):
    conflicts: List[KeywordConflict]
    recommendations: List[str]
    overall_score: int = Field(ge=0, le=100)


class CannibalizationRequest(BaseModel):
    pages: List[PageKeywords] = Field(min_length=1)
