import logging

from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.cannibalization import (
    CannibalizationReport,
    CannibalizationRequest,
    FilterCanonical,
    FilterCanonicalRequest,
    KeywordOverlap,
    KeywordOverlapRequest,
)
from scholarseo.services.cannibalization import (
    detect_cannibalization,
    detect_keyword_cannibalization,
    get_filter_canonical_strategy,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/cannibalization", tags=["cannibalization"])


@router.post(
    "/filter-canonical",
    response_model=FilterCanonical,
    summary="Canonical path and robots directive for a filter combination",
)
@limiter.limit("60/minute")
async def filter_canonical(request: Request, body: FilterCanonicalRequest) -> FilterCanonical:
    strategy = get_filter_canonical_strategy(body.filter, body.available)
    logger.info(
        "Filter canonical resolved",
        extra={"path": strategy.canonical_path, "should_index": strategy.should_index},
    )
    return strategy


@router.post("/overlap", response_model=KeywordOverlap, summary="Compare two pages' keyword sets")
@limiter.limit("60/minute")
async def overlap(request: Request, body: KeywordOverlapRequest) -> KeywordOverlap:
    return detect_cannibalization(body.first, body.second)


@router.post(
    "/report",
    response_model=CannibalizationReport,
    summary="Find keywords targeted by more than one page",
)
@limiter.limit("10/minute")
async def report(request: Request, body: CannibalizationRequest) -> CannibalizationReport:
    """Site-wide audit: conflicts by severity plus overall recommendations."""
    result = detect_keyword_cannibalization(body.pages)
    logger.info(
        "Cannibalization report built",
        extra={"pages": len(body.pages), "conflicts": len(result.conflicts), "score": result.overall_score},
    )
    return result
