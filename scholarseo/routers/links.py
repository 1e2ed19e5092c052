import logging
from typing import List, Literal

from fastapi import APIRouter, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.linking import (
    CollegeLinksRequest,
    CrossEntityLink,
    EntityLink,
    ExamLinksRequest,
    HubSpokeLinks,
    RelatedColleges,
    RelatedItem,
    RelatedRequest,
)
from scholarseo.services.linking import (
    college_hub_spoke_links,
    cross_entity_links,
    exam_hub_spoke_links,
    find_related_colleges,
    rank_related,
    related_suggestions,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/links", tags=["links"])


@router.post("/college", response_model=HubSpokeLinks, summary="Hub-and-spoke links for a college page")
@limiter.limit("60/minute")
async def college_links(request: Request, body: CollegeLinksRequest) -> HubSpokeLinks:
    logger.info("College links requested", extra={"college_id": body.college.id, "tab": body.tab})
    return college_hub_spoke_links(body.college, body.tab, body.available_tabs, body.related)


@router.post("/exam", response_model=HubSpokeLinks, summary="Hub-and-spoke links for an exam page")
@limiter.limit("60/minute")
async def exam_links(request: Request, body: ExamLinksRequest) -> HubSpokeLinks:
    logger.info("Exam links requested", extra={"exam_id": body.exam.id, "silo": body.silo})
    return exam_hub_spoke_links(body.exam, body.silo, body.available_silos, body.related)


@router.post("/related", response_model=List[RelatedItem], summary="Candidates ranked by relevance")
@limiter.limit("30/minute")
async def related(request: Request, body: RelatedRequest) -> List[RelatedItem]:
    return rank_related(body.entity_type, body.current, body.candidates, body.limit)


@router.post(
    "/related-colleges",
    response_model=RelatedColleges,
    summary="Related colleges grouped by stream, location, type and ranking",
)
@limiter.limit("30/minute")
async def related_colleges(request: Request, body: RelatedRequest) -> RelatedColleges:
    return find_related_colleges(body.current, body.candidates, body.limit)


@router.post("/suggestions", response_model=List[EntityLink], summary="'You may also like' links")
@limiter.limit("30/minute")
async def suggestions(request: Request, body: RelatedRequest) -> List[EntityLink]:
    return related_suggestions(body.entity_type, body.current, body.candidates, body.limit)


@router.get("/cross/{entity_type}", response_model=List[CrossEntityLink], summary="Links to the other entity type")
@limiter.limit("60/minute")
async def cross(
    request: Request,
    entity_type: Literal["college", "exam"],
    stream: List[str] = Query([], description="Streams of the current entity; repeat for several"),
) -> List[CrossEntityLink]:
    return cross_entity_links(entity_type, stream)
