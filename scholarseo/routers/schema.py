import logging

from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.entities import CourseData
from scholarseo.models.page import PageVariant
from scholarseo.models.schema_graph import MergeRequest, SchemaGraph
from scholarseo.services.normalizer import ensure_resolved, normalize
from scholarseo.services.schema import (
    generate_course_schema,
    generate_global_schema,
    generate_page_schema,
    merge_schemas,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/schema", tags=["schema"])


@router.post(
    "",
    response_model=SchemaGraph,
    response_model_by_alias=True,
    summary="Generate the JSON-LD graph for a page",
)
@limiter.limit("60/minute")
async def page_schema(request: Request, page: PageVariant, strict: bool = False) -> SchemaGraph:
    logger.info("Schema request received", extra={"page_type": page.type, "strict": strict})
    if strict:
        ensure_resolved(normalize(page))
    return SchemaGraph.model_validate(generate_page_schema(page))


@router.get(
    "/global",
    response_model=SchemaGraph,
    response_model_by_alias=True,
    summary="Organization and WebSite graph shared by every page",
)
@limiter.limit("60/minute")
async def global_schema(request: Request) -> SchemaGraph:
    return SchemaGraph.model_validate(generate_global_schema())


@router.post(
    "/merge",
    response_model=SchemaGraph,
    response_model_by_alias=True,
    summary="Merge graphs and bare nodes into one graph",
)
@limiter.limit("60/minute")
async def merge(request: Request, body: MergeRequest) -> SchemaGraph:
    """Flatten the supplied graphs, in order, under a single ``@context``."""
    return SchemaGraph.model_validate(merge_schemas(*body.schemas))


@router.post(
    "/course",
    response_model=SchemaGraph,
    response_model_by_alias=True,
    summary="Course and program graph for a course page",
)
@limiter.limit("60/minute")
async def course_schema(request: Request, course: CourseData) -> SchemaGraph:
    logger.info("Course schema request received", extra={"course": course.course_name})
    return SchemaGraph.model_validate(generate_course_schema(course))
