import logging

from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.metadata import MetadataResult
from scholarseo.models.page import PageVariant
from scholarseo.models.requests import ErrorMetadataRequest, ListingMetadataRequest
from scholarseo.services.metadata import (
    generate_error_metadata,
    generate_listing_metadata,
    generate_page_metadata,
)
from scholarseo.services.normalizer import ensure_resolved, normalize

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/metadata", tags=["metadata"])


@router.post("", response_model=MetadataResult, summary="Generate page metadata")
@limiter.limit("60/minute")
async def page_metadata(request: Request, page: PageVariant, strict: bool = False) -> MetadataResult:
    """Return title, description, robots, canonical, OpenGraph and Twitter data for *page*.

    An entity that cannot be resolved normally yields not-found metadata;
    with ``strict=true`` it is answered with a 404 instead.
    """
    logger.info("Metadata request received", extra={"page_type": page.type, "strict": strict})
    if strict:
        ensure_resolved(normalize(page))
    return generate_page_metadata(page)


@router.post("/error", response_model=MetadataResult, summary="Metadata for not-found and error pages")
@limiter.limit("60/minute")
async def error_metadata(request: Request, body: ErrorMetadataRequest) -> MetadataResult:
    return generate_error_metadata(body.kind, body.entity_type)


@router.post("/listing", response_model=MetadataResult, summary="Metadata for listing pages")
@limiter.limit("60/minute")
async def listing_metadata(request: Request, body: ListingMetadataRequest) -> MetadataResult:
    logger.info("Listing metadata request received", extra={"entity_type": body.entity_type})
    return generate_listing_metadata(body.entity_type, body.facets)
