import logging
from typing import Literal

from fastapi import APIRouter, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.filters import FilterState
from scholarseo.models.requests import EncodeResponse, SlugIdResponse
from scholarseo.services import slug_codec

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/slugs", tags=["slugs"])


@router.post("/encode", response_model=EncodeResponse, summary="Encode a filter selection as a URL segment")
@limiter.limit("120/minute")
async def encode(
    request: Request,
    filters: FilterState,
    entity_type: Literal["colleges", "exams"] = "colleges",
) -> EncodeResponse:
    return EncodeResponse(
        slug=slug_codec.encode(filters),
        path=slug_codec.build_listing_path(entity_type, filters),
    )


@router.get("/decode", response_model=FilterState, summary="Decode a listing URL segment")
@limiter.limit("120/minute")
async def decode(request: Request, segment: str = Query("", description="Encoded filter segment")) -> FilterState:
    """Parse *segment*; an unrecognised or conflicting segment is a 404."""
    return slug_codec.decode(segment)


@router.get("/entity/{slug_id}", response_model=SlugIdResponse, summary="Split a <slug>-<id> segment")
@limiter.limit("120/minute")
async def entity(request: Request, slug_id: str) -> SlugIdResponse:
    parsed = slug_codec.parse_slug_id(slug_id)
    return SlugIdResponse(slug=parsed.slug, id=parsed.id)
