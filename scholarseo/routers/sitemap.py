import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.sitemap import ChunkedSitemap, PriorityFactors, PriorityResult, SitemapRequest
from scholarseo.services.sitemap import (
    calculate_dynamic_priority,
    chunk_sitemap,
    generate_sitemap_xml,
    optimal_sitemap_order,
    static_sitemap_entries,
    suggest_change_freq,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/sitemap", tags=["sitemap"])

XML_MEDIA_TYPE = "application/xml"


@router.post("", response_model=ChunkedSitemap, summary="Build sitemap files and their index")
@limiter.limit("10/minute")
async def build_sitemap(request: Request, body: SitemapRequest) -> ChunkedSitemap:
    """Order *urls* by priority and split them into sitemap-sized chunks."""
    result = chunk_sitemap(optimal_sitemap_order(body.urls), body.name)
    logger.info("Sitemap built", extra={"sitemap": body.name, "urls": len(body.urls), "chunks": len(result.chunks)})
    return result


@router.get("/static.xml", summary="Sitemap of the site's static pages")
@limiter.limit("30/minute")
async def static_sitemap(request: Request) -> Response:
    return Response(content=generate_sitemap_xml(static_sitemap_entries()), media_type=XML_MEDIA_TYPE)


@router.post("/priority", response_model=PriorityResult, summary="Priority and change frequency for one URL")
@limiter.limit("60/minute")
async def priority(request: Request, factors: PriorityFactors) -> PriorityResult:
    return PriorityResult(
        priority=calculate_dynamic_priority(factors),
        changefreq=suggest_change_freq(factors),
    )
