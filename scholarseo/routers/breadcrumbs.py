import logging
from typing import List

from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.breadcrumb import BreadcrumbItem
from scholarseo.models.page import PageVariant
from scholarseo.services.breadcrumbs import absolutize_breadcrumbs, build_breadcrumbs

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["breadcrumbs"])


@router.post("/breadcrumbs", response_model=List[BreadcrumbItem], summary="Build a breadcrumb trail")
@limiter.limit("60/minute")
async def breadcrumbs(request: Request, page: PageVariant, absolute: bool = False) -> List[BreadcrumbItem]:
    """Return the root-to-leaf trail for *page*; ``absolute=true`` prefixes the site URL."""
    logger.info("Breadcrumb request received", extra={"page_type": page.type, "absolute": absolute})
    trail = build_breadcrumbs(page)
    return absolutize_breadcrumbs(trail) if absolute else trail
