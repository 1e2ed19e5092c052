import logging

from fastapi import APIRouter, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from scholarseo.models.validation import ContentValidation, ValidateRequest
from scholarseo.services.validators import validate_content

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["validation"])


@router.post("/validate", response_model=ContentValidation, summary="Score page content quality")
@limiter.limit("30/minute")
async def validate(request: Request, body: ValidateRequest) -> ContentValidation:
    """Advisory quality report: score, issues, recommendations and an index hint."""
    report = validate_content(
        title=body.title,
        description=body.description,
        content=body.content,
        h1=body.h1,
        faqs=body.faqs,
        word_count=body.word_count,
    )
    logger.info("Content validated", extra={"score": report.score, "should_index": report.should_index})
    return report
