import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from scholarseo.routers.breadcrumbs import router as breadcrumbs_router
from scholarseo.routers.cannibalization import router as cannibalization_router
from scholarseo.routers.links import router as links_router
from scholarseo.routers.metadata import limiter, router as metadata_router
from scholarseo.routers.schema import router as schema_router
from scholarseo.routers.sitemap import router as sitemap_router
from scholarseo.routers.slugs import router as slugs_router
from scholarseo.routers.validate import router as validate_router
from scholarseo.services.metadata import ENTITY_LABELS, generate_error_metadata
from scholarseo.services.normalizer import UnresolvableEntity
from scholarseo.services.slug_codec import InvalidSlug

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="ScholarSEO – SEO Generation API",
    description="Generates metadata, JSON-LD graphs, breadcrumbs and filter slugs for college and exam pages.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def _not_found(detail: str, entity_type=None) -> JSONResponse:
    metadata = generate_error_metadata("not-found", entity_type)
    return JSONResponse(
        status_code=404,
        content={"detail": detail, "metadata": metadata.model_dump(mode="json")},
    )


@app.exception_handler(InvalidSlug)
async def invalid_slug_handler(request: Request, exc: InvalidSlug) -> JSONResponse:
    logger.warning("Invalid slug for %s: %s", request.url.path, exc)
    return _not_found(str(exc))


@app.exception_handler(UnresolvableEntity)
async def unresolvable_entity_handler(request: Request, exc: UnresolvableEntity) -> JSONResponse:
    logger.warning("Unresolvable %s entity for %s", exc.page_type, request.url.path)
    return _not_found(str(exc), ENTITY_LABELS.get(exc.page_type))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(metadata_router)
app.include_router(schema_router)
app.include_router(breadcrumbs_router)
app.include_router(slugs_router)
app.include_router(validate_router)
app.include_router(cannibalization_router)
app.include_router(sitemap_router)
app.include_router(links_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from ScholarSEO"}
