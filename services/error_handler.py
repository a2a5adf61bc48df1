"""Exception handlers registered on the FastAPI app.

Domain errors become structured JSON responses; anything unexpected is logged
with its traceback and answered with a generic 500 so internals never leak.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from services.errors import BlogError

logger = logging.getLogger(__name__)


async def handle_blog_error(request: Request, exc: BlogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
    )


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": "internal_error"},
    )
