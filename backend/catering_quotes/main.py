# backend/catering_quotes/main.py

import logging
import os
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import api_catering
from .core.config import settings
from .core.observability import setup_logging

# Configure logging before creating any loggers
setup_logging()
logger = logging.getLogger(__name__)

_BOOT_TS = time.time()

OPENAPI_TAGS = [
    {"name": "catering", "description": "Quote pricing, delivery distance and add-on catalog lookups."},
    {"name": "health", "description": "Liveness checks for the load balancer."},
]

# Always use ORJSONResponse for JSON payloads to ensure consistent, fast
# serialization across all endpoints.
app = FastAPI(
    title="Catering Quote API",
    version="1.0.0",
    description="Prices catering quotes and checks delivery eligibility.",
    openapi_tags=OPENAPI_TAGS,
    default_response_class=ORJSONResponse,
)


@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    """Return JSON responses for HTTP errors and log them."""
    try:
        response = await call_next(request)
    except StarletteHTTPException as exc:  # return the original status and detail
        logger.error(
            "HTTP error %s at %s: %s", exc.status_code, request.url.path, exc.detail
        )
        response = ORJSONResponse(
            status_code=exc.status_code, content={"detail": exc.detail}
        )
    except Exception as exc:  # pragma: no cover - generic handler
        logger.exception("Unhandled error: %s", exc)
        response = ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )
    return response


@app.get("/healthz/live", tags=["health"])
async def health_live():
    """Liveness check: process can respond."""
    return {
        "status": "ok",
        "kind": "live",
        "uptime_s": round(time.time() - _BOOT_TS, 1),
        "pid": os.getpid(),
    }


def _jsonable_errors(errors):
    # ``ctx`` may hold the raw exception object, which orjson cannot encode.
    out = []
    for err in errors:
        item = dict(err)
        if "ctx" in item:
            item["ctx"] = {k: str(v) for k, v in item["ctx"].items()}
        out.append(item)
    return out


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors with details and log them for debugging."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _jsonable_errors(errors)},
    )


api_prefix = settings.API_V1_STR  # usually something like "/api/v1"


# ─── CATERING ROUTES (under /api/v1/catering) ───────────────────────────────────────
app.include_router(
    api_catering.router, prefix=f"{api_prefix}/catering", tags=["catering"]
)


@app.get("/")
async def root():
    return {"message": "Welcome to Catering Quote API"}
