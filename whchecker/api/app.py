"""FastAPI server for WHchecker message analysis"""

from __future__ import annotations

from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from whchecker.analysis.catalog import get_catalog
from whchecker.api.routes.analyze import router as analyze_router
from whchecker.api.routes.health import router as health_router
from whchecker.config import APP_VERSION
from whchecker.observability.logging import get_logger
from whchecker.observability.telemetry import counter, log_event

# Load environment variables from .env file
load_dotenv()

app = FastAPI(title="WHchecker API", version=APP_VERSION)

# Initialize logger
logger = get_logger(__name__)


# Custom validation error handler to prevent information leakage
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Custom validation error handler that doesn't echo the submitted message back.
    """
    logger.warning("Validation error on %s: %d error(s)", request.url.path, len(exc.errors()))
    counter("api.validation_errors")

    return JSONResponse(
        status_code=422,
        content={
            "detail": "Invalid request format. Please check your request and try again.",
            "error_count": len(exc.errors()),
            "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
        },
    )


# Fail at startup, not on the first message, if the rule catalog is broken
catalog = get_catalog()

# Include routers
app.include_router(health_router)
app.include_router(analyze_router)

log_event("api.startup", service="whchecker", version=APP_VERSION, catalog=catalog.source)


@app.get("/")
def root() -> dict[str, Any]:
    return {
        "service": "WHchecker API",
        "version": APP_VERSION,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "analyze": "/api/analyze",
            "analyze_batch": "/api/analyze/batch",
        },
    }
