# Fellowship Enrichment Main Entry Point
"""FastAPI application serving the verse enrichment endpoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fellowship_api.config import get_settings
from fellowship_api.dependencies import close_services
from fellowship_api.errors import EnrichmentServiceError
from fellowship_api.middleware.correlation import CorrelationIdFilter, CorrelationMiddleware
from fellowship_api.models.api import ErrorResponse
from fellowship_api.routers import enrich, health

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s",
)
for _handler in logging.getLogger().handlers:
    _handler.addFilter(CorrelationIdFilter())
logger = logging.getLogger("fellowship.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.service_name} v{settings.api_version}")
    yield
    logger.info(f"Shutting down {settings.service_name}")
    await close_services()


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Add middleware (order matters - first added = outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.add_middleware(CorrelationMiddleware)

app.include_router(health.router, tags=["health"])
app.include_router(enrich.router, tags=["enrichment"])


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(EnrichmentServiceError)
async def enrichment_error_handler(request: Request, exc: EnrichmentServiceError) -> JSONResponse:
    """
    Render pipeline errors as ErrorResponse with the error's status code.

    Client faults are logged at INFO, upstream and internal faults at ERROR.
    """
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return _error_response(
        exc.status_code,
        ErrorResponse(error=exc.message, code=exc.code, detail=exc.detail, verse_id=exc.verse_id),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client faults (400), not 422."""
    return _error_response(
        400,
        ErrorResponse(error="Invalid request body", code="BAD_REQUEST", detail=str(exc.errors())),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected errors."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(
        500,
        ErrorResponse(error="Internal server error", code="INTERNAL_ERROR", detail=str(exc)),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fellowship_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
