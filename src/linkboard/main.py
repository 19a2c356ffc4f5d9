# src/linkboard/main.py
"""Main entry point for the Linkboard application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from linkboard.api.v1 import captcha_router, links_router, votes_router
from linkboard.api.v1.dependencies import close_verification_gateway
from linkboard.core.settings import settings
from linkboard.services.errors import LinkboardError

logger = logging.getLogger("linkboard")


def configure_logging() -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Initialize FastAPI app
app = FastAPI(
    title="Linkboard API",
    description="Anonymous link voting guarded by CAPTCHA sessions",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(captcha_router)
app.include_router(links_router)
app.include_router(votes_router)


@app.exception_handler(LinkboardError)
async def linkboard_error_handler(request: Request, exc: LinkboardError) -> JSONResponse:
    """Render service errors with their machine-readable reason code."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed requests before any I/O happens."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "invalid_request", "detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def backend_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface persistent-store failures as a 500; never retried here."""
    logger.error("Backend failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "backend_error", "detail": "Error talking to the database"},
    )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_verification_gateway()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Linkboard API",
        "version": settings.app_version,
        "description": "Anonymous link voting guarded by CAPTCHA sessions",
        "docs": "/docs",
        "redoc": "/redoc",
    }


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run("linkboard.main:app", host="0.0.0.0", port=8000, reload=settings.debug)


if __name__ == "__main__":
    run()
