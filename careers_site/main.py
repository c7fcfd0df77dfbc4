"""FastAPI application entry point for the careers site backend."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from careers_site.config import Settings, get_settings, resolve_mail_settings, setup_logging
from careers_site.errors import RelayError
from careers_site.models.response_models import ErrorResponse
from careers_site.routers.careers_router import router as careers_router
from careers_site.sources.postings_source import build_posting_source

# Initialise logging early
setup_logging()
logger = logging.getLogger(__name__)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render relay failures as ``{"success": false, "error": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=str(exc) or RelayError.default_message).model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        mail_settings = resolve_mail_settings(settings)
        application.state.mail_settings = mail_settings
        application.state.posting_source = build_posting_source(settings.listings_url)
        logger.info(
            "Careers site starting — smtp_host=%s port=%d implicit_tls=%s mail_configured=%s",
            mail_settings.host or "<unset>",
            mail_settings.port,
            mail_settings.implicit_tls,
            mail_settings.is_complete,
        )
        yield

    application = FastAPI(
        title="Careers Site",
        description=(
            "Job listings for the careers page and the application intake relay "
            "that forwards each submission by e-mail."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS: the page is served from the hosting platform
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(careers_router)
    application.add_exception_handler(RelayError, relay_error_handler)
    application.add_exception_handler(Exception, unexpected_error_handler)

    return application


app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "careers_site.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=True,
    )
