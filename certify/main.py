"""
Certify Backend - FastAPI Application

Main entry point for the application.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from certify.api.v1 import router as api_router
from certify.core.config import Settings, get_settings
from certify.core.exceptions import CertifyError
from certify.core.http_client import close_http_client
from certify.middleware.rate_limit import RateLimiter
from certify.repositories import build_repository
from certify.repositories.base import CertificateRepository
from certify.schemas.layout import load_layout
from certify.services.certificate_service import CertificateIssuer
from certify.services.email_service import EmailNotifier
from certify.services.render_service import CertificateRenderer
from certify.services.storage_service import CloudinaryUploader


logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# ============== Exception Handlers ==============

async def certify_error_handler(request: Request, exc: CertifyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are a 400, like a missing required field."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Invalid data format",
            "errors": jsonable_errors(exc),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Server error"},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


# ============== Application Factory ==============

def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[CertificateRepository] = None,
    uploader: Optional[CloudinaryUploader] = None,
    notifier: Optional[EmailNotifier] = None,
    renderer_factory: Optional[Callable[[], CertificateRenderer]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Collaborators not passed in are built from ``settings`` at startup.

    Args:
        settings: Configuration, defaults to the cached environment settings.
        repository: Certificate store override.
        uploader: Image storage override.
        notifier: E-mail sender override.
        renderer_factory: Render asset loader override.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Loads configuration-derived collaborators once and stores them on
        ``app.state``; closes them on shutdown.
        """
        logging.basicConfig(level=settings.LOG_LEVEL.upper())
        logger.info("Starting Certify Backend...")

        layout = load_layout(settings.LAYOUT_PATH)
        repo = repository or await build_repository(settings)
        mailer = notifier or EmailNotifier(settings)

        app.state.settings = settings
        app.state.repository = repo
        app.state.notifier = mailer
        app.state.issuer = CertificateIssuer(
            settings,
            repo,
            uploader or CloudinaryUploader(settings),
            mailer,
            layout=layout,
            renderer_factory=renderer_factory,
        )
        app.state.resend_limiter = RateLimiter(
            requests_per_minute=settings.RESEND_RATE_PER_MINUTE,
            burst_capacity=settings.RESEND_BURST,
            trust_forwarded_for=settings.RESEND_TRUST_FORWARDED_FOR,
            max_clients=settings.RESEND_MAX_CLIENTS,
        )
        if not settings.storage_configured:
            logger.warning("Cloudinary is not configured; certificates will use the placeholder image URL")

        yield

        logger.info("Shutting down Certify Backend...")
        await repo.close()
        await close_http_client()

    app = FastAPI(
        title="Certify Backend",
        description="Issues, stores, verifies and revokes training completion certificates.",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Configure CORS
    origins = settings.cors_origins_list
    logger.info(f"CORS allow-list: {origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CertifyError, certify_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """
        Health check endpoint.

        Returns:
            dict: Health status, environment and storage backend.
        """
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": VERSION,
            "storage": settings.STORAGE_BACKEND,
        }

    @app.get("/", tags=["Root"])
    async def root() -> dict:
        return {
            "message": "Welcome to Certify Backend API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
