"""
API Dependencies

Reusable dependencies that hand route functions the collaborators built
once at startup and stored on ``app.state``.
"""

from fastapi import Request

from certify.core.config import Settings
from certify.repositories.base import CertificateRepository
from certify.services.certificate_service import CertificateIssuer
from certify.services.email_service import EmailNotifier


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> CertificateRepository:
    """Repository selected by STORAGE_BACKEND at startup."""
    return request.app.state.repository


def get_issuer(request: Request) -> CertificateIssuer:
    return request.app.state.issuer


def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier


async def limit_resend_rate(request: Request) -> None:
    """
    Apply the resend-email rate limiter.

    Raises:
        HTTPException: 429 when the client's bucket is empty.
    """
    await request.app.state.resend_limiter(request)
