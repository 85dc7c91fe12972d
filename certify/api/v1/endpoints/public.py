"""
Public Routes

Certificate verification and e-mail resend, reachable without login.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from certify.api.deps import get_notifier, get_repository, limit_resend_rate
from certify.core.exceptions import NotFoundError
from certify.repositories.base import CertificateRepository
from certify.schemas.certificate import MessageResponse, VerifyResponse
from certify.services import certificate_service
from certify.services.email_service import EmailNotifier


router = APIRouter(prefix="/public", tags=["Public"])


@router.get(
    "/verify/{cert_id}",
    response_model=VerifyResponse,
    response_model_exclude_none=True,
    summary="Verify certificate",
)
async def verify(
    cert_id: str,
    repository: Annotated[CertificateRepository, Depends(get_repository)],
):
    """
    Verify a certificate by ID.

    Public endpoint for verification links. The image URL is never
    returned. Revoked certificates answer ``valid: false``.
    """
    try:
        return await certificate_service.verify_certificate(repository, cert_id)
    except NotFoundError as e:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"valid": False, "message": e.message},
        )


@router.post(
    "/resend-email/{cert_id}",
    response_model=MessageResponse,
    dependencies=[Depends(limit_resend_rate)],
    summary="Send the certificate e-mail again",
)
async def resend_email(
    cert_id: str,
    repository: Annotated[CertificateRepository, Depends(get_repository)],
    notifier: Annotated[EmailNotifier, Depends(get_notifier)],
) -> MessageResponse:
    """
    Resend the certificate link to the address on record.

    The response shows the address masked (``ad***@example.com``).
    """
    sent, message = await certificate_service.resend_email(repository, notifier, cert_id)
    return MessageResponse(success=sent, message=message)
