"""
Admin Routes

Login stub, certificate generation (single, bulk JSON, bulk CSV) and
registry management.
"""

import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse

from certify.api.deps import get_app_settings, get_issuer, get_repository
from certify.core.config import Settings
from certify.repositories.base import CertificateRepository
from certify.schemas.certificate import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    CandidateIn,
    CertificateUpdate,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegistryResponse,
    SingleGenerateResponse,
)
from certify.services import certificate_service
from certify.services.certificate_service import CertificateIssuer
from certify.services.csv_import import parse_candidates_csv


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Exchange the admin password for the admin token",
)
async def login(
    body: LoginRequest,
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """
    Compare the submitted password against ADMIN_PASSWORD.

    The token is a constant with no expiry; there is no server-side session.
    An empty ADMIN_PASSWORD disables login entirely.
    """
    expected = settings.ADMIN_PASSWORD
    if expected and secrets.compare_digest(body.password.encode(), expected.encode()):
        return LoginResponse(success=True, token=settings.ADMIN_TOKEN)

    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"success": False, "message": "Invalid Password"},
    )


@router.post(
    "/generate-bulk",
    response_model=BulkGenerateResponse,
    response_model_exclude_none=True,
    summary="Issue certificates for a list of candidates",
)
async def generate_bulk(
    body: BulkGenerateRequest,
    issuer: Annotated[CertificateIssuer, Depends(get_issuer)],
) -> BulkGenerateResponse:
    """
    Run the issuance pipeline for every candidate, in order.

    Per-record failures are reported in ``results``; the request itself
    only fails when the certificate template or font cannot be loaded.
    """
    results = await issuer.generate_bulk(body.students)
    return BulkGenerateResponse(success=True, results=results)


@router.post(
    "/generate-bulk-csv",
    response_model=BulkGenerateResponse,
    response_model_exclude_none=True,
    summary="Issue certificates from an uploaded CSV file",
)
async def generate_bulk_csv(
    file: Annotated[UploadFile, File(description="CSV with name,hours,position,startDate,endDate,email")],
    issuer: Annotated[CertificateIssuer, Depends(get_issuer)],
) -> BulkGenerateResponse:
    candidates = parse_candidates_csv(await file.read())
    results = await issuer.generate_bulk(candidates)
    return BulkGenerateResponse(success=True, results=results)


@router.post(
    "/generate-single",
    response_model=SingleGenerateResponse,
    response_model_exclude_none=True,
    summary="Issue one certificate",
)
async def generate_single(
    body: CandidateIn,
    issuer: Annotated[CertificateIssuer, Depends(get_issuer)],
) -> SingleGenerateResponse:
    """
    Issue a single certificate.

    Raises:
        ValidationError: 400 if name or email is missing.
    """
    certificate, notification = await issuer.generate_single(body)
    return SingleGenerateResponse(
        success=True,
        certificate=certificate,
        notified=notification.success,
        notification_error=notification.error,
    )


@router.get(
    "/registry",
    response_model=RegistryResponse,
    summary="List all certificates, newest first",
)
async def registry(
    repository: Annotated[CertificateRepository, Depends(get_repository)],
) -> RegistryResponse:
    certificates = await certificate_service.list_registry(repository)
    return RegistryResponse(success=True, certificates=certificates)


@router.post(
    "/revoke/{cert_id}",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="Revoke a certificate",
)
async def revoke(
    cert_id: str,
    repository: Annotated[CertificateRepository, Depends(get_repository)],
) -> MessageResponse:
    await certificate_service.revoke_certificate(repository, cert_id)
    return MessageResponse(success=True)


@router.put(
    "/update/{cert_id}",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="Edit stored certificate fields",
)
async def update(
    cert_id: str,
    body: CertificateUpdate,
    repository: Annotated[CertificateRepository, Depends(get_repository)],
) -> MessageResponse:
    """
    Merge the submitted fields into the stored record.

    Only the stored values change; the rendered image and its URL stay as
    issued.
    """
    await certificate_service.update_certificate(repository, cert_id, body)
    return MessageResponse(success=True)


@router.delete(
    "/delete/{cert_id}",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="Delete a certificate permanently",
)
async def delete(
    cert_id: str,
    repository: Annotated[CertificateRepository, Depends(get_repository)],
) -> MessageResponse:
    await certificate_service.delete_certificate(repository, cert_id)
    return MessageResponse(success=True)
