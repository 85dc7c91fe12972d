"""
Certificate Service

Issuance pipeline (single and bulk) plus the registry operations used by
the admin and public routes.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from certify.core.config import Settings
from certify.core.exceptions import NotFoundError, UpstreamError, ValidationError
from certify.core.identifiers import generate_certificate_id
from certify.models.enums import IssueStage, IssueStatus
from certify.repositories.base import CertificateRepository
from certify.schemas.certificate import (
    CandidateIn,
    Certificate,
    CertificateUpdate,
    IssueResult,
    VerifyResponse,
)
from certify.schemas.layout import CertificateLayout, default_layout
from certify.services.email_service import EmailNotifier, NotificationResult
from certify.services.render_service import CertificateRenderer
from certify.services.storage_service import CloudinaryUploader


logger = logging.getLogger(__name__)


def format_issue_date(moment: datetime) -> str:
    """Localized (en-US style) issue date, e.g. 1/15/2024."""
    return f"{moment.month}/{moment.day}/{moment.year}"


def mask_email(email: str) -> str:
    """
    Hide most of the local part of an address.

    Keeps the first two characters and the domain: ``ada@example.com``
    becomes ``ad***@example.com``. Addresses too short to mask are
    returned unchanged.
    """
    local, sep, domain = email.rpartition("@")
    if not sep or len(local) < 3:
        return email
    return f"{local[:2]}***@{domain}"


# ============== Issuance Pipeline ==============

class CertificateIssuer:
    """
    Runs the per-record pipeline:
    ID -> render -> upload -> persist -> notify.

    Records are processed strictly one after another. The e-mail goes out
    only after the record is stored; a failed e-mail never undoes it.
    """

    def __init__(
        self,
        settings: Settings,
        repository: CertificateRepository,
        uploader: CloudinaryUploader,
        notifier: EmailNotifier,
        layout: Optional[CertificateLayout] = None,
        renderer_factory: Optional[Callable[[], CertificateRenderer]] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings
        self.repository = repository
        self.uploader = uploader
        self.notifier = notifier
        self.layout = layout or default_layout()
        self._renderer_factory = renderer_factory or self._load_renderer
        self._id_factory = id_factory or (lambda: generate_certificate_id(settings.CERT_ID_PREFIX))
        self._clock = clock

    def _load_renderer(self) -> CertificateRenderer:
        return CertificateRenderer.load(
            self.settings.TEMPLATE_PATH,
            self.layout,
            font_path=self.settings.FONT_PATH,
        )

    async def load_renderer(self) -> CertificateRenderer:
        """
        Load shared render assets.

        Raises:
            ConfigError: Missing template or font; fatal for the whole batch.
        """
        return await asyncio.to_thread(self._renderer_factory)

    async def _notify(self, certificate: Certificate) -> NotificationResult:
        try:
            return await self.notifier.send_certificate_email(
                certificate.email,
                certificate.candidate_name,
                certificate.image_url,
                cert_id=certificate.cert_id,
            )
        except Exception as e:
            logger.exception(f"Notifier crashed for {certificate.email}")
            return NotificationResult(False, str(e))

    async def issue(
        self,
        candidate: CandidateIn,
        renderer: CertificateRenderer,
    ) -> Tuple[Certificate, NotificationResult]:
        """
        Issue one certificate.

        Args:
            candidate: Candidate fields.
            renderer: Shared renderer for the current batch.

        Returns:
            Tuple of (stored certificate, notification outcome).

        Raises:
            Exception: Whatever the failing stage raised; the stage is logged.
        """
        stage = IssueStage.PENDING
        cert_id = self._id_factory()
        try:
            stage = IssueStage.RENDERING
            logger.debug(f"[{cert_id}] {stage.value}")
            values = {
                "name": candidate.name,
                "hours": candidate.hours,
                "position": candidate.position,
                "startDate": candidate.start_date,
                "endDate": candidate.end_date,
                "certId": cert_id,
            }
            image = await asyncio.to_thread(
                renderer.render, values, self.settings.verification_url(cert_id)
            )

            stage = IssueStage.UPLOADING
            logger.debug(f"[{cert_id}] {stage.value}")
            image_url = await self.uploader.upload(
                image,
                folder=self.settings.CLOUDINARY_FOLDER,
                filename=f"{cert_id}.png",
            )

            certificate = Certificate(
                cert_id=cert_id,
                candidate_name=candidate.name,
                position=candidate.position,
                hours=candidate.hours,
                start_date=candidate.start_date,
                end_date=candidate.end_date,
                email=candidate.email,
                issue_date=format_issue_date(self._clock()),
                image_url=image_url,
                valid=True,
            )

            stage = IssueStage.PERSISTING
            logger.debug(f"[{cert_id}] {stage.value}")
            stored = await self.repository.create(certificate)

            # Only a stored certificate is announced
            stage = IssueStage.NOTIFYING
            logger.debug(f"[{cert_id}] {stage.value}")
            notification = await self._notify(certificate)
        except Exception:
            logger.error(f"[{cert_id}] {IssueStage.FAILED.value} at {stage.value} for {candidate.email}")
            raise

        logger.debug(f"[{cert_id}] {IssueStage.SUCCEEDED.value}")
        return stored, notification

    async def generate_bulk(self, candidates: Sequence[CandidateIn]) -> List[IssueResult]:
        """
        Issue certificates for a batch, in input order.

        Every record is attempted (no pre-filtering of empty names or
        emails). A failure is recorded for that record only.

        Args:
            candidates: Candidate records.

        Returns:
            List[IssueResult]: One result per input record, same order.

        Raises:
            ConfigError: If the shared render assets cannot be loaded.
        """
        renderer = await self.load_renderer()
        results: List[IssueResult] = []

        for candidate in candidates:
            try:
                certificate, notification = await self.issue(candidate, renderer)
            except Exception as e:
                logger.exception(f"Certificate generation failed for {candidate.email}")
                results.append(IssueResult(
                    email=candidate.email,
                    status=IssueStatus.FAILED.value,
                    error=getattr(e, "message", None) or str(e) or e.__class__.__name__,
                ))
                continue

            results.append(IssueResult(
                email=candidate.email,
                status=IssueStatus.SUCCESS.value,
                cert_id=certificate.cert_id,
                notified=notification.success,
                notification_error=notification.error,
            ))

        succeeded = sum(1 for r in results if r.status == IssueStatus.SUCCESS.value)
        logger.info(f"Bulk generation finished: {succeeded}/{len(results)} succeeded")
        return results

    async def generate_single(self, candidate: CandidateIn) -> Tuple[Certificate, NotificationResult]:
        """
        Issue one certificate from the admin form.

        Raises:
            ValidationError: If name or email is missing.
            ConfigError: If render assets are missing.
            UpstreamError: If the image upload fails.
        """
        if not candidate.name or not candidate.email:
            raise ValidationError("Missing required fields")

        renderer = await self.load_renderer()
        return await self.issue(candidate, renderer)


# ============== Registry Operations ==============

async def get_certificate(repository: CertificateRepository, cert_id: str) -> Certificate:
    """
    Get certificate by ID.

    Raises:
        NotFoundError: If absent.
    """
    certificate = await repository.find_one(cert_id)
    if certificate is None:
        raise NotFoundError("Certificate not found")
    return certificate


async def verify_certificate(repository: CertificateRepository, cert_id: str) -> VerifyResponse:
    """
    Public verification view of a certificate.

    Revoked certificates verify as invalid without their details.

    Raises:
        NotFoundError: If absent.
    """
    certificate = await get_certificate(repository, cert_id)

    if not certificate.valid:
        return VerifyResponse(valid=False, message="Certificate has been revoked")

    return VerifyResponse(
        valid=True,
        candidate_name=certificate.candidate_name,
        position=certificate.position,
        hours=certificate.hours,
        issue_date=certificate.issue_date,
        start_date=certificate.start_date,
        end_date=certificate.end_date,
    )


async def resend_email(
    repository: CertificateRepository,
    notifier: EmailNotifier,
    cert_id: str,
) -> Tuple[bool, str]:
    """
    Send the certificate e-mail again to its stored address.

    Returns:
        Tuple of (sent, message). The message names the masked address on
        success or the reason on failure.

    Raises:
        NotFoundError: If absent.
        UpstreamError: If the e-mail could not be sent.
    """
    certificate = await get_certificate(repository, cert_id)

    if not certificate.valid:
        return False, "Certificate has been revoked"

    result = await notifier.send_certificate_email(
        certificate.email,
        certificate.candidate_name,
        certificate.image_url,
        cert_id=certificate.cert_id,
    )
    if not result.success:
        raise UpstreamError("Failed to send email")

    return True, f"Certificate sent to {mask_email(certificate.email)}"


async def list_registry(repository: CertificateRepository) -> List[Certificate]:
    return await repository.list_all()


async def revoke_certificate(repository: CertificateRepository, cert_id: str) -> Certificate:
    """Mark a certificate invalid; every other field stays as stored."""
    certificate = await repository.update_fields(cert_id, {"valid": False})
    logger.info(f"Revoked certificate {cert_id}")
    return certificate


async def update_certificate(
    repository: CertificateRepository,
    cert_id: str,
    update: CertificateUpdate,
) -> Certificate:
    """Apply an admin field edit. The rendered image is not regenerated."""
    return await repository.update_fields(cert_id, update.changes())


async def delete_certificate(repository: CertificateRepository, cert_id: str) -> None:
    await repository.delete(cert_id)
    logger.info(f"Deleted certificate {cert_id}")
