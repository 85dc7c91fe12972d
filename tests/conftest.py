"""
Pytest Configuration and Fixtures

Provides reusable fixtures for testing the Certify Backend.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from certify.core.config import Settings
from certify.main import create_app
from certify.repositories.file_repository import FileCertificateRepository
from certify.schemas.certificate import CandidateIn
from certify.services.certificate_service import CertificateIssuer
from certify.services.email_service import NotificationResult


UPLOADED_URL = "https://res.cloudinary.com/demo/image/upload/certificates/cert.png"


# ==================== Settings Fixtures ====================

@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    """A small blank certificate template."""
    path = tmp_path / "template.png"
    Image.new("RGB", (800, 600), "white").save(path)
    return path


@pytest.fixture
def settings(tmp_path: Path, template_path: Path) -> Settings:
    """
    Settings isolated from the environment.

    Uses Pillow's default font so no font file is needed.
    """
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        ADMIN_PASSWORD="s3cret",
        PERSISTENT_STORAGE_PATH=str(tmp_path / "data"),
        TEMPLATE_PATH=str(template_path),
        FONT_PATH="",
        ALLOWED_ORIGINS="https://admin.example.com/",
        RESEND_RATE_PER_MINUTE=1,
        RESEND_BURST=2,
    )


# ==================== Collaborator Fixtures ====================

@pytest.fixture
def file_repository(settings: Settings) -> FileCertificateRepository:
    return FileCertificateRepository(settings.PERSISTENT_STORAGE_PATH)


@pytest.fixture
def fake_uploader() -> MagicMock:
    """Uploader that always succeeds."""
    uploader = MagicMock()
    uploader.upload = AsyncMock(return_value=UPLOADED_URL)
    return uploader


@pytest.fixture
def fake_notifier() -> MagicMock:
    """Notifier that always reports success."""
    notifier = MagicMock()
    notifier.send_certificate_email = AsyncMock(return_value=NotificationResult(True))
    return notifier


@pytest.fixture
def stub_renderer() -> MagicMock:
    renderer = MagicMock()
    renderer.render.return_value = b"\x89PNG fake"
    return renderer


@pytest.fixture
def issuer(settings, file_repository, fake_uploader, fake_notifier, stub_renderer) -> CertificateIssuer:
    return CertificateIssuer(
        settings,
        file_repository,
        fake_uploader,
        fake_notifier,
        renderer_factory=lambda: stub_renderer,
    )


# ==================== HTTP Client Fixtures ====================

@pytest.fixture
def app(settings, file_repository, fake_uploader, fake_notifier, stub_renderer):
    return create_app(
        settings=settings,
        repository=file_repository,
        uploader=fake_uploader,
        notifier=fake_notifier,
        renderer_factory=lambda: stub_renderer,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_httpx_response():
    """
    Factory fixture to create mock httpx responses.

    Usage:
        response = mock_httpx_response(status_code=200, json_data={"key": "value"})
    """
    def _create_response(status_code: int = 200, json_data: dict = None, text: str = ""):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data or {}
        response.text = text
        return response
    return _create_response


@pytest.fixture
def mock_httpx_client(mock_httpx_response):
    """
    Create a mock httpx.AsyncClient.

    Returns:
        AsyncMock configured for HTTP operations.
    """
    client = AsyncMock()
    client.post = AsyncMock(return_value=mock_httpx_response(
        json_data={"secure_url": UPLOADED_URL}
    ))
    return client


# ==================== Candidate Fixtures ====================

@pytest.fixture
def ada() -> CandidateIn:
    """The worked example candidate."""
    return CandidateIn(
        name="Ada Lovelace",
        hours="40",
        position="Intern",
        start_date="2024-01-01",
        end_date="2024-02-01",
        email="ada@example.com",
    )


@pytest.fixture
def ada_payload() -> dict:
    return {
        "name": "Ada Lovelace",
        "hours": "40",
        "position": "Intern",
        "startDate": "2024-01-01",
        "endDate": "2024-02-01",
        "email": "ada@example.com",
    }
