"""
Certify - Schemas Module

Pydantic models for request/response validation and render layout.
"""

from certify.schemas.certificate import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    CandidateIn,
    Certificate,
    CertificateUpdate,
    IssueResult,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegistryResponse,
    SingleGenerateResponse,
    VerifyResponse,
)
from certify.schemas.layout import (
    CertificateLayout,
    FieldPlacement,
    QRPlacement,
    default_layout,
    load_layout,
)

__all__ = [
    # Certificates
    "Certificate",
    "CertificateUpdate",
    "CandidateIn",
    "BulkGenerateRequest",
    "BulkGenerateResponse",
    "IssueResult",
    "SingleGenerateResponse",
    "VerifyResponse",
    "RegistryResponse",
    # Auth
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    # Layout
    "CertificateLayout",
    "FieldPlacement",
    "QRPlacement",
    "default_layout",
    "load_layout",
]
