"""
Certify - Models Module

This module exports all SQLAlchemy models for the application.
Import Base for Alembic migrations.
"""

from certify.core.database import Base

from certify.models.certificate import CertificateRecord

__all__ = [
    "Base",
    "CertificateRecord",
]
