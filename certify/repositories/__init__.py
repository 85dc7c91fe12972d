"""
Certify - Repositories Module

Storage backends behind the CertificateRepository contract.
"""

import logging

from certify.core.config import Settings
from certify.core.exceptions import ConfigError
from certify.repositories.base import CertificateRepository
from certify.repositories.file_repository import FileCertificateRepository
from certify.repositories.sql_repository import SqlCertificateRepository


logger = logging.getLogger(__name__)


async def build_repository(settings: Settings) -> CertificateRepository:
    """
    Select the storage backend at startup.

    Args:
        settings: Application settings (STORAGE_BACKEND decides).

    Returns:
        CertificateRepository: Ready-to-use repository.

    Raises:
        ConfigError: If the backend name is unknown.
    """
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "file":
        logger.info("Using flat-file certificate storage")
        return FileCertificateRepository(settings.PERSISTENT_STORAGE_PATH)

    if backend == "sql":
        from certify.core.database import create_engine, create_session_maker, init_db

        logger.info("Using SQL certificate storage")
        engine = create_engine(settings.DATABASE_URL)
        await init_db(engine)
        return SqlCertificateRepository(create_session_maker(engine), engine=engine)

    raise ConfigError(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}' (expected file or sql)")


__all__ = [
    "CertificateRepository",
    "FileCertificateRepository",
    "SqlCertificateRepository",
    "build_repository",
]
