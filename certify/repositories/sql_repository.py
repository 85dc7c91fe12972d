"""
SQL Certificate Repository

Async SQLAlchemy implementation over the ``certificates`` table.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from certify.core.exceptions import DuplicateCertificateError, NotFoundError
from certify.models.certificate import CertificateRecord
from certify.repositories.base import CertificateRepository, filter_changes
from certify.schemas.certificate import Certificate


logger = logging.getLogger(__name__)


class SqlCertificateRepository(CertificateRepository):
    """Repository for certificate CRUD operations on a relational database."""

    name = "sql"

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ) -> None:
        self.session_maker = session_maker
        self.engine = engine

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

    async def create(self, certificate: Certificate) -> Certificate:
        record = CertificateRecord(**certificate.model_dump())
        async with self.session_maker() as db:
            db.add(record)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise DuplicateCertificateError(
                    f"Certificate ID {certificate.cert_id} already exists"
                ) from e
        logger.info(f"[DB] Inserted certificate {certificate.cert_id} for {certificate.email}")
        return certificate

    async def find_one(self, cert_id: str) -> Optional[Certificate]:
        async with self.session_maker() as db:
            result = await db.execute(
                select(CertificateRecord).where(CertificateRecord.cert_id == cert_id)
            )
            record = result.scalar_one_or_none()
            if record is None:
                return None
            return Certificate.model_validate(record)

    async def update_fields(self, cert_id: str, changes: dict) -> Certificate:
        async with self.session_maker() as db:
            result = await db.execute(
                select(CertificateRecord).where(CertificateRecord.cert_id == cert_id)
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise NotFoundError("Certificate not found")

            for field, value in filter_changes(changes).items():
                setattr(record, field, value)
            await db.commit()
            await db.refresh(record)
            return Certificate.model_validate(record)

    async def delete(self, cert_id: str) -> None:
        async with self.session_maker() as db:
            result = await db.execute(
                delete(CertificateRecord).where(CertificateRecord.cert_id == cert_id)
            )
            await db.commit()
            if result.rowcount == 0:
                raise NotFoundError("Certificate not found")

    async def list_all(self) -> List[Certificate]:
        async with self.session_maker() as db:
            result = await db.execute(
                select(CertificateRecord).order_by(CertificateRecord.id.desc())
            )
            return [Certificate.model_validate(r) for r in result.scalars().all()]
