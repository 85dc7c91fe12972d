"""
Certificate Model

Issued completion certificates, looked up by their human-readable certId.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from certify.core.database import Base


class CertificateRecord(Base):
    """
    Certificate row for the relational backend.

    The integer primary key only gives insertion order; ``cert_id`` is the
    public lookup key and carries a unique constraint.

    Attributes:
        id: Surrogate primary key (insertion order).
        cert_id: Public certificate ID, e.g. HF-2024-1234.
        candidate_name: Name printed on the certificate.
        position: Role held during the program.
        hours: Completed hours, free text.
        start_date: Program start, free text.
        end_date: Program end, free text.
        email: Recipient address.
        issue_date: Localized issue date string.
        image_url: Remote URL of the rendered certificate.
        valid: False once revoked.
        created_at: Insertion timestamp.
    """

    __tablename__ = "certificates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cert_id: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        index=True,
        nullable=False,
    )
    candidate_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    position: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    hours: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    start_date: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    end_date: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    issue_date: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    valid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<CertificateRecord(cert_id={self.cert_id}, valid={self.valid})>"
