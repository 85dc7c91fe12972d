"""Certificate repository contract shared by all storage backends."""

from abc import ABC, abstractmethod
from typing import List, Optional

from certify.schemas.certificate import Certificate


# Attributes the repository may change. certId and imageUrl are immutable;
# valid is only reached through revoke (CertificateUpdate does not carry it).
UPDATABLE_FIELDS = frozenset({
    "candidate_name",
    "position",
    "hours",
    "start_date",
    "end_date",
    "email",
    "issue_date",
    "valid",
})


class CertificateRepository(ABC):
    """Create/find/update/delete certificates by certId."""

    name: str = "abstract"

    @abstractmethod
    async def create(self, certificate: Certificate) -> Certificate:
        """Insert a certificate.

        Raises:
            DuplicateCertificateError: If the certId is already stored.
        """

    @abstractmethod
    async def find_one(self, cert_id: str) -> Optional[Certificate]:
        """Return the certificate or None."""

    @abstractmethod
    async def update_fields(self, cert_id: str, changes: dict) -> Certificate:
        """Merge ``changes`` (attribute name -> value) into a certificate.

        Raises:
            NotFoundError: If no certificate matches.
        """

    @abstractmethod
    async def delete(self, cert_id: str) -> None:
        """Remove a certificate permanently.

        Raises:
            NotFoundError: If no certificate matches.
        """

    @abstractmethod
    async def list_all(self) -> List[Certificate]:
        """All certificates, newest first."""

    async def close(self) -> None:
        """Release backend resources."""


def filter_changes(changes: dict) -> dict:
    """Drop keys an update is not allowed to touch, and nulls."""
    return {
        k: v for k, v in changes.items()
        if k in UPDATABLE_FIELDS and v is not None
    }
