"""
Certificate Schemas

Pydantic models for certificate records, admin requests and API responses.
JSON uses camelCase (certId, candidateName, ...) to match the admin portal.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated


def _as_text(value: Any) -> Any:
    """Free-text fields accept numbers (hours: 40) and null."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _as_optional_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


Text = Annotated[str, BeforeValidator(_as_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(_as_optional_text)]


class CamelModel(BaseModel):
    """Base model exposing snake_case attributes under camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============== Records ==============

class Certificate(CamelModel):
    """A stored certificate."""

    cert_id: str
    candidate_name: Text = ""
    position: Text = ""
    hours: Text = ""
    start_date: Text = ""
    end_date: Text = ""
    email: Text = ""
    issue_date: Text = ""
    image_url: str = ""
    valid: bool = True


class CertificateUpdate(CamelModel):
    """
    Partial admin edit of a certificate.

    certId and imageUrl are not editable; the rendered image is never
    regenerated, so unknown or immutable keys are dropped silently.
    ``valid`` is not editable either: revoke is the only path that flips it.
    Explicit nulls mean "leave unchanged".
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    candidate_name: OptionalText = None
    position: OptionalText = None
    hours: OptionalText = None
    start_date: OptionalText = None
    end_date: OptionalText = None
    email: OptionalText = None
    issue_date: OptionalText = None

    def changes(self) -> dict:
        """Non-null fields explicitly set by the caller, keyed by attribute name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# ============== Admin Requests ==============

class CandidateIn(CamelModel):
    """One candidate row, from the JSON bulk body, a CSV row or a single issue."""

    name: Text = ""
    hours: Text = ""
    position: Text = ""
    start_date: Text = ""
    end_date: Text = ""
    email: Text = ""


class BulkGenerateRequest(BaseModel):
    """Body of POST /admin/generate-bulk."""

    students: List[CandidateIn] = Field(..., description="Candidate records, processed in order")


class LoginRequest(BaseModel):
    password: str = ""


# ============== Responses ==============

class IssueResult(CamelModel):
    """
    Outcome of one record in a batch.

    ``status`` follows persistence. The e-mail outcome is reported
    separately in ``notified`` / ``notification_error``.
    """

    email: str
    status: Literal["success", "failed"]
    cert_id: Optional[str] = None
    error: Optional[str] = None
    notified: Optional[bool] = None
    notification_error: Optional[str] = None


class BulkGenerateResponse(BaseModel):
    success: bool = True
    results: List[IssueResult]


class SingleGenerateResponse(CamelModel):
    success: bool = True
    certificate: Certificate
    notified: bool
    notification_error: Optional[str] = None


class VerifyResponse(CamelModel):
    """Public verification view; the image URL is withheld."""

    valid: bool
    message: Optional[str] = None
    candidate_name: Optional[str] = None
    position: Optional[str] = None
    hours: Optional[str] = None
    issue_date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool
    token: str


class MessageResponse(BaseModel):
    success: bool
    message: Optional[str] = None


class RegistryResponse(BaseModel):
    success: bool = True
    certificates: List[Certificate]
