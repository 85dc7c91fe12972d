"""
Enum Definitions

Shared enums used across models and services.
"""

import enum


class IssueStage(str, enum.Enum):
    """Per-record stage of the issuance pipeline."""

    PENDING = "PENDING"
    RENDERING = "RENDERING"
    UPLOADING = "UPLOADING"
    PERSISTING = "PERSISTING"
    NOTIFYING = "NOTIFYING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class IssueStatus(str, enum.Enum):
    """Outcome reported for one batch record."""

    SUCCESS = "success"
    FAILED = "failed"
