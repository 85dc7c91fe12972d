"""
Domain Exceptions

Error taxonomy shared by services, repositories and the HTTP layer.
Exception handlers in main.py map each class to its status code.
"""


class CertifyError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CertifyError):
    """A required field is missing or the request body is malformed."""

    status_code = 400


class NotFoundError(CertifyError):
    """No certificate matches the requested certId."""

    status_code = 404


class DuplicateCertificateError(CertifyError):
    """A certificate with the same certId already exists."""

    status_code = 409


class UpstreamError(CertifyError):
    """The storage or mail provider failed."""

    status_code = 500


class ConfigError(CertifyError):
    """A required asset or credential is missing or malformed."""

    status_code = 500
