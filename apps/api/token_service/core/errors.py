"""Error taxonomy shared by the token endpoints."""
from __future__ import annotations


class StartupConfigError(RuntimeError):
    """Raised when the process cannot start with the supplied configuration."""


class TokenServiceError(Exception):
    """Base class for request-level failures rendered as JSON error bodies."""

    status_code = 500
    errcode = "M_UNKNOWN"

    def __init__(self, message: str, *, errcode: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if errcode is not None:
            self.errcode = errcode


class InvalidRequestError(TokenServiceError):
    """A required field is missing, empty or malformed."""

    status_code = 400
    errcode = "M_MISSING_PARAM"


class OpenIDVerificationError(TokenServiceError):
    status_code = 401
    errcode = "M_UNAUTHORIZED"


class MethodNotAllowedError(TokenServiceError):
    status_code = 405
    errcode = "M_UNRECOGNIZED"


class SigningError(TokenServiceError):
    """The token library refused to build or sign the grant."""

    status_code = 500
    errcode = "M_UNKNOWN"
