"""
Exceptions raised by the Authy client.

Every error derives from :class:`AuthyError`, which carries a human-readable
``detail`` and a short machine-readable ``code``.
"""

from typing import Optional


class AuthyError(Exception):
    """Base class for all Authy client errors."""

    default_detail = "Authy request failed"
    default_code = "authy_error"

    def __init__(self, detail: Optional[str] = None, code: Optional[str] = None):
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        super().__init__(self.detail)


class ConfigurationError(AuthyError):
    """Raised when the client configuration cannot produce a usable base URL."""

    default_detail = "Invalid Authy client configuration"
    default_code = "configuration_error"


class RequestBuildError(AuthyError):
    """Raised when a relative path or request body cannot be turned into a request."""

    default_detail = "Authy request could not be built"
    default_code = "request_build_error"


class ValidationError(AuthyError):
    """Raised before any network call when mandatory arguments are missing."""

    default_detail = "Insufficient data provided"
    default_code = "validation_error"


class TransportError(AuthyError):
    """Raised when the HTTP request itself fails (network, timeout, read)."""

    default_detail = "Authy API request failed"
    default_code = "request_error"


class RequestFailedError(AuthyError):
    """Raised when Authy answers but reports ``success: false`` in its envelope."""

    default_detail = "Authy API reported failure"
    default_code = "request_failed"


class InvalidTokenError(AuthyError):
    """Raised when the verify endpoint answers with a non-200 status."""

    default_detail = "invalid token"
    default_code = "invalid_token"

    def __init__(self, detail=None, code=None, status_code=None):
        self.status_code = status_code
        super().__init__(detail, code)


class MalformedResponseError(AuthyError):
    """Raised when a verification response body cannot be decoded."""

    default_detail = "Malformed Authy API response"
    default_code = "malformed_response"
