# Authy API client
# Typed bindings for the Authy two-factor authentication HTTP API:
# user registration, status lookup, SMS one-time passwords and token checks.

from .base import (AppInfo, AuthyUser, Device, ResponseFormat,
                   ResponseMessage, Status, TokenVerification, User)
from .client import AuthyClient
from .conf import AuthyConfig
from .exceptions import (AuthyError, ConfigurationError, InvalidTokenError,
                         MalformedResponseError, RequestBuildError,
                         RequestFailedError, TransportError, ValidationError)

__version__ = "0.1.0"

__all__ = [
    # Client
    "AuthyClient",
    "AuthyConfig",
    # Request and response types
    "ResponseFormat",
    "AuthyUser",
    "ResponseMessage",
    "AppInfo",
    "User",
    "Status",
    "Device",
    "TokenVerification",
    # Errors
    "AuthyError",
    "ConfigurationError",
    "RequestBuildError",
    "ValidationError",
    "TransportError",
    "RequestFailedError",
    "InvalidTokenError",
    "MalformedResponseError",
]
