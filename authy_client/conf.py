"""
Client configuration.

Configuration is an immutable value handed to :class:`~authy_client.AuthyClient`
at construction time, so several independently configured clients can live in
the same process. Fields not passed explicitly are read from the environment:

    AUTHY_API_SECRET   API secret for the Authy application (required)
    AUTHY_API_FORMAT   "json" (default) or "xml"
    AUTHY_BASE_URL     Override the API host and protected path
    AUTHY_TIMEOUT      Request timeout in seconds (default 20)
    AUTHY_USER_AGENT   User-Agent header sent with every request
"""

import logging
from typing import Any
from urllib.parse import urlsplit

from pydantic import Field, PositiveFloat, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .base import ResponseFormat
from .constants import (DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT,
                        Messages)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class AuthyConfig(BaseSettings):
    """
    Settings for one Authy application.

    Attributes:
        api_secret: API key sent in the X-Authy-API-Key header
        api_format: Response namespace, JSON unless "xml" is given
        base_url: Host and protected path the format is appended to
        timeout: Request timeout in seconds
        user_agent: User-Agent header sent with every request

    Raises:
        ConfigurationError: If a value is missing or has the wrong type
    """
    model_config = SettingsConfigDict(
        env_prefix="AUTHY_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    api_secret: str = Field(repr=False)
    api_format: ResponseFormat = ResponseFormat.JSON
    base_url: str = DEFAULT_BASE_URL
    timeout: PositiveFloat = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __init__(self, **values: Any):
        try:
            super().__init__(**values)
        except ValidationError as e:
            raise ConfigurationError(Messages.INVALID_CONFIG.format(error=e)) from e

    @field_validator("api_format", mode="before")
    @classmethod
    def normalise_format(cls, value):
        try:
            return ResponseFormat.from_value(value)
        except ValueError:
            logger.warning(
                "Unknown Authy API format %r, falling back to %s",
                value,
                ResponseFormat.JSON.value,
            )
            return ResponseFormat.JSON

    @property
    def api_url(self) -> str:
        """
        Base URL every relative endpoint path is resolved against.

        Raises:
            ConfigurationError: If the composed URL has no scheme or host
        """
        url = f"{self.base_url.rstrip('/')}/{self.api_format.value}/"
        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise ConfigurationError(Messages.INVALID_BASE_URL.format(url=url)) from e
        if not parts.scheme or not parts.netloc:
            raise ConfigurationError(Messages.INVALID_BASE_URL.format(url=url))
        return url

    def is_configured(self) -> bool:
        """Check whether an API secret has been provided."""
        return bool(self.api_secret)

    @classmethod
    def from_env(cls) -> "AuthyConfig":
        """
        Build a configuration purely from ``AUTHY_*`` environment variables.

        Raises:
            ConfigurationError: If the secret is missing or a value is invalid
        """
        return cls()
