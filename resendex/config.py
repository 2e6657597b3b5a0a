"""
Client configuration.

:class:`ClientConfig` is the immutable set of values a client is built from.
:class:`ResendSettings` reads the same values from ``RESEND_*`` environment
variables (or a ``.env`` file) for :meth:`ClientConfig.from_env`.
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

try:
    __version__ = version("resendex")
except PackageNotFoundError:
    __version__ = "0.0.0"

DEFAULT_BASE_URL = "https://api.resend.com"
DEFAULT_USER_AGENT = f"resendex/{__version__}"
DEFAULT_TIMEOUT = 30.0

# The API allows 10 requests per second; stay one request and 100ms under it
DEFAULT_RATE_LIMIT = 9
DEFAULT_RATE_LIMIT_WINDOW = 1.1


class ResendSettings(BaseSettings):
    """Environment surface: ``RESEND_API_KEY``, ``RESEND_BASE_URL``, ``RESEND_RATE_LIMIT``, ..."""

    model_config = SettingsConfigDict(
        env_prefix="RESEND_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    api_key: Optional[SecretStr] = None
    base_url: Optional[str] = None
    rate_limit: Optional[int] = None
    rate_limit_window: Optional[float] = None
    timeout: Optional[float] = None


class ClientConfig(BaseModel):
    """
    Immutable configuration of one client.

    Attributes:
        api_key: Bearer token sent with every request, never shown in ``repr``
        base_url: Root of the API, without a trailing slash
        user_agent: ``User-Agent`` header value
        rate_limit: Maximum requests admitted per window (at least 1)
        rate_limit_window: Window length in seconds
        timeout: Transport timeout in seconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: SecretStr
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    rate_limit: int = Field(default=DEFAULT_RATE_LIMIT, ge=1)
    rate_limit_window: float = Field(default=DEFAULT_RATE_LIMIT_WINDOW, gt=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @field_validator("api_key")
    @classmethod
    def _check_api_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("api_key must not be empty")
        return value

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value

    @property
    def bearer_token(self) -> str:
        return self.api_key.get_secret_value()

    def with_options(self, **options: Any) -> "ClientConfig":
        """Return a validated copy with some values replaced."""
        values = self.model_dump()
        values.update(options)
        return type(self)(**values)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """
        Build a config from ``RESEND_*`` environment variables.

        Explicit keyword arguments take precedence over the environment.

        Raises:
            ValueError: If no API key is available or any value is invalid
        """
        settings = ResendSettings()
        api_key = overrides.pop("api_key", None) or settings.api_key
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        if not api_key or not api_key.strip():
            raise ValueError("RESEND_API_KEY must be set to build a client from the environment")

        values = settings.model_dump(exclude_none=True, exclude={"api_key"})
        values.update(overrides)
        return cls(api_key=api_key, **values)
