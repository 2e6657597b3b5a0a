"""
Error taxonomy for the Resend API client.

Every failure surfaced by a client call is a :class:`ResendError` subclass,
one per :class:`ErrorKind`. :func:`map_error` reduces an unsuccessful HTTP
exchange (status code plus decoded body) to exactly one of them.

See https://resend.com/docs/api-reference/errors for the error names the
API documents.
"""

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, Field


N = TypeVar("N", int, float)

# Fields of the documented error body; everything else is kept as details
ERROR_BODY_FIELDS = ("statusCode", "name", "message")


class ErrorKind(str, Enum):
    """The kinds every client failure is reduced to."""

    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    TRANSPORT = "transport"
    PARSE = "parse"


# Kinds where resending the same request may succeed later
TRANSIENT_KINDS = frozenset({ErrorKind.RATE_LIMIT, ErrorKind.SERVER, ErrorKind.TRANSPORT})


class ErrorCode(str, Enum):
    """Machine-readable error names (the ``name`` field of an error body)."""

    UNRECOGNIZED = "unrecognized"
    INVALID_IDEMPOTENCY_KEY = "invalid_idempotency_key"
    VALIDATION_ERROR = "validation_error"
    MISSING_API_KEY = "missing_api_key"
    RESTRICTED_API_KEY = "restricted_api_key"
    INVALID_API_KEY = "invalid_api_key"
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    INVALID_IDEMPOTENT_REQUEST = "invalid_idempotent_request"
    CONCURRENT_IDEMPOTENT_REQUESTS = "concurrent_idempotent_requests"
    INVALID_ATTACHMENT = "invalid_attachment"
    INVALID_FROM_ADDRESS = "invalid_from_address"
    INVALID_ACCESS = "invalid_access"
    INVALID_PARAMETER = "invalid_parameter"
    INVALID_REGION = "invalid_region"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    MONTHLY_QUOTA_EXCEEDED = "monthly_quota_exceeded"
    DAILY_QUOTA_EXCEEDED = "daily_quota_exceeded"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    SECURITY_ERROR = "security_error"
    APPLICATION_ERROR = "application_error"
    INTERNAL_SERVER_ERROR = "internal_server_error"

    @classmethod
    def parse(cls, name: Optional[str]) -> "ErrorCode":
        """Look up an error name, falling back to ``UNRECOGNIZED``."""
        if not isinstance(name, str):
            return cls.UNRECOGNIZED
        try:
            return cls(name)
        except ValueError:
            return cls.UNRECOGNIZED


class ErrorResponse(BaseModel):
    """
    Error body returned by the API.

    The documented shape is ``{"statusCode": int, "name": str, "message": str}``.
    Fields that are missing or of the wrong type are left unset rather than
    rejected; unknown fields are kept in ``details``.
    """

    status_code: Optional[int] = None
    name: Optional[str] = None
    message: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @property
    def code(self) -> ErrorCode:
        return ErrorCode.parse(self.name)

    @classmethod
    def from_body(cls, body: Any) -> "ErrorResponse":
        if not isinstance(body, Mapping):
            return cls()

        status_code = body.get("statusCode")
        if isinstance(status_code, bool) or not isinstance(status_code, int):
            status_code = None
        name = body.get("name")
        message = body.get("message")

        return cls(
            status_code=status_code,
            name=name if isinstance(name, str) else None,
            message=message.strip() if isinstance(message, str) and message.strip() else None,
            details={str(k): v for k, v in body.items() if k not in ERROR_BODY_FIELDS},
        )


class ResendError(Exception):
    """
    Base class for every error raised by a client call.

    Attributes:
        message: Human readable description
        status_code: HTTP status of the response, if one was received
        code: Vendor error name, ``ErrorCode.UNRECOGNIZED`` if absent or unknown
        name: The raw vendor error name, if any
        details: Extra fields from the error body (field level detail)
        retryable: Whether resending the same request is safe and may succeed
        method: HTTP method of the failed request
        path: API path of the failed request
    """

    kind: ErrorKind = ErrorKind.SERVER

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: ErrorCode = ErrorCode.UNRECOGNIZED,
        name: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.name = name
        self.details: Dict[str, Any] = dict(details or {})
        self.retryable = retryable
        self.method: Optional[str] = None
        self.path: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class AuthenticationError(ResendError):
    """401/403: missing, invalid or restricted API key."""

    kind = ErrorKind.AUTHENTICATION


class NotFoundError(ResendError):
    """404: the resource or endpoint does not exist."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(ResendError):
    """The request was rejected as invalid. ``details`` holds field level detail."""

    kind = ErrorKind.VALIDATION


class RateLimitError(ResendError):
    """
    Too many requests, reported by the API (HTTP 429) or by the local limiter.

    ``limit``, ``remaining`` and ``reset`` mirror the ``ratelimit-*`` response
    headers; ``retry_after`` mirrors ``Retry-After`` (seconds).
    """

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        message: str = "Too many requests",
        *,
        limit: Optional[int] = None,
        remaining: Optional[int] = None,
        reset: Optional[int] = None,
        retry_after: Optional[float] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.limit = limit
        self.remaining = remaining
        self.reset = reset
        self.retry_after = retry_after


class ServerError(ResendError):
    """5xx, or any status the client does not know how to classify."""

    kind = ErrorKind.SERVER


class TransportError(ResendError):
    """No usable response: connection, timeout, TLS or request encoding failure."""

    kind = ErrorKind.TRANSPORT


class ParseError(ResendError):
    """A body could not be interpreted. ``snippet`` holds a short excerpt when safe."""

    kind = ErrorKind.PARSE

    def __init__(self, message: str, *, snippet: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.snippet = snippet


_CODE_ERRORS: Dict[ErrorCode, Type[ResendError]] = {
    ErrorCode.MISSING_API_KEY: AuthenticationError,
    ErrorCode.RESTRICTED_API_KEY: AuthenticationError,
    ErrorCode.INVALID_API_KEY: AuthenticationError,
    ErrorCode.NOT_FOUND: NotFoundError,
    ErrorCode.INVALID_IDEMPOTENCY_KEY: ValidationError,
    ErrorCode.VALIDATION_ERROR: ValidationError,
    ErrorCode.METHOD_NOT_ALLOWED: ValidationError,
    ErrorCode.INVALID_IDEMPOTENT_REQUEST: ValidationError,
    ErrorCode.CONCURRENT_IDEMPOTENT_REQUESTS: ValidationError,
    ErrorCode.INVALID_ATTACHMENT: ValidationError,
    ErrorCode.INVALID_FROM_ADDRESS: ValidationError,
    ErrorCode.INVALID_ACCESS: ValidationError,
    ErrorCode.INVALID_PARAMETER: ValidationError,
    ErrorCode.INVALID_REGION: ValidationError,
    ErrorCode.MISSING_REQUIRED_FIELD: ValidationError,
    ErrorCode.SECURITY_ERROR: ValidationError,
    ErrorCode.MONTHLY_QUOTA_EXCEEDED: RateLimitError,
    ErrorCode.DAILY_QUOTA_EXCEEDED: RateLimitError,
    ErrorCode.RATE_LIMIT_EXCEEDED: RateLimitError,
    ErrorCode.APPLICATION_ERROR: ServerError,
    ErrorCode.INTERNAL_SERVER_ERROR: ServerError,
}

_STATUS_ERRORS: Dict[int, Type[ResendError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthenticationError,
    404: NotFoundError,
    405: ValidationError,
    409: ValidationError,
    422: ValidationError,
    451: ValidationError,
}


def _header_number(
    headers: Mapping[str, str], name: str, cast: Callable[[str], N] = int
) -> Optional[N]:
    """Read a numeric header case-insensitively, ``None`` if absent or malformed."""
    for key, value in headers.items():
        if key.lower() == name:
            try:
                return cast(str(value).strip())
            except (TypeError, ValueError):
                return None
    return None


def map_error(
    status_code: int, body: Any, headers: Optional[Mapping[str, str]] = None
) -> ResendError:
    """
    Map an unsuccessful response to exactly one typed error.

    The mapping never raises. Precedence:

    1. HTTP 429 is always a :class:`RateLimitError`
    2. A body that is not JSON (``body is None``) is a :class:`ParseError`
    3. Any 5xx status is a :class:`ServerError`, whatever error name it carries
    4. A recognized vendor error name decides the kind
    5. Otherwise the status code decides; unknown statuses are :class:`ServerError`

    Args:
        status_code: HTTP status of the response
        body: Decoded JSON body, or ``None`` if the body was not JSON
        headers: Response headers, used for rate limit details

    Returns:
        The error to raise
    """
    headers = headers or {}
    response = ErrorResponse.from_body(body)

    if status_code == 429:
        return RateLimitError(
            response.message or "Too many requests",
            status_code=status_code,
            code=response.code,
            name=response.name,
            details=response.details,
            limit=_header_number(headers, "ratelimit-limit"),
            remaining=_header_number(headers, "ratelimit-remaining"),
            reset=_header_number(headers, "ratelimit-reset"),
            retry_after=_header_number(headers, "retry-after", float),
        )

    if body is None:
        return ParseError(
            f"Received a non-JSON error response (HTTP {status_code})",
            status_code=status_code,
        )

    if status_code >= 500:
        error_cls = ServerError
    else:
        error_cls = _CODE_ERRORS.get(response.code) or _STATUS_ERRORS.get(status_code, ServerError)
    return error_cls(
        response.message or f"Request failed with HTTP {status_code}",
        status_code=status_code,
        code=response.code,
        name=response.name,
        details=response.details,
    )
