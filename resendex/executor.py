"""
Request execution engine.

Every API call goes through one pipeline:

1. acquire a permit from the client's :class:`~resendex.core.RateLimiter`
2. build the HTTP request (auth, user agent, JSON body, idempotency key)
3. send it over httpx
4. turn the outcome into a typed value or exactly one
   :class:`~resendex.exceptions.ResendError`

:class:`AsyncExecutor` and :class:`BlockingExecutor` differ only in how they
wait at steps 1 and 3. Building requests and interpreting outcomes lives in
their common base class. Nothing is retried.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaValidationError
from pydantic_core import PydanticSerializationError

from .config import ClientConfig
from .core import RateLimiter
from .exceptions import (
    TRANSIENT_KINDS,
    ParseError,
    RateLimitError,
    ResendError,
    TransportError,
    map_error,
)
from .ids import ResourceId
from .utils import body_snippet, is_html_content_type

logger = logging.getLogger(__name__)

# Methods the API treats as safe to resend as-is
RETRYABLE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

Unwrap = Callable[[Any], Any]

_NOT_JSON = object()


@dataclass(frozen=True)
class ApiRequest:
    """
    One logical API call.

    Attributes:
        method: HTTP verb
        path: API path starting with ``/``
        body: Pydantic model, mapping or sequence of those; ``None`` for no body
        query: Query parameters; ``None`` values are dropped
        idempotency_key: Sent as the ``Idempotency-Key`` header when present
        headers: Extra headers for this call
        retryable: Whether the caller may safely resend the request. Defaults
            to true for safe/idempotent methods and for keyed requests.
    """

    method: str
    path: str
    body: Any = None
    query: Optional[Mapping[str, Any]] = None
    idempotency_key: Optional[str] = None
    headers: Optional[Mapping[str, str]] = None
    retryable: Optional[bool] = None

    def __post_init__(self) -> None:
        if not self.path.startswith("/"):
            raise ValueError(f"path must start with '/', got {self.path!r}")
        object.__setattr__(self, "method", self.method.upper())

    @property
    def can_retry(self) -> bool:
        if self.retryable is not None:
            return self.retryable
        return self.method in RETRYABLE_METHODS or self.idempotency_key is not None


@dataclass(frozen=True)
class ExecutionOutcome:
    """A completed transport attempt, consumed right away by the error mapping."""

    status_code: int
    raw_body: bytes
    content_type: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ExecutionOutcome":
        return cls(
            status_code=response.status_code,
            raw_body=response.content,
            content_type=response.headers.get("content-type", ""),
            headers=response.headers,
        )

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, ResourceId):
        return value.value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def encode_body(body: Any) -> bytes:
    """
    Serialize a request body to compact JSON.

    Raises:
        TransportError: If the body cannot be represented as JSON
    """
    try:
        return json.dumps(_jsonable(body), separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError, PydanticSerializationError) as exc:
        raise TransportError(f"Could not encode request body: {exc}") from exc


def _decode_json(raw: bytes) -> Any:
    if not raw.strip():
        return _NOT_JSON
    try:
        return json.loads(raw)
    except ValueError:
        return _NOT_JSON


def _query_value(value: Any) -> Any:
    if isinstance(value, (Enum, ResourceId)):
        return value.value
    return value


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def _type_name(response_type: Any) -> str:
    return getattr(response_type, "__name__", None) or repr(response_type)


class _BaseExecutor:
    """Request building and outcome handling shared by both calling conventions."""

    blocking: bool = False

    def __init__(self, config: ClientConfig, limiter: Optional[RateLimiter] = None):
        self.config = config
        self.limiter = limiter or RateLimiter.from_config(config)

    def _build_request(
        self, http: Union[httpx.Client, httpx.AsyncClient], request: ApiRequest
    ) -> httpx.Request:
        headers = {
            "Authorization": f"Bearer {self.config.bearer_token}",
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
        }
        if request.headers:
            headers.update(request.headers)

        content = None
        if request.body is not None:
            try:
                content = encode_body(request.body)
            except TransportError as error:
                self._finalize(error, request)
                raise
            headers["Content-Type"] = "application/json"

        if request.idempotency_key is not None:
            headers["Idempotency-Key"] = request.idempotency_key

        params = {
            key: _query_value(value)
            for key, value in (request.query or {}).items()
            if value is not None
        }
        return http.build_request(
            request.method,
            f"{self.config.base_url}{request.path}",
            headers=headers,
            params=params or None,
            content=content,
        )

    def _handle_outcome(
        self,
        request: ApiRequest,
        outcome: ExecutionOutcome,
        response_type: Any,
        unwrap: Optional[Unwrap],
    ) -> Any:
        logger.debug(f"{request.method} {request.path} -> {outcome.status_code}")

        if not outcome.is_success:
            raise self._finalize(self._map_failure(outcome), request)

        try:
            value = self._decode_success(outcome, response_type)
        except ParseError as error:
            self._finalize(error, request)
            raise
        return unwrap(value) if unwrap is not None else value

    def _map_failure(self, outcome: ExecutionOutcome) -> ResendError:
        body = None
        if is_html_content_type(outcome.content_type):
            logger.warning(f"Received an HTML error page (HTTP {outcome.status_code})")
        else:
            decoded = _decode_json(outcome.raw_body)
            if decoded is _NOT_JSON:
                logger.warning(f"Received a non-JSON error response (HTTP {outcome.status_code})")
            else:
                body = decoded

        if outcome.status_code == 429:
            self.limiter.record_rate_limit_hit()
        return map_error(outcome.status_code, body, outcome.headers)

    def _decode_success(self, outcome: ExecutionOutcome, response_type: Any) -> Any:
        data = _decode_json(outcome.raw_body)
        if data is _NOT_JSON:
            if response_type is None and not outcome.raw_body.strip():
                return None
            snippet = body_snippet(outcome.raw_body)
            raise ParseError(
                f"Expected a JSON response body (HTTP {outcome.status_code}), got: {snippet!r}",
                status_code=outcome.status_code,
                snippet=snippet,
            )

        if response_type is None:
            return data

        try:
            return _adapter(response_type).validate_python(data)
        except SchemaValidationError as exc:
            snippet = body_snippet(outcome.raw_body)
            raise ParseError(
                f"Response body did not match {_type_name(response_type)} "
                f"({exc.error_count()} validation errors): {snippet!r}",
                status_code=outcome.status_code,
                snippet=snippet,
            ) from exc

    def _transport_error(self, request: ApiRequest, exc: httpx.HTTPError) -> TransportError:
        error = TransportError(f"{type(exc).__name__} during {request.method} {request.path}: {exc}")
        return self._finalize(error, request)

    def _finalize(self, error: ResendError, request: ApiRequest) -> ResendError:
        error.method = request.method
        error.path = request.path
        error.retryable = request.can_retry and error.kind in TRANSIENT_KINDS
        return error


class AsyncExecutor(_BaseExecutor):
    """Non-blocking executor; :meth:`execute` is a coroutine."""

    blocking = False

    def __init__(
        self,
        config: ClientConfig,
        limiter: Optional[RateLimiter] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config, limiter)
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout, transport=transport)

    async def execute(
        self,
        request: ApiRequest,
        response_type: Any = None,
        unwrap: Optional[Unwrap] = None,
    ) -> Any:
        """
        Perform one call, suspending at the rate limiter and at the transport.

        Args:
            request: The call to make
            response_type: Type the JSON body is validated into; ``None``
                returns the decoded JSON as-is
            unwrap: Applied to the validated value before it is returned

        Raises:
            ResendError: Exactly one typed error on any failure
        """
        try:
            await self.limiter.acquire()
        except RateLimitError as error:
            raise self._finalize(error, request)

        http_request = self._build_request(self._http, request)
        logger.debug(f"Sending {request.method} {request.path}")
        try:
            response = await self._http.send(http_request)
        except httpx.HTTPError as exc:
            raise self._transport_error(request, exc) from exc

        return self._handle_outcome(
            request, ExecutionOutcome.from_response(response), response_type, unwrap
        )

    async def aclose(self) -> None:
        await self._http.aclose()


class BlockingExecutor(_BaseExecutor):
    """Blocking executor; :meth:`execute` returns the value directly."""

    blocking = True

    def __init__(
        self,
        config: ClientConfig,
        limiter: Optional[RateLimiter] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(config, limiter)
        self._http = http_client or httpx.Client(timeout=config.timeout, transport=transport)

    def execute(
        self,
        request: ApiRequest,
        response_type: Any = None,
        unwrap: Optional[Unwrap] = None,
    ) -> Any:
        """Same as :meth:`AsyncExecutor.execute`, blocking the calling thread."""
        try:
            self.limiter.acquire_blocking()
        except RateLimitError as error:
            raise self._finalize(error, request)

        http_request = self._build_request(self._http, request)
        logger.debug(f"Sending {request.method} {request.path}")
        try:
            response = self._http.send(http_request)
        except httpx.HTTPError as exc:
            raise self._transport_error(request, exc) from exc

        return self._handle_outcome(
            request, ExecutionOutcome.from_response(response), response_type, unwrap
        )

    def close(self) -> None:
        self._http.close()


Executor = Union[AsyncExecutor, BlockingExecutor]
