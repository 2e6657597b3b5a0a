"""
Idempotency keys for write operations that support them.

A key identifies one *call*. For batch sends the whole batch shares a single
key; a key per element would let a retried batch be partially re-sent.

Example:
    ```python
    emails = with_idempotency_key(
        [welcome_email, receipt_email],
        "signup/4f1c2b",
    )
    await client.batch.send(emails)
    ```
"""

from dataclasses import dataclass, replace
from typing import Generic, Iterable, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")

MAX_KEY_LENGTH = 256


def _check_key(key: str) -> str:
    if not isinstance(key, str) or not 1 <= len(key) <= MAX_KEY_LENGTH:
        raise ValueError(f"idempotency key must be 1-{MAX_KEY_LENGTH} characters")
    return key


@dataclass(frozen=True)
class Idempotent(Generic[T]):
    """A request payload paired with an optional idempotency key."""

    payload: T
    key: Optional[str] = None

    def __post_init__(self) -> None:
        if self.key is not None:
            _check_key(self.key)

    def with_key(self, key: str) -> "Idempotent[T]":
        return replace(self, key=key)

    @classmethod
    def of(cls, value: Union[T, "Idempotent[T]"]) -> "Idempotent[T]":
        """Wrap a bare payload; pass an ``Idempotent`` through unchanged."""
        if isinstance(value, Idempotent):
            return value
        return cls(value)


def _as_items(payloads: Iterable[T]) -> List[T]:
    # Models and mappings are iterable too, but they are one payload
    if isinstance(payloads, (BaseModel, Mapping, str, bytes)):
        raise ValueError(
            f"expected a sequence of payloads, not a single {type(payloads).__name__}; "
            "wrap it in a list"
        )
    return list(payloads)


def with_idempotency_key(payloads: Iterable[T], key: str) -> Idempotent[List[T]]:
    """Attach one key to a whole sequence of payloads."""
    return Idempotent(_as_items(payloads), _check_key(key))


def as_batch(value: Union[Iterable[T], Idempotent[Iterable[T]]]) -> Idempotent[List[T]]:
    """
    Normalize batch input right before it is handed to the executor.

    Accepts a plain iterable or one produced by :func:`with_idempotency_key`.

    Raises:
        ValueError: If the payload is a single email rather than a sequence,
            or if individual elements carry their own keys
    """
    wrapped = Idempotent.of(value)
    items = _as_items(wrapped.payload)
    if any(isinstance(item, Idempotent) for item in items):
        raise ValueError(
            "idempotency keys apply to the whole batch; use with_idempotency_key() "
            "instead of keying individual emails"
        )
    return Idempotent(items, wrapped.key)
