"""
Models shared across the client: limiter statistics and the pagination
envelope used by every list endpoint.
"""

from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .ids import ResourceId

T = TypeVar("T")


class RequestModel(BaseModel):
    """Base for request bodies; unknown fields are a caller error."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ResourceModel(BaseModel):
    """Base for response payloads; fields the API adds later are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RateLimiterStats(BaseModel):
    """Snapshot of a rate limiter's counters."""

    total_requests: int = 0
    total_wait_time: float = 0.0
    max_wait_time: float = 0.0
    current_rate: float = 0.0  # admissions per minute over the last window
    current_queue_size: int = 0
    rate_limit_hits: int = 0
    last_rate_limit_hit: Optional[float] = None
    time_since_last_rate_limit: Optional[float] = None


class ListOptions(BaseModel):
    """
    Query parameters for list endpoints.

    ``ListOptions()`` applies no filters. ``before`` and ``after`` are ids
    that are themselves excluded from the page, and only one of them may be
    given. See https://resend.com/docs/pagination
    """

    model_config = ConfigDict(frozen=True)

    limit: Optional[int] = Field(default=None, ge=1, le=100)
    before: Optional[str] = None
    after: Optional[str] = None

    @field_validator("before", "after", mode="before")
    @classmethod
    def _cursor_to_str(cls, value: Union[str, ResourceId, None]) -> Optional[str]:
        if isinstance(value, ResourceId):
            return value.value
        return value

    @model_validator(mode="after")
    def _check_single_cursor(self) -> "ListOptions":
        if self.before is not None and self.after is not None:
            raise ValueError("before and after are mutually exclusive")
        return self

    def to_query(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def next_page(self, page: "ListResponse[Any]") -> Optional["ListOptions"]:
        """Options for the page after ``page``, or ``None`` when it was the last."""
        cursor = page.next_cursor
        if cursor is None:
            return None
        return ListOptions(limit=self.limit, after=cursor)


class ListResponse(ResourceModel, Generic[T]):
    """Paginated response envelope shared by every list endpoint."""

    object: Optional[str] = None
    has_more: bool = False
    data: List[T] = Field(default_factory=list)

    @property
    def items(self) -> List[T]:
        return self.data

    @property
    def next_cursor(self) -> Optional[str]:
        """Id of the last item when more pages exist."""
        if not self.has_more or not self.data:
            return None
        last_id = getattr(self.data[-1], "id", None)
        if isinstance(last_id, ResourceId):
            return last_id.raw
        return str(last_id) if last_id is not None else None

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[T]:  # type: ignore[override]
        return iter(self.data)

    def __getitem__(self, index: int) -> T:
        return self.data[index]


class DeleteResponse(ResourceModel):
    """Acknowledgement returned by delete endpoints."""

    object: Optional[str] = None
    id: Optional[str] = None
    deleted: bool = False


class ObjectRef(ResourceModel):
    """Minimal acknowledgement naming the object a write touched."""

    object: Optional[str] = None
    id: str
