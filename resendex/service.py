from typing import Any, Awaitable, Dict, Optional, TypeVar, Union
from urllib.parse import quote

from .executor import ApiRequest, Executor, Unwrap
from .ids import ResourceId, as_str
from .models import ListOptions

T = TypeVar("T")

# Awaitable on a non-blocking client, the value itself on a blocking one
MaybeAwaitable = Union[T, Awaitable[T]]


def segment(identifier: Union[str, ResourceId]) -> str:
    """Quote an identifier for use as one path segment."""
    return quote(as_str(identifier), safe="@")


def list_query(options: Optional[ListOptions]) -> Optional[Dict[str, Any]]:
    return options.to_query() if options is not None else None


class Service:
    """
    Base class for one group of endpoints.

    Services hold no state of their own; every call goes through the
    client's executor, so all services of one client share its rate limit.
    """

    def __init__(self, executor: Executor):
        self._executor = executor

    def _call(
        self,
        request: ApiRequest,
        response_type: Any = None,
        unwrap: Optional[Unwrap] = None,
    ) -> MaybeAwaitable[Any]:
        return self._executor.execute(request, response_type, unwrap)

    def __repr__(self) -> str:
        mode = "blocking" if self._executor.blocking else "async"
        return f"{type(self).__name__}({mode})"
