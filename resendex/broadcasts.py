from typing import List, Optional, Union

from pydantic import Field, field_validator

from .executor import ApiRequest
from .ids import AudienceId, BroadcastId, IdLike, consume
from .models import (
    DeleteResponse,
    ListOptions,
    ListResponse,
    ObjectRef,
    RequestModel,
    ResourceModel,
)
from .service import MaybeAwaitable, Service, list_query, segment


def _as_list(value: Union[str, List[str], None]) -> Optional[List[str]]:
    return [value] if isinstance(value, str) else value


class CreateBroadcastOptions(RequestModel):
    audience_id: IdLike
    from_: str = Field(alias="from")
    subject: str
    reply_to: Optional[List[str]] = None
    html: Optional[str] = None
    text: Optional[str] = None
    name: Optional[str] = None

    @field_validator("reply_to", mode="before")
    @classmethod
    def _single_reply_to(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        return _as_list(value)


class UpdateBroadcastOptions(RequestModel):
    audience_id: Optional[IdLike] = None
    from_: Optional[str] = Field(default=None, alias="from")
    subject: Optional[str] = None
    reply_to: Optional[List[str]] = None
    html: Optional[str] = None
    text: Optional[str] = None
    name: Optional[str] = None

    @field_validator("reply_to", mode="before")
    @classmethod
    def _single_reply_to(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        return _as_list(value)


class SendBroadcastOptions(RequestModel):
    """``scheduled_at`` delays delivery; omit it to send right away."""

    scheduled_at: Optional[str] = None


class Broadcast(ResourceModel):
    object: Optional[str] = None
    id: BroadcastId
    name: Optional[str] = None
    audience_id: Optional[AudienceId] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    scheduled_at: Optional[str] = None
    sent_at: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    subject: Optional[str] = None
    reply_to: Optional[List[str]] = None
    preview_text: Optional[str] = None


class BroadcastRef(ResourceModel):
    id: BroadcastId


class Broadcasts(Service):
    """``/broadcasts`` endpoints: one email sent to every contact of an audience."""

    def create(self, broadcast: CreateBroadcastOptions) -> MaybeAwaitable[BroadcastRef]:
        return self._call(ApiRequest("POST", "/broadcasts", body=broadcast), BroadcastRef)

    def send(
        self,
        broadcast_id: Union[BroadcastId, str],
        options: Optional[SendBroadcastOptions] = None,
    ) -> MaybeAwaitable[BroadcastRef]:
        request = ApiRequest(
            "POST",
            f"/broadcasts/{segment(broadcast_id)}/send",
            body=options or SendBroadcastOptions(),
        )
        return self._call(request, BroadcastRef)

    def get(self, broadcast_id: Union[BroadcastId, str]) -> MaybeAwaitable[Broadcast]:
        return self._call(ApiRequest("GET", f"/broadcasts/{segment(broadcast_id)}"), Broadcast)

    def update(
        self, broadcast_id: Union[BroadcastId, str], update: UpdateBroadcastOptions
    ) -> MaybeAwaitable[ObjectRef]:
        """Edit a broadcast that is still a draft."""
        request = ApiRequest("PATCH", f"/broadcasts/{segment(broadcast_id)}", body=update)
        return self._call(request, ObjectRef)

    def delete(self, broadcast_id: Union[BroadcastId, str]) -> MaybeAwaitable[DeleteResponse]:
        """
        Delete a draft or cancel a scheduled broadcast.

        A ``BroadcastId`` passed here cannot be used again.
        """
        request = ApiRequest("DELETE", f"/broadcasts/{segment(consume(broadcast_id))}")
        return self._call(request, DeleteResponse)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Broadcast]]:
        request = ApiRequest("GET", "/broadcasts", query=list_query(options))
        return self._call(request, ListResponse[Broadcast])
