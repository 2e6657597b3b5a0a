from enum import Enum
from typing import List, Optional, Union

from pydantic import Field, SecretStr

from .events import EventType
from .executor import ApiRequest
from .ids import WebhookId, consume
from .models import DeleteResponse, ListOptions, ListResponse, RequestModel, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


class WebhookStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class CreateWebhookOptions(RequestModel):
    endpoint: str
    events: List[EventType]


class UpdateWebhookOptions(RequestModel):
    endpoint: Optional[str] = None
    events: Optional[List[EventType]] = None
    status: Optional[WebhookStatus] = None


class CreateWebhookResponse(ResourceModel):
    id: WebhookId
    signing_secret: SecretStr


class Webhook(ResourceModel):
    object: Optional[str] = None
    id: WebhookId
    endpoint: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    events: List[str] = Field(default_factory=list)


class WebhookRef(ResourceModel):
    object: Optional[str] = None
    id: WebhookId


class Webhooks(Service):
    """``/webhooks`` endpoints. Use :func:`~resendex.events.parse_event` on delivered payloads."""

    def create(self, webhook: CreateWebhookOptions) -> MaybeAwaitable[CreateWebhookResponse]:
        return self._call(ApiRequest("POST", "/webhooks", body=webhook), CreateWebhookResponse)

    def get(self, webhook_id: Union[WebhookId, str]) -> MaybeAwaitable[Webhook]:
        return self._call(ApiRequest("GET", f"/webhooks/{segment(webhook_id)}"), Webhook)

    def update(
        self, webhook_id: Union[WebhookId, str], update: UpdateWebhookOptions
    ) -> MaybeAwaitable[WebhookRef]:
        request = ApiRequest("PATCH", f"/webhooks/{segment(webhook_id)}", body=update)
        return self._call(request, WebhookRef)

    def delete(self, webhook_id: Union[WebhookId, str]) -> MaybeAwaitable[DeleteResponse]:
        request = ApiRequest("DELETE", f"/webhooks/{segment(consume(webhook_id))}")
        return self._call(request, DeleteResponse)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Webhook]]:
        request = ApiRequest("GET", "/webhooks", query=list_query(options))
        return self._call(request, ListResponse[Webhook])
