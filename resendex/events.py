"""
Webhook event payloads.

The API posts one JSON object per event to a registered webhook endpoint.
:func:`parse_event` turns that payload into an :class:`EmailEvent`,
:class:`ContactEvent` or :class:`DomainEvent` based on its ``type``.

Signature verification is left to the web framework receiving the request.

Example:
    ```python
    event = parse_event(request_body)
    if event.type is EventType.EMAIL_BOUNCED:
        suppress(event.data.to)
    ```

See https://resend.com/docs/dashboard/webhooks/event-types
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import Field
from pydantic import ValidationError as SchemaValidationError

from .domains import Domain
from .exceptions import ParseError
from .ids import AudienceId, ContactId, EmailId
from .models import ResourceModel
from .utils import body_snippet

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    EMAIL_SENT = "email.sent"
    EMAIL_DELIVERED = "email.delivered"
    EMAIL_DELIVERY_DELAYED = "email.delivery_delayed"
    EMAIL_COMPLAINED = "email.complained"
    EMAIL_BOUNCED = "email.bounced"
    EMAIL_OPENED = "email.opened"
    EMAIL_CLICKED = "email.clicked"
    CONTACT_CREATED = "contact.created"
    CONTACT_UPDATED = "contact.updated"
    CONTACT_DELETED = "contact.deleted"
    DOMAIN_CREATED = "domain.created"
    DOMAIN_UPDATED = "domain.updated"
    DOMAIN_DELETED = "domain.deleted"

    @property
    def category(self) -> str:
        """``email``, ``contact`` or ``domain``"""
        return self.value.split(".", 1)[0]


class Click(ResourceModel):
    """Only present on ``email.clicked`` events."""

    ip_address: Optional[str] = Field(default=None, alias="ipAddress")
    link: Optional[str] = None
    timestamp: Optional[str] = None
    user_agent: Optional[str] = Field(default=None, alias="userAgent")


class EmailEventData(ResourceModel):
    email_id: EmailId
    created_at: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: List[str] = Field(default_factory=list)
    subject: Optional[str] = None
    click: Optional[Click] = None


class ContactEventData(ResourceModel):
    id: ContactId
    audience_id: Optional[AudienceId] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    unsubscribed: Optional[bool] = None


class EmailEvent(ResourceModel):
    type: EventType
    created_at: str
    data: EmailEventData


class ContactEvent(ResourceModel):
    type: EventType
    created_at: str
    data: ContactEventData


class DomainEvent(ResourceModel):
    type: EventType
    created_at: str
    data: Domain


Event = Union[EmailEvent, ContactEvent, DomainEvent]

_EVENT_MODELS: Dict[str, Type[ResourceModel]] = {
    "email": EmailEvent,
    "contact": ContactEvent,
    "domain": DomainEvent,
}


def _load(payload: Union[str, bytes, bytearray]) -> Any:
    raw = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
    try:
        return json.loads(raw)
    except ValueError as exc:
        snippet = body_snippet(raw)
        raise ParseError(f"Event payload is not valid JSON: {snippet!r}", snippet=snippet) from exc


def parse_event(payload: Union[str, bytes, bytearray, Mapping[str, Any]]) -> Event:
    """
    Parse a webhook payload.

    Args:
        payload: The raw request body, or an already decoded JSON object

    Returns:
        The typed event

    Raises:
        ParseError: If the payload is not JSON, names an unknown event type,
            or does not match that type's schema
    """
    data = _load(payload) if isinstance(payload, (str, bytes, bytearray)) else payload
    if not isinstance(data, Mapping):
        raise ParseError(f"Event payload must be a JSON object, got {type(data).__name__}")

    raw_type = data.get("type")
    try:
        event_type = EventType(raw_type)
    except ValueError:
        raise ParseError(f"Unknown event type {raw_type!r}") from None

    model = _EVENT_MODELS[event_type.category]
    try:
        event = model.model_validate(data)
    except SchemaValidationError as exc:
        raise ParseError(
            f"Invalid {event_type.value} event ({exc.error_count()} validation errors)"
        ) from exc

    logger.debug(f"Parsed {event_type.value} event")
    return event
