"""
``/emails`` endpoints: send, retrieve, reschedule and cancel single emails.

https://resend.com/docs/api-reference/emails
"""

import base64
from typing import Dict, List, Optional, Union

from pydantic import Field, field_validator

from .executor import ApiRequest
from .idempotent import Idempotent
from .ids import EmailId
from .models import ListOptions, ListResponse, ObjectRef, RequestModel, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


def _as_list(value: Union[str, List[str], None]) -> Optional[List[str]]:
    if isinstance(value, str):
        return [value]
    return value


class Tag(RequestModel):
    """Custom key/value metadata attached to an email."""

    name: str
    value: str


class Attachment(RequestModel):
    """
    A file attached to an email.

    Either ``content`` (base64 encoded) or ``path`` (a URL the API fetches)
    must be given.
    """

    content: Optional[str] = None
    filename: Optional[str] = None
    path: Optional[str] = None
    content_type: Optional[str] = None

    @classmethod
    def from_bytes(cls, data: bytes, filename: str, content_type: Optional[str] = None) -> "Attachment":
        return cls(
            content=base64.b64encode(data).decode("ascii"),
            filename=filename,
            content_type=content_type,
        )

    @classmethod
    def from_path(cls, path: str, filename: Optional[str] = None) -> "Attachment":
        return cls(path=path, filename=filename)


class CreateEmailOptions(RequestModel):
    """
    One email to send.

    ``from_`` is sent as ``from``; include a friendly name with
    ``"Your Name <sender@domain.com>"``. ``to``, ``cc``, ``bcc`` and
    ``reply_to`` accept a single address or a list. ``scheduled_at`` takes an
    ISO 8601 timestamp or natural language such as ``"in 1 hour"``.
    """

    from_: str = Field(alias="from")
    to: List[str]
    subject: str
    html: Optional[str] = None
    text: Optional[str] = None
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    reply_to: Optional[List[str]] = None
    headers: Optional[Dict[str, str]] = None
    attachments: Optional[List[Attachment]] = None
    tags: Optional[List[Tag]] = None
    scheduled_at: Optional[str] = None

    @field_validator("to", "cc", "bcc", "reply_to", mode="before")
    @classmethod
    def _single_address(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        return _as_list(value)


class CreateEmailResponse(ResourceModel):
    id: EmailId


class UpdateEmailOptions(RequestModel):
    """Reschedule an email that has not been sent yet."""

    scheduled_at: Optional[str] = None


class Email(ResourceModel):
    """An email as returned by retrieve and list."""

    object: Optional[str] = None
    id: EmailId
    from_: Optional[str] = Field(default=None, alias="from")
    to: List[str] = Field(default_factory=list)
    subject: Optional[str] = None
    html: Optional[str] = None
    text: Optional[str] = None
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    reply_to: Optional[List[str]] = None
    created_at: Optional[str] = None
    last_event: Optional[str] = None
    scheduled_at: Optional[str] = None

    @field_validator("to", "cc", "bcc", "reply_to", mode="before")
    @classmethod
    def _single_address(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        return _as_list(value)


class Emails(Service):
    def send(
        self, email: Union[CreateEmailOptions, Idempotent[CreateEmailOptions]]
    ) -> MaybeAwaitable[CreateEmailResponse]:
        """
        Send one email.

        Wrap the email in :class:`~resendex.idempotent.Idempotent` with a key
        to make the send safe to repeat.
        """
        wrapped = Idempotent.of(email)
        request = ApiRequest("POST", "/emails", body=wrapped.payload, idempotency_key=wrapped.key)
        return self._call(request, CreateEmailResponse)

    def get(self, email_id: Union[EmailId, str]) -> MaybeAwaitable[Email]:
        return self._call(ApiRequest("GET", f"/emails/{segment(email_id)}"), Email)

    def update(
        self, email_id: Union[EmailId, str], update: UpdateEmailOptions
    ) -> MaybeAwaitable[ObjectRef]:
        request = ApiRequest("PATCH", f"/emails/{segment(email_id)}", body=update)
        return self._call(request, ObjectRef)

    def cancel(self, email_id: Union[EmailId, str]) -> MaybeAwaitable[ObjectRef]:
        """Cancel a scheduled email."""
        return self._call(ApiRequest("POST", f"/emails/{segment(email_id)}/cancel"), ObjectRef)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Email]]:
        request = ApiRequest("GET", "/emails", query=list_query(options))
        return self._call(request, ListResponse[Email])
