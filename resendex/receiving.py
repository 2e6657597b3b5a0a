"""
Received (inbound) email: ``/emails/receiving``.

Read-only. Attachment metadata is listed per email; the content itself is
fetched from the attachment's ``download_url``.
"""

from typing import Dict, List, Optional, Union

from pydantic import Field

from .executor import ApiRequest
from .ids import AttachmentId, InboundEmailId
from .models import ListOptions, ListResponse, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


class InboundAttachment(ResourceModel):
    object: Optional[str] = None
    id: AttachmentId
    filename: Optional[str] = None
    content_type: Optional[str] = None
    content_id: Optional[str] = None
    content_disposition: Optional[str] = None
    size: Optional[int] = None
    download_url: Optional[str] = None
    expires_at: Optional[str] = None


class InboundEmail(ResourceModel):
    object: Optional[str] = None
    id: InboundEmailId
    from_: Optional[str] = Field(default=None, alias="from")
    to: List[str] = Field(default_factory=list)
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    reply_to: Optional[List[str]] = None
    subject: Optional[str] = None
    created_at: Optional[str] = None
    html: Optional[str] = None
    text: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    attachments: List[InboundAttachment] = Field(default_factory=list)


def _email_path(email_id: Union[InboundEmailId, str]) -> str:
    return f"/emails/receiving/{segment(email_id)}"


class Receiving(Service):
    def get(self, email_id: Union[InboundEmailId, str]) -> MaybeAwaitable[InboundEmail]:
        return self._call(ApiRequest("GET", _email_path(email_id)), InboundEmail)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[InboundEmail]]:
        request = ApiRequest("GET", "/emails/receiving", query=list_query(options))
        return self._call(request, ListResponse[InboundEmail])

    def get_attachment(
        self,
        email_id: Union[InboundEmailId, str],
        attachment_id: Union[AttachmentId, str],
    ) -> MaybeAwaitable[InboundAttachment]:
        request = ApiRequest("GET", f"{_email_path(email_id)}/attachments/{segment(attachment_id)}")
        return self._call(request, InboundAttachment)

    def list_attachments(
        self,
        email_id: Union[InboundEmailId, str],
        options: Optional[ListOptions] = None,
    ) -> MaybeAwaitable[ListResponse[InboundAttachment]]:
        request = ApiRequest(
            "GET", f"{_email_path(email_id)}/attachments", query=list_query(options)
        )
        return self._call(request, ListResponse[InboundAttachment])
