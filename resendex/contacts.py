"""
Contacts of an audience: ``/audiences/{audience_id}/contacts``.

Every call names the audience. A contact is addressed by its
:class:`~resendex.ids.ContactId` or by its email address.
"""

from typing import Optional, Union

from .executor import ApiRequest
from .ids import AudienceId, ContactId, consume
from .models import (
    DeleteResponse,
    ListOptions,
    ListResponse,
    ObjectRef,
    RequestModel,
    ResourceModel,
)
from .service import MaybeAwaitable, Service, list_query, segment

ContactRef = Union[ContactId, str]


class CreateContactOptions(RequestModel):
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    unsubscribed: Optional[bool] = None


class UpdateContactOptions(RequestModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    unsubscribed: Optional[bool] = None


class Contact(ResourceModel):
    object: Optional[str] = None
    id: ContactId
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[str] = None
    unsubscribed: Optional[bool] = None


class CreateContactResponse(ResourceModel):
    object: Optional[str] = None
    id: ContactId


def _contacts_path(audience_id: Union[AudienceId, str]) -> str:
    return f"/audiences/{segment(audience_id)}/contacts"


class Contacts(Service):
    def create(
        self, audience_id: Union[AudienceId, str], contact: CreateContactOptions
    ) -> MaybeAwaitable[CreateContactResponse]:
        request = ApiRequest("POST", _contacts_path(audience_id), body=contact)
        return self._call(request, CreateContactResponse)

    def get(self, audience_id: Union[AudienceId, str], contact: ContactRef) -> MaybeAwaitable[Contact]:
        request = ApiRequest("GET", f"{_contacts_path(audience_id)}/{segment(contact)}")
        return self._call(request, Contact)

    def update(
        self,
        audience_id: Union[AudienceId, str],
        contact: ContactRef,
        update: UpdateContactOptions,
    ) -> MaybeAwaitable[ObjectRef]:
        request = ApiRequest("PATCH", f"{_contacts_path(audience_id)}/{segment(contact)}", body=update)
        return self._call(request, ObjectRef)

    def delete(
        self, audience_id: Union[AudienceId, str], contact: ContactRef
    ) -> MaybeAwaitable[DeleteResponse]:
        """Remove a contact. A ``ContactId`` passed here cannot be used again."""
        request = ApiRequest("DELETE", f"{_contacts_path(audience_id)}/{segment(consume(contact))}")
        return self._call(request, DeleteResponse)

    def list(
        self, audience_id: Union[AudienceId, str], options: Optional[ListOptions] = None
    ) -> MaybeAwaitable[ListResponse[Contact]]:
        request = ApiRequest("GET", _contacts_path(audience_id), query=list_query(options))
        return self._call(request, ListResponse[Contact])
