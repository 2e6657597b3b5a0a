from typing import Optional, Union

from .executor import ApiRequest
from .ids import AudienceId, consume
from .models import DeleteResponse, ListOptions, ListResponse, RequestModel, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


class CreateAudienceOptions(RequestModel):
    name: str


class Audience(ResourceModel):
    object: Optional[str] = None
    id: AudienceId
    name: Optional[str] = None
    created_at: Optional[str] = None


class Audiences(Service):
    """``/audiences`` endpoints. Contacts live under :class:`~resendex.contacts.Contacts`."""

    def create(self, audience: CreateAudienceOptions) -> MaybeAwaitable[Audience]:
        return self._call(ApiRequest("POST", "/audiences", body=audience), Audience)

    def get(self, audience_id: Union[AudienceId, str]) -> MaybeAwaitable[Audience]:
        return self._call(ApiRequest("GET", f"/audiences/{segment(audience_id)}"), Audience)

    def delete(self, audience_id: Union[AudienceId, str]) -> MaybeAwaitable[DeleteResponse]:
        request = ApiRequest("DELETE", f"/audiences/{segment(consume(audience_id))}")
        return self._call(request, DeleteResponse)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Audience]]:
        request = ApiRequest("GET", "/audiences", query=list_query(options))
        return self._call(request, ListResponse[Audience])
