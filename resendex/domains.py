"""
``/domains`` endpoints.

https://resend.com/docs/api-reference/domains
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import Field

from .executor import ApiRequest
from .ids import DomainId, consume
from .models import (
    DeleteResponse,
    ListOptions,
    ListResponse,
    ObjectRef,
    RequestModel,
    ResourceModel,
)
from .service import MaybeAwaitable, Service, list_query, segment


class Region(str, Enum):
    """Region emails for a domain are sent from."""

    US_EAST_1 = "us-east-1"
    EU_WEST_1 = "eu-west-1"
    SA_EAST_1 = "sa-east-1"
    AP_NORTHEAST_1 = "ap-northeast-1"


class CreateDomainOptions(RequestModel):
    name: str
    region: Optional[Region] = None
    custom_return_path: Optional[str] = None


class UpdateDomainOptions(RequestModel):
    click_tracking: Optional[bool] = None
    open_tracking: Optional[bool] = None


class DomainRecord(ResourceModel):
    """A DNS record the domain owner has to publish."""

    record: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    ttl: Optional[str] = None
    status: Optional[str] = None
    value: Optional[str] = None
    priority: Optional[int] = None


class Domain(ResourceModel):
    object: Optional[str] = None
    id: DomainId
    name: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    region: Optional[str] = None
    records: List[DomainRecord] = Field(default_factory=list)


class Domains(Service):
    def create(self, domain: CreateDomainOptions) -> MaybeAwaitable[Domain]:
        return self._call(ApiRequest("POST", "/domains", body=domain), Domain)

    def get(self, domain_id: Union[DomainId, str]) -> MaybeAwaitable[Domain]:
        return self._call(ApiRequest("GET", f"/domains/{segment(domain_id)}"), Domain)

    def verify(self, domain_id: Union[DomainId, str]) -> MaybeAwaitable[ObjectRef]:
        """Ask the API to check the domain's DNS records now."""
        return self._call(ApiRequest("POST", f"/domains/{segment(domain_id)}/verify"), ObjectRef)

    def update(
        self, domain_id: Union[DomainId, str], update: UpdateDomainOptions
    ) -> MaybeAwaitable[ObjectRef]:
        request = ApiRequest("PATCH", f"/domains/{segment(domain_id)}", body=update)
        return self._call(request, ObjectRef)

    def delete(self, domain_id: Union[DomainId, str]) -> MaybeAwaitable[DeleteResponse]:
        """Delete a domain. A ``DomainId`` passed here cannot be used again."""
        request = ApiRequest("DELETE", f"/domains/{segment(consume(domain_id))}")
        return self._call(request, DeleteResponse)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Domain]]:
        request = ApiRequest("GET", "/domains", query=list_query(options))
        return self._call(request, ListResponse[Domain])
