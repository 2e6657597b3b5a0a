from enum import Enum
from typing import Optional, Union

from pydantic import SecretStr

from .executor import ApiRequest
from .ids import ApiKeyId, IdLike, consume
from .models import ListOptions, ListResponse, RequestModel, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


class Permission(str, Enum):
    FULL_ACCESS = "full_access"
    SENDING_ACCESS = "sending_access"


class CreateApiKeyOptions(RequestModel):
    """
    A new API key.

    ``domain_id`` restricts a ``sending_access`` key to one domain.
    """

    name: str
    permission: Optional[Permission] = None
    domain_id: Optional[IdLike] = None


class CreateApiKeyResponse(ResourceModel):
    id: ApiKeyId
    token: SecretStr


class ApiKey(ResourceModel):
    id: ApiKeyId
    name: Optional[str] = None
    created_at: Optional[str] = None


class ApiKeys(Service):
    """``/api-keys`` endpoints."""

    def create(self, api_key: CreateApiKeyOptions) -> MaybeAwaitable[CreateApiKeyResponse]:
        """Create a key. The token is only ever returned by this call."""
        return self._call(ApiRequest("POST", "/api-keys", body=api_key), CreateApiKeyResponse)

    def delete(self, api_key_id: Union[ApiKeyId, str]) -> MaybeAwaitable[None]:
        request = ApiRequest("DELETE", f"/api-keys/{segment(consume(api_key_id))}")
        return self._call(request, unwrap=lambda _: None)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[ApiKey]]:
        request = ApiRequest("GET", "/api-keys", query=list_query(options))
        return self._call(request, ListResponse[ApiKey])
