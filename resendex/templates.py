"""
``/templates`` endpoints.

A template is addressed by its :class:`~resendex.ids.TemplateId` or by the
alias given at creation. New templates start as drafts; :meth:`Templates.publish`
makes the current draft the version emails are rendered from.
"""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import Field, field_validator

from .executor import ApiRequest
from .ids import TemplateId, consume
from .models import DeleteResponse, ListOptions, ListResponse, RequestModel, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


class VariableType(str, Enum):
    STRING = "string"
    NUMBER = "number"


class Variable(ResourceModel):
    """Placeholder a template body may reference, with an optional fallback."""

    key: str
    type: VariableType
    fallback_value: Optional[Any] = None


def _as_list(value: Union[str, List[str], None]) -> Optional[List[str]]:
    return [value] if isinstance(value, str) else value


class CreateTemplateOptions(RequestModel):
    name: str
    html: str
    alias: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    subject: Optional[str] = None
    reply_to: Optional[List[str]] = None
    text: Optional[str] = None
    variables: Optional[List[Variable]] = None

    @field_validator("reply_to", mode="before")
    @classmethod
    def _single_reply_to(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        return _as_list(value)


class UpdateTemplateOptions(RequestModel):
    name: Optional[str] = None
    html: Optional[str] = None
    alias: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    subject: Optional[str] = None
    reply_to: Optional[List[str]] = None
    text: Optional[str] = None
    variables: Optional[List[Variable]] = None

    @field_validator("reply_to", mode="before")
    @classmethod
    def _single_reply_to(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        return _as_list(value)


class Template(ResourceModel):
    object: Optional[str] = None
    id: TemplateId
    alias: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    published_at: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    subject: Optional[str] = None
    reply_to: Optional[List[str]] = None
    html: Optional[str] = None
    text: Optional[str] = None
    variables: List[Variable] = Field(default_factory=list)

    @field_validator("variables", mode="before")
    @classmethod
    def _null_variables(cls, value: Any) -> Any:
        # The API sends null for a template without variables
        return [] if value is None else value


class TemplateRef(ResourceModel):
    object: Optional[str] = None
    id: TemplateId


TemplateRefLike = Union[TemplateId, str]


class Templates(Service):
    def create(self, template: CreateTemplateOptions) -> MaybeAwaitable[TemplateRef]:
        return self._call(ApiRequest("POST", "/templates", body=template), TemplateRef)

    def get(self, template: TemplateRefLike) -> MaybeAwaitable[Template]:
        return self._call(ApiRequest("GET", f"/templates/{segment(template)}"), Template)

    def update(self, template: TemplateRefLike, update: UpdateTemplateOptions) -> MaybeAwaitable[TemplateRef]:
        request = ApiRequest("PATCH", f"/templates/{segment(template)}", body=update)
        return self._call(request, TemplateRef)

    def publish(self, template: TemplateRefLike) -> MaybeAwaitable[TemplateRef]:
        return self._call(ApiRequest("POST", f"/templates/{segment(template)}/publish"), TemplateRef)

    def duplicate(self, template: TemplateRefLike) -> MaybeAwaitable[TemplateRef]:
        """Copy a template; the response names the new draft."""
        return self._call(ApiRequest("POST", f"/templates/{segment(template)}/duplicate"), TemplateRef)

    def delete(self, template: TemplateRefLike) -> MaybeAwaitable[DeleteResponse]:
        """Delete a template. A ``TemplateId`` passed here cannot be used again."""
        request = ApiRequest("DELETE", f"/templates/{segment(consume(template))}")
        return self._call(request, DeleteResponse)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Template]]:
        request = ApiRequest("GET", "/templates", query=list_query(options))
        return self._call(request, ListResponse[Template])
