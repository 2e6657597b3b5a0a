"""
Identifier newtypes.

Identifiers are opaque strings handed out by the API. Wrapping them keeps a
``DomainId`` from being passed where an ``EmailId`` is expected, and lets
delete operations *consume* the identifier they are given: once consumed,
any further use raises :class:`ConsumedIdentifierError`. Call
:meth:`ResourceId.copy` first to keep a usable duplicate.
"""

from typing import Annotated, Any, Union

from pydantic import BeforeValidator, GetCoreSchemaHandler
from pydantic_core import core_schema


class ConsumedIdentifierError(RuntimeError):
    """An identifier was used after a delete operation consumed it."""


class ResourceId:
    """Opaque identifier of one remote resource."""

    __slots__ = ("_value", "_consumed")

    def __init__(self, value: str):
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{type(self).__name__} must be a non-empty string")
        self._value = value
        self._consumed = False

    @property
    def value(self) -> str:
        if self._consumed:
            raise ConsumedIdentifierError(
                f"{type(self).__name__}({self._value!r}) was consumed by a delete "
                "operation; call copy() before deleting to keep it"
            )
        return self._value

    @property
    def raw(self) -> str:
        """The underlying string, readable even after the id was consumed."""
        return self._value

    @property
    def consumed(self) -> bool:
        return self._consumed

    def copy(self) -> "ResourceId":
        """Explicitly duplicate the identifier."""
        return type(self)(self.value)

    def consume(self) -> str:
        """Hand the identifier over, marking this instance unusable."""
        value = self.value
        self._consumed = True
        return value

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        state = ", consumed" if self._consumed else ""
        return f"{type(self).__name__}({self._value!r}{state})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResourceId):
            return type(self) is type(other) and self._value == other._value
        if isinstance(other, str):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_after_validator_function(cls, core_schema.str_schema()),
            ],
            serialization=core_schema.to_string_ser_schema(),
        )


class EmailId(ResourceId):
    __slots__ = ()


class DomainId(ResourceId):
    __slots__ = ()


class ApiKeyId(ResourceId):
    __slots__ = ()


class AudienceId(ResourceId):
    __slots__ = ()


class ContactId(ResourceId):
    __slots__ = ()


class BroadcastId(ResourceId):
    __slots__ = ()


class WebhookId(ResourceId):
    __slots__ = ()


class SegmentId(ResourceId):
    __slots__ = ()


class TopicId(ResourceId):
    __slots__ = ()


class TemplateId(ResourceId):
    __slots__ = ()


class InboundEmailId(ResourceId):
    __slots__ = ()


class AttachmentId(ResourceId):
    __slots__ = ()


def as_str(identifier: Union[str, ResourceId]) -> str:
    """Borrow an identifier: return its value without consuming it."""
    if isinstance(identifier, ResourceId):
        return identifier.value
    if not isinstance(identifier, str) or not identifier.strip():
        raise ValueError("identifier must be a non-empty string")
    return identifier


def consume(identifier: Union[str, ResourceId]) -> str:
    """Take an identifier: return its value and mark a ``ResourceId`` consumed."""
    if isinstance(identifier, ResourceId):
        return identifier.consume()
    return as_str(identifier)


def _borrow_for_field(value: Any) -> Any:
    if isinstance(value, ResourceId):
        return value.value
    return value


# Request model field accepting a plain string or any ResourceId
IdLike = Annotated[str, BeforeValidator(_borrow_for_field)]
