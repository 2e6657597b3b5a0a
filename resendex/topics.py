"""
``/topics`` endpoints.

Topics let contacts opt in or out of one kind of email on the
unsubscribe page.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import Field

from .executor import ApiRequest
from .ids import TopicId, consume
from .models import DeleteResponse, ListOptions, ListResponse, RequestModel, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


class SubscriptionType(str, Enum):
    """Subscription state a new contact starts with."""

    OPT_IN = "opt_in"
    OPT_OUT = "opt_out"


class TopicVisibility(str, Enum):
    """Who sees the topic on the unsubscribe page."""

    PUBLIC = "public"
    PRIVATE = "private"


class CreateTopicOptions(RequestModel):
    name: str = Field(max_length=50)
    default_subscription: SubscriptionType
    description: Optional[str] = Field(default=None, max_length=200)
    visibility: Optional[TopicVisibility] = None


class UpdateTopicOptions(RequestModel):
    name: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    visibility: Optional[TopicVisibility] = None


class Topic(ResourceModel):
    object: Optional[str] = None
    id: TopicId
    name: Optional[str] = None
    description: Optional[str] = None
    default_subscription: Optional[SubscriptionType] = None
    visibility: Optional[TopicVisibility] = None
    created_at: Optional[str] = None


class TopicRef(ResourceModel):
    object: Optional[str] = None
    id: TopicId


class Topics(Service):
    def create(self, topic: CreateTopicOptions) -> MaybeAwaitable[TopicRef]:
        return self._call(ApiRequest("POST", "/topics", body=topic), TopicRef)

    def get(self, topic_id: Union[TopicId, str]) -> MaybeAwaitable[Topic]:
        return self._call(ApiRequest("GET", f"/topics/{segment(topic_id)}"), Topic)

    def update(
        self, topic_id: Union[TopicId, str], update: UpdateTopicOptions
    ) -> MaybeAwaitable[TopicRef]:
        request = ApiRequest("PATCH", f"/topics/{segment(topic_id)}", body=update)
        return self._call(request, TopicRef)

    def delete(self, topic_id: Union[TopicId, str]) -> MaybeAwaitable[DeleteResponse]:
        """Remove a topic. A ``TopicId`` passed here cannot be used again."""
        request = ApiRequest("DELETE", f"/topics/{segment(consume(topic_id))}")
        return self._call(request, DeleteResponse)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Topic]]:
        request = ApiRequest("GET", "/topics", query=list_query(options))
        return self._call(request, ListResponse[Topic])
