from typing import Optional, Union

from .executor import ApiRequest
from .ids import SegmentId, consume
from .models import DeleteResponse, ListOptions, ListResponse, RequestModel, ResourceModel
from .service import MaybeAwaitable, Service, list_query, segment


class CreateSegmentOptions(RequestModel):
    name: str


class CreateSegmentResponse(ResourceModel):
    object: Optional[str] = None
    id: SegmentId
    name: Optional[str] = None


class Segment(ResourceModel):
    object: Optional[str] = None
    id: SegmentId
    name: Optional[str] = None
    created_at: Optional[str] = None


class Segments(Service):
    """``/segments`` endpoints: named groups contacts can be added to."""

    def create(self, options: CreateSegmentOptions) -> MaybeAwaitable[CreateSegmentResponse]:
        return self._call(ApiRequest("POST", "/segments", body=options), CreateSegmentResponse)

    def get(self, segment_id: Union[SegmentId, str]) -> MaybeAwaitable[Segment]:
        return self._call(ApiRequest("GET", f"/segments/{segment(segment_id)}"), Segment)

    def delete(self, segment_id: Union[SegmentId, str]) -> MaybeAwaitable[DeleteResponse]:
        request = ApiRequest("DELETE", f"/segments/{segment(consume(segment_id))}")
        return self._call(request, DeleteResponse)

    def list(self, options: Optional[ListOptions] = None) -> MaybeAwaitable[ListResponse[Segment]]:
        request = ApiRequest("GET", "/segments", query=list_query(options))
        return self._call(request, ListResponse[Segment])
