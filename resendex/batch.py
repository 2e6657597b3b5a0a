"""
``/emails/batch``: send up to 100 emails in one call.

A batch carries at most one idempotency key, shared by the whole call:

    ```python
    emails = with_idempotency_key([first, second], "newsletter/2024-06")
    await client.batch.send(emails)
    ```
"""

from enum import Enum
from typing import Iterable, List, Union

from pydantic import Field

from .emails import CreateEmailOptions, CreateEmailResponse
from .executor import ApiRequest
from .idempotent import Idempotent, as_batch
from .models import ResourceModel
from .service import MaybeAwaitable, Service

BatchInput = Union[Iterable[CreateEmailOptions], Idempotent[Iterable[CreateEmailOptions]]]


class BatchValidation(str, Enum):
    """
    How the API validates a batch.

    ``STRICT`` rejects the whole batch if any email is invalid.
    ``PERMISSIVE`` sends the valid emails and reports the rest in
    :attr:`SendBatchResponse.errors`.
    """

    STRICT = "strict"
    PERMISSIVE = "permissive"


class BatchError(ResourceModel):
    index: int
    message: str


class SendBatchResponse(ResourceModel):
    data: List[CreateEmailResponse] = Field(default_factory=list)
    errors: List[BatchError] = Field(default_factory=list)


class Batch(Service):
    def send(self, emails: BatchInput) -> MaybeAwaitable[List[CreateEmailResponse]]:
        """Send a batch in strict mode and return the created email ids."""
        return self._send(emails, BatchValidation.STRICT, unwrap=lambda response: response.data)

    def send_with_validation(
        self, emails: BatchInput, validation: BatchValidation = BatchValidation.STRICT
    ) -> MaybeAwaitable[SendBatchResponse]:
        """Send a batch with an explicit validation mode."""
        return self._send(emails, BatchValidation(validation))

    def _send(self, emails: BatchInput, validation: BatchValidation, unwrap=None):
        batch = as_batch(emails)
        request = ApiRequest(
            "POST",
            "/emails/batch",
            body=batch.payload,
            idempotency_key=batch.key,
            headers={"x-batch-validation": validation.value},
        )
        return self._call(request, SendBatchResponse, unwrap)
