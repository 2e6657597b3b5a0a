"""
Client for the Resend email API with one request engine behind a blocking
and a non-blocking calling convention.
"""

from .api_keys import ApiKey, CreateApiKeyOptions, Permission
from .audiences import Audience, CreateAudienceOptions
from .batch import BatchValidation, SendBatchResponse
from .broadcasts import (
    Broadcast,
    CreateBroadcastOptions,
    SendBroadcastOptions,
    UpdateBroadcastOptions,
)
from .client import Resend
from .config import ClientConfig, ResendSettings, __version__
from .contacts import Contact, CreateContactOptions, UpdateContactOptions
from .core import Permit, RateLimiter
from .domains import CreateDomainOptions, Domain, Region, UpdateDomainOptions
from .emails import Attachment, CreateEmailOptions, Email, Tag, UpdateEmailOptions
from .events import ContactEvent, DomainEvent, EmailEvent, EventType, parse_event
from .exceptions import (
    AuthenticationError,
    ErrorCode,
    ErrorKind,
    NotFoundError,
    ParseError,
    RateLimitError,
    ResendError,
    ServerError,
    TransportError,
    ValidationError,
)
from .idempotent import Idempotent, with_idempotency_key
from .ids import (
    ApiKeyId,
    AttachmentId,
    AudienceId,
    BroadcastId,
    ConsumedIdentifierError,
    ContactId,
    DomainId,
    EmailId,
    InboundEmailId,
    SegmentId,
    TemplateId,
    TopicId,
    WebhookId,
)
from .models import DeleteResponse, ListOptions, ListResponse, RateLimiterStats
from .receiving import InboundAttachment, InboundEmail
from .segments import CreateSegmentOptions, Segment
from .templates import (
    CreateTemplateOptions,
    Template,
    UpdateTemplateOptions,
    Variable,
    VariableType,
)
from .topics import (
    CreateTopicOptions,
    SubscriptionType,
    Topic,
    TopicVisibility,
    UpdateTopicOptions,
)
from .utils import is_rate_limit_error
from .webhooks import CreateWebhookOptions, UpdateWebhookOptions, Webhook, WebhookStatus

__all__ = [
    '__version__',
    'Resend',
    'ClientConfig',
    'ResendSettings',
    'RateLimiter',
    'Permit',
    'RateLimiterStats',
    'Idempotent',
    'with_idempotency_key',
    'ListOptions',
    'ListResponse',
    'DeleteResponse',
    'is_rate_limit_error',
    # Errors
    'ResendError',
    'ErrorKind',
    'ErrorCode',
    'AuthenticationError',
    'NotFoundError',
    'ValidationError',
    'RateLimitError',
    'ServerError',
    'TransportError',
    'ParseError',
    'ConsumedIdentifierError',
    # Identifiers
    'EmailId',
    'DomainId',
    'ApiKeyId',
    'AudienceId',
    'ContactId',
    'BroadcastId',
    'WebhookId',
    'SegmentId',
    'TopicId',
    'TemplateId',
    'InboundEmailId',
    'AttachmentId',
    # Resources
    'CreateEmailOptions',
    'UpdateEmailOptions',
    'Email',
    'Attachment',
    'Tag',
    'BatchValidation',
    'SendBatchResponse',
    'CreateDomainOptions',
    'UpdateDomainOptions',
    'Domain',
    'Region',
    'CreateApiKeyOptions',
    'ApiKey',
    'Permission',
    'CreateAudienceOptions',
    'Audience',
    'CreateContactOptions',
    'UpdateContactOptions',
    'Contact',
    'CreateBroadcastOptions',
    'UpdateBroadcastOptions',
    'SendBroadcastOptions',
    'Broadcast',
    'CreateWebhookOptions',
    'UpdateWebhookOptions',
    'Webhook',
    'WebhookStatus',
    'CreateSegmentOptions',
    'Segment',
    'CreateTopicOptions',
    'UpdateTopicOptions',
    'Topic',
    'SubscriptionType',
    'TopicVisibility',
    'CreateTemplateOptions',
    'UpdateTemplateOptions',
    'Template',
    'Variable',
    'VariableType',
    'InboundEmail',
    'InboundAttachment',
    # Events
    'parse_event',
    'EventType',
    'EmailEvent',
    'ContactEvent',
    'DomainEvent',
]
