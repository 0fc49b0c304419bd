"""Typed core domain and pipeline primitives."""

from chatwarden.core.errors import (
    AuthorizationError,
    ChatWardenError,
    ConfigurationError,
    PreconditionError,
    ProviderError,
    TransportError,
    ValidationError,
)
from chatwarden.core.intents import DeleteMessageIntent, RecordMetricIntent, SendReplyIntent
from chatwarden.core.models import (
    AfkRecord,
    HandleResult,
    InboundEvent,
    Participant,
    Poll,
    Reminder,
    StatusSnapshot,
    Verdict,
)
from chatwarden.core.pipeline import Pipeline, PipelineContext

__all__ = [
    "AfkRecord",
    "AuthorizationError",
    "ChatWardenError",
    "ConfigurationError",
    "DeleteMessageIntent",
    "HandleResult",
    "InboundEvent",
    "Participant",
    "Pipeline",
    "PipelineContext",
    "Poll",
    "PreconditionError",
    "ProviderError",
    "RecordMetricIntent",
    "Reminder",
    "SendReplyIntent",
    "StatusSnapshot",
    "TransportError",
    "ValidationError",
    "Verdict",
]
