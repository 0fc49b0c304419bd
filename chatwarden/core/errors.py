"""Error taxonomy for the moderation and command core.

Every error is handled at the boundary of the component that detects it and
converted into a user-visible reply; none escape ``handle_inbound_message``.
"""

from __future__ import annotations


class ChatWardenError(Exception):
    """Base class for all chatwarden errors."""


class ConfigurationError(ChatWardenError):
    """A capability is missing credentials or settings."""


class ProviderError(ChatWardenError):
    """The completion provider failed or timed out."""


class ValidationError(ChatWardenError):
    """Command arguments are malformed."""


class AuthorizationError(ChatWardenError):
    """A non-admin sender invoked a privileged command."""


class PreconditionError(ChatWardenError):
    """A command precondition does not hold (target not in group, ...)."""


class TransportError(ChatWardenError):
    """A transport call (send, delete, remove, ...) failed."""

    def __init__(self, operation: str, message: str, *, retryable: bool = False):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.retryable = retryable
