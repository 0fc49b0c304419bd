"""Inbound message middleware."""

from chatwarden.pipeline.gate import GroupLockMiddleware, SelfMessageFilterMiddleware
from chatwarden.pipeline.moderation import ModerationMiddleware
from chatwarden.pipeline.routing import AIChatMiddleware, CommandMiddleware

__all__ = [
    "AIChatMiddleware",
    "CommandMiddleware",
    "GroupLockMiddleware",
    "ModerationMiddleware",
    "SelfMessageFilterMiddleware",
]
