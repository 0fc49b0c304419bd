"""Inbound moderation checks."""

from chatwarden.moderation.engine import BANNED_FOR_WARNINGS, ModerationEngine
from chatwarden.moderation.rules import (
    BANNED_WORD_REASON,
    LINK_BLOCKED_REASON,
    SPAM_REASON,
    blocked_links,
    extract_links,
    find_banned_word,
    link_allowed,
)

__all__ = [
    "BANNED_FOR_WARNINGS",
    "BANNED_WORD_REASON",
    "LINK_BLOCKED_REASON",
    "ModerationEngine",
    "SPAM_REASON",
    "blocked_links",
    "extract_links",
    "find_banned_word",
    "link_allowed",
]
