"""Pure content rules for inbound moderation."""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlparse

_LINK_RE = re.compile(r"https?://[^\s]+")

LINK_BLOCKED_REASON = "🚫 Links are not allowed in this group"
BANNED_WORD_REASON = "🚫 Inappropriate language detected"
SPAM_REASON = "🚫 Slow down! You're sending too many messages"


def extract_links(body: str) -> list[str]:
    return _LINK_RE.findall(body)


def link_allowed(link: str, allowed_domains: Iterable[str]) -> bool:
    """Return whether ``link`` parses and its hostname contains an allowed entry.

    Unparseable links and links without a hostname are never allowed.
    """
    try:
        hostname = urlparse(link).hostname
    except ValueError:
        return False
    if not hostname:
        return False
    return any(domain and domain in hostname for domain in allowed_domains)


def blocked_links(body: str, allowed_domains: Iterable[str]) -> list[str]:
    domains = list(allowed_domains)
    return [link for link in extract_links(body) if not link_allowed(link, domains)]


def find_banned_word(body: str, banned_words: Iterable[str]) -> str | None:
    lowered = body.lower()
    for word in banned_words:
        if word and word.lower() in lowered:
            return word
    return None
