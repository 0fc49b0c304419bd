"""Centralized opinionated defaults for generated config files."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

DEFAULT_COMMAND_PREFIX = "!"
DEFAULT_AI_PREFIX = "ai "
DEFAULT_USER_DOMAIN = "c.us"
DEFAULT_ADMIN_NUMBER = "+1234567890"

DEFAULT_MODERATION: dict[str, Any] = {
    "banned_words": ["badword1", "badword2", "spam", "scam", "fraud"],
    "allowed_links": [
        "whatsapp.com",
        "facebook.com",
        "instagram.com",
        "youtube.com",
        "twitter.com",
        "x.com",
        "tiktok.com",
    ],
    "max_messages_per_minute": 10,
    "max_warnings": 3,
}

DEFAULT_TEMPLATES: dict[str, str] = {
    "welcome": "Welcome to the group, {{user}}! We're glad to have you here.",
    "goodbye": "Goodbye, {{user}}. We'll miss you!",
}

DEFAULT_GROUP_INFO: dict[str, Any] = {
    "name": "WhatsApp Bot Group",
    "description": "A group managed by the WhatsApp Bot",
    "members": 0,
}

DEFAULT_AI: dict[str, Any] = {
    "model": "gpt-3.5-turbo",
    "image_size": "512x512",
    "temperature": 0.7,
    "max_tokens": 150,
    "timeout_ms": 30000,
}

# Static demo rates relative to USD.
DEFAULT_CURRENCY_RATES: dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.93,
    "GBP": 0.79,
    "JPY": 148.5,
    "INR": 83.2,
}


def default_moderation() -> dict[str, Any]:
    return deepcopy(DEFAULT_MODERATION)


def default_currency_rates() -> dict[str, float]:
    return dict(DEFAULT_CURRENCY_RATES)
