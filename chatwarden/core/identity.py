"""User-id normalization and admin identity checks."""

from __future__ import annotations

from collections.abc import Iterable

from chatwarden.config.defaults import DEFAULT_USER_DOMAIN


def normalize_user_id(value: str, *, domain: str = DEFAULT_USER_DOMAIN) -> str:
    """Resolve a user argument to a fully qualified transport id.

    ``@123`` and ``123`` become ``123@c.us``; ``123@c.us`` is kept as-is.
    """
    token = value.strip()
    if token.startswith("@"):
        return f"{token[1:]}@{domain}"
    if "@" not in token:
        return f"{token}@{domain}"
    return token


def user_part(user_id: str) -> str:
    """Return the local part of a transport id (``123`` for ``123@c.us``)."""
    return user_id.split("@", 1)[0]


# Domains a bare phone-number entry expands to.
_PHONE_DOMAINS = (DEFAULT_USER_DOMAIN, "s.whatsapp.net")


def _canonical_sender(value: str) -> str:
    """Lowercase ``value`` and drop a ``:N`` device suffix, keeping the domain."""
    token = value.strip().lower()
    if "@" not in token:
        return token.split(":", 1)[0]
    left, right = token.split("@", 1)
    return f"{left.split(':', 1)[0]}@{right}"


def _identity_aliases(value: str) -> set[str]:
    """Expand one admin entry into the full sender ids it should match.

    Entries with a domain match that domain only; bare numbers (``123``,
    ``+123``) match the phone-number domains.
    """
    token = _canonical_sender(value)
    if not token:
        return set()
    if "@" in token:
        return {token}
    number = token.removeprefix("+")
    if not number:
        return set()
    return {number, f"+{number}"} | {f"{number}@{domain}" for domain in _PHONE_DOMAINS}


class AdminSet:
    """Configured admin addresses.

    The sender id is compared in full, domain included, after dropping a
    device suffix. Bare phone-number entries expand to ``<n>@c.us`` and
    ``<n>@s.whatsapp.net``.
    """

    def __init__(self, admins: Iterable[str]) -> None:
        self._entries = [a.strip() for a in admins if a.strip()]
        self._aliases: frozenset[str] = frozenset(
            alias for entry in self._entries for alias in _identity_aliases(entry)
        )

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def is_admin(self, sender_id: str) -> bool:
        token = _canonical_sender(sender_id)
        return bool(token) and token in self._aliases

    def __contains__(self, sender_id: object) -> bool:
        return isinstance(sender_id, str) and self.is_admin(sender_id)

    def __len__(self) -> int:
        return len(self._entries)
