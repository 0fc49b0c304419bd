"""In-memory moderation and command state."""

from chatwarden.state.store import KeyedLocks, StateStore

__all__ = ["KeyedLocks", "StateStore"]
