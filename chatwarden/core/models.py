"""Domain models for the moderation and command core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TypeAlias

MessageId: TypeAlias = str
SenderId: TypeAlias = str
GroupId: TypeAlias = str


@dataclass(frozen=True, slots=True, kw_only=True)
class InboundEvent:
    """Normalized inbound message consumed by the pipeline."""

    chat_id: str
    sender_id: SenderId
    content: str
    group_id: GroupId | None = None
    message_id: MessageId | None = None
    is_from_self: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    raw_metadata: dict[str, object] = field(default_factory=dict)

    @property
    def is_group(self) -> bool:
        return self.group_id is not None


@dataclass(frozen=True, slots=True)
class Participant:
    """One member of a group as reported by the transport."""

    id: str
    is_admin: bool = False
    is_super_admin: bool = False


@dataclass(frozen=True, slots=True)
class Verdict:
    """Moderation outcome for one message."""

    blocked: bool
    reason: str = ""
    delete_message: bool = False

    @classmethod
    def allow(cls) -> "Verdict":
        return cls(blocked=False)


@dataclass(frozen=True, slots=True)
class HandleResult:
    """Reply text and delete directive produced for one inbound message."""

    reply: str | None = None
    delete: bool = False


@dataclass(frozen=True, slots=True)
class AfkRecord:
    """A sender's away status."""

    note: str
    set_at: datetime


@dataclass(slots=True)
class Poll:
    """A created poll awaiting votes. Votes are keyed by option text."""

    id: int
    question: str
    creator: SenderId
    group_id: GroupId | None
    votes: dict[str, int] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True, slots=True)
class Reminder:
    """A deferred one-shot notification."""

    id: int
    fire_at: datetime
    text: str
    recipient: str
    duration_label: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class StatusSnapshot:
    """Read-only status view for reporting surfaces."""

    status: str
    timestamp: datetime
    features: dict[str, bool]
    banned_users: int
    active_polls: int
    pending_reminders: int
    locked_groups: int
    uptime_seconds: int
