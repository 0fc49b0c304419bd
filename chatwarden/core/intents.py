"""Intent types emitted by the inbound pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True, kw_only=True)
class SendReplyIntent:
    """Reply to the inbound message with ``text``."""

    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class DeleteMessageIntent:
    """Delete the inbound message after replying."""

    reason: str


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordMetricIntent:
    """Emit one structured counter metric."""

    name: str
    value: int = 1
    labels: tuple[tuple[str, str], ...] = ()


PipelineIntent: TypeAlias = SendReplyIntent | DeleteMessageIntent | RecordMetricIntent