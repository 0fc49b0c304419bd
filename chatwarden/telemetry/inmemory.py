"""In-memory counter telemetry.

Backs the ``RecordMetricIntent`` stream and the status snapshot; tests read
counters back through ``get_counter``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field


@dataclass
class InMemoryTelemetry:
    counters: Counter[str] = field(default_factory=Counter)

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter."""
        self.counters[self._make_key(name, labels)] += value

    def _make_key(self, name: str, labels: tuple[tuple[str, str], ...] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in labels)
        return f"{name}{{{label_str}}}"

    def get_counter(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> int:
        return int(self.counters[self._make_key(name, labels)])

    def snapshot(self) -> dict[str, int]:
        return dict(self.counters)

    def reset(self) -> None:
        self.counters.clear()
