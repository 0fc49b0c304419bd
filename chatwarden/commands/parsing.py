"""Argument parsers for command handlers."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass

from chatwarden.core.errors import ValidationError

_DURATION_RE = re.compile(r"^(\d+)([mhd])$")
_CURRENCY_RE = re.compile(r"(\d+)\s*([a-zA-Z]+)\s*to\s*([a-zA-Z]+)", re.IGNORECASE)

_UNIT_MINUTES = {"m": 1, "h": 60, "d": 24 * 60}

DURATION_HELP = "Invalid time format. Use: 10m, 1h, 2d"
CURRENCY_FORMAT_HELP = "Invalid format. Use: !currency 100 USD to EUR"


def parse_duration(token: str) -> int | None:
    """Return minutes for ``10m``/``1h``/``2d`` tokens, ``None`` otherwise.

    Zero durations are rejected.
    """
    match = _DURATION_RE.match(token.strip())
    if not match:
        return None
    minutes = int(match.group(1)) * _UNIT_MINUTES[match.group(2)]
    return minutes or None


@dataclass(frozen=True, slots=True)
class Conversion:
    amount: float
    source: str
    target: str
    rate: float

    @property
    def result(self) -> float:
        return self.amount * self.rate


def parse_currency(text: str, rates: Mapping[str, float]) -> Conversion:
    """Parse ``<number> <CODE> to <CODE>`` and resolve the cross rate.

    Raises ``ValidationError`` with a user-facing message on bad input.
    """
    match = _CURRENCY_RE.search(text)
    if not match:
        raise ValidationError(CURRENCY_FORMAT_HELP)
    amount = float(match.group(1))
    source = match.group(2).upper()
    target = match.group(3).upper()
    if source not in rates or target not in rates:
        raise ValidationError("Unsupported currency. Supported: " + ", ".join(rates))
    return Conversion(amount=amount, source=source, target=target, rate=rates[target] / rates[source])


def format_number(value: float) -> str:
    """Render a number the way chat users expect (``93`` not ``93.0``)."""
    if math.isfinite(value) and value == int(value) and abs(value) < 1e16:
        return str(int(value))
    return repr(value)
