"""Restricted arithmetic evaluator for ``!calc``.

Grammar::

    expr   := term (("+" | "-") term)*
    term   := factor (("*" | "/") factor)*
    factor := ("+" | "-") factor | NUMBER | "(" expr ")"
"""

from __future__ import annotations

import math
import re

from chatwarden.core.errors import ValidationError

_TOKEN_RE = re.compile(r"\s*(?:(\d+\.\d*|\.\d+|\d+)|(.))")
_MAX_DEPTH = 64


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    for number, op in _TOKEN_RE.findall(text):
        if number:
            tokens.append(number)
        elif op:
            if op not in "+-*/()":
                raise ValidationError(f"unexpected character {op!r}")
            tokens.append(op)
    return tokens


class _Parser:
    def __init__(self, tokens: list[str]):
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def parse(self) -> float:
        if not self._tokens:
            raise ValidationError("empty expression")
        value = self._expr()
        if self._pos != len(self._tokens):
            raise ValidationError(f"unexpected token {self._tokens[self._pos]!r}")
        return value

    def _peek(self) -> str | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _take(self) -> str:
        token = self._peek()
        if token is None:
            raise ValidationError("unexpected end of expression")
        self._pos += 1
        return token

    def _expr(self) -> float:
        value = self._term()
        while self._peek() in ("+", "-"):
            if self._take() == "+":
                value += self._term()
            else:
                value -= self._term()
        return value

    def _term(self) -> float:
        value = self._factor()
        while self._peek() in ("*", "/"):
            op = self._take()
            rhs = self._factor()
            if op == "*":
                value *= rhs
            elif rhs == 0:
                raise ValidationError("division by zero")
            else:
                value /= rhs
        return value

    def _factor(self) -> float:
        self._depth += 1
        if self._depth > _MAX_DEPTH:
            raise ValidationError("expression nested too deeply")
        try:
            token = self._take()
            if token == "+":
                return self._factor()
            if token == "-":
                return -self._factor()
            if token == "(":
                value = self._expr()
                if self._take() != ")":
                    raise ValidationError("missing closing parenthesis")
                return value
            if token in "*/)":
                raise ValidationError(f"unexpected token {token!r}")
            return float(token)
        finally:
            self._depth -= 1


def evaluate(expression: str) -> float:
    """Evaluate ``expression``; raise ``ValidationError`` on anything else."""
    result = _Parser(_tokenize(expression)).parse()
    if not math.isfinite(result):
        raise ValidationError("result is not a finite number")
    return result
