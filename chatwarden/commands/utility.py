"""Productivity commands: reminders, polls, calculator, currency and AFK."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from chatwarden.commands import calculator
from chatwarden.commands.contracts import CommandContext, CommandServices, CommandSpec
from chatwarden.commands.parsing import DURATION_HELP, format_number, parse_currency, parse_duration
from chatwarden.core.errors import PreconditionError, ValidationError
from chatwarden.core.models import Reminder

INVALID_EXPRESSION = "❌ Invalid mathematical expression"


class UtilityCommands:
    def __init__(self, services: CommandServices):
        self._services = services

    @property
    def _prefix(self) -> str:
        return self._services.config.commands.prefix

    def specs(self) -> list[CommandSpec]:
        return [
            CommandSpec("remind", self.remind),
            CommandSpec("poll", self.poll),
            CommandSpec("calc", self.calc),
            CommandSpec("currency", self.currency),
            CommandSpec("afk", self.afk),
        ]

    async def remind(self, ctx: CommandContext) -> str:
        parts = ctx.args.split(None, 1)
        duration = parts[0] if parts else ""
        minutes = parse_duration(duration)
        if minutes is None:
            raise ValidationError(DURATION_HELP)
        scheduler = self._services.scheduler
        if scheduler is None:
            raise PreconditionError("Reminders are not available right now.")

        store = self._services.store
        reminder = Reminder(
            id=store.next_reminder_id(),
            fire_at=datetime.now(UTC) + timedelta(minutes=minutes),
            text=parts[1] if len(parts) > 1 else "",
            recipient=ctx.sender,
            duration_label=duration,
        )
        scheduler.schedule(reminder)
        return f"⏰ Reminder set for {duration} from now."

    async def poll(self, ctx: CommandContext) -> str:
        question = ctx.args
        if not question:
            return (
                f"Usage: {self._prefix}poll <question>\n"
                f"Example: {self._prefix}poll What's your favorite color?"
            )
        poll = self._services.store.create_poll(question=question, creator=ctx.sender, group_id=ctx.group_id)
        return (
            "📊 *POLL CREATED*\n\n"
            f"*Question:* {question}\n\n"
            "Vote with:\n"
            f"{self._prefix}vote {poll.id} option"
        )

    async def calc(self, ctx: CommandContext) -> str:
        expression = ctx.args
        if not expression:
            return f"Usage: {self._prefix}calc <expression>\nExample: {self._prefix}calc 2+2*5"
        try:
            result = calculator.evaluate(expression)
        except ValidationError:
            return INVALID_EXPRESSION
        return f"🧮 *Calculation*\n\n{expression} = {format_number(result)}"

    async def currency(self, ctx: CommandContext) -> str:
        if not ctx.args:
            return (
                f"Usage: {self._prefix}currency <amount>\n"
                f"Example: {self._prefix}currency 100 USD to EUR"
            )
        conversion = parse_currency(ctx.args, self._services.config.currency_rates)
        return (
            "💱 *Currency Conversion*\n\n"
            f"{format_number(conversion.amount)} {conversion.source} = "
            f"{conversion.result:.2f} {conversion.target}\n"
            f"(Rate: 1 {conversion.source} = {conversion.rate:.4f} {conversion.target})"
        )

    async def afk(self, ctx: CommandContext) -> str:
        record = self._services.store.set_afk(ctx.sender, ctx.args or "AFK")
        return f"💤 You are now AFK: {record.note}"
