"""Reminder scheduling."""

from chatwarden.scheduler.reminders import ReminderScheduler

__all__ = ["ReminderScheduler"]
