"""Application composition."""

from chatwarden.app.bootstrap import BotService, build_completion, build_service

__all__ = ["BotService", "build_completion", "build_service"]
