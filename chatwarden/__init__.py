"""chatwarden - WhatsApp group moderation and command bot."""

__version__ = "0.1.0"
__logo__ = "🛡️"
