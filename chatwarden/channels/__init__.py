"""Chat transports."""

from chatwarden.channels.whatsapp import WhatsAppChannel

__all__ = ["WhatsAppChannel"]
