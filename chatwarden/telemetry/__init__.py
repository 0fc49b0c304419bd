"""Telemetry backends."""

from chatwarden.telemetry.inmemory import InMemoryTelemetry

__all__ = ["InMemoryTelemetry"]
