"""Configuration schema using Pydantic."""

import os
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatwarden.config.defaults import (
    DEFAULT_ADMIN_NUMBER,
    DEFAULT_AI,
    DEFAULT_AI_PREFIX,
    DEFAULT_COMMAND_PREFIX,
    DEFAULT_GROUP_INFO,
    DEFAULT_MODERATION,
    DEFAULT_TEMPLATES,
    DEFAULT_USER_DOMAIN,
    default_currency_rates,
)


def _default_admins() -> list[str]:
    return [os.environ.get("ADMIN_NUMBER", "").strip() or DEFAULT_ADMIN_NUMBER]


class ModerationConfig(BaseModel):
    """Content filter and rate-limit policy."""

    model_config = ConfigDict(extra="ignore")

    banned_words: list[str] = Field(default_factory=lambda: list(DEFAULT_MODERATION["banned_words"]))
    allowed_links: list[str] = Field(default_factory=lambda: list(DEFAULT_MODERATION["allowed_links"]))
    max_messages_per_minute: int = Field(default=int(DEFAULT_MODERATION["max_messages_per_minute"]), ge=1)
    max_warnings: int = Field(default=int(DEFAULT_MODERATION["max_warnings"]), ge=1)
    rate_window_seconds: float = Field(default=60.0, gt=0)


class CommandsConfig(BaseModel):
    """Command routing prefixes."""

    model_config = ConfigDict(extra="ignore")

    prefix: str = DEFAULT_COMMAND_PREFIX
    ai_prefix: str = DEFAULT_AI_PREFIX
    user_domain: str = DEFAULT_USER_DOMAIN

    @field_validator("prefix")
    @classmethod
    def _prefix_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("commands.prefix must not be empty")
        return value


class TemplatesConfig(BaseModel):
    """Member greeting templates. ``{{user}}`` is replaced with a mention."""

    model_config = ConfigDict(extra="ignore")

    welcome: str = DEFAULT_TEMPLATES["welcome"]
    goodbye: str = DEFAULT_TEMPLATES["goodbye"]


class GroupInfoConfig(BaseModel):
    """Static group description reported by ``!groupinfo``."""

    model_config = ConfigDict(extra="ignore")

    name: str = str(DEFAULT_GROUP_INFO["name"])
    description: str = str(DEFAULT_GROUP_INFO["description"])
    members: int = int(DEFAULT_GROUP_INFO["members"])


class AIConfig(BaseModel):
    """Completion parameters for AI chat and AI-backed commands."""

    model_config = ConfigDict(extra="ignore")

    model: str = str(DEFAULT_AI["model"])
    image_size: str = str(DEFAULT_AI["image_size"])
    temperature: float = float(DEFAULT_AI["temperature"])
    max_tokens: int = int(DEFAULT_AI["max_tokens"])
    timeout_ms: int = Field(default=int(DEFAULT_AI["timeout_ms"]), ge=100)


class ProviderConfig(BaseModel):
    """Provider credential configuration."""

    model_config = ConfigDict(extra="ignore")

    api_key: str = ""
    api_base: str | None = None
    extra_headers: dict[str, str] | None = None  # Custom headers for OpenAI-compatible gateways


class ProvidersConfig(BaseModel):
    """Configuration for provider credentials."""

    model_config = ConfigDict(extra="ignore")

    openai: ProviderConfig = Field(default_factory=ProviderConfig)


class WhatsAppConfig(BaseModel):
    """WhatsApp bridge channel configuration."""

    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    bridge_url: str = "ws://localhost:3001"
    bridge_token: str = ""
    request_timeout_ms: int = 20000
    startup_timeout_ms: int = 15000
    max_payload_bytes: int = 262144
    reconnect_initial_ms: int = 1000
    reconnect_max_ms: int = 30000
    reconnect_factor: float = 2.0
    reconnect_jitter: float = 0.25
    reconnect_max_attempts: int = 0  # 0 means unlimited retries

    @property
    def resolved_bridge_url(self) -> str:
        parsed = urlparse(self.bridge_url)
        host = parsed.hostname or "127.0.0.1"
        port = parsed.port or (443 if parsed.scheme == "wss" else 3001)
        scheme = "wss" if parsed.scheme == "wss" else "ws"
        return f"{scheme}://{host}:{port}"


class ChannelsConfig(BaseModel):
    """Configuration for chat channels."""

    whatsapp: WhatsAppConfig = Field(default_factory=WhatsAppConfig)


class LoggingConfig(BaseModel):
    """Log sink configuration."""

    model_config = ConfigDict(extra="ignore")

    level: str = "INFO"
    file_enabled: bool = True
    rotation: str = "10 MB"
    retention: str = "14 days"


class Config(BaseSettings):
    """Root configuration for chatwarden."""

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_prefix="CHATWARDEN_",
        env_nested_delimiter="__",
    )

    config_version: int = 1
    admins: list[str] = Field(default_factory=_default_admins)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    moderation: ModerationConfig = Field(default_factory=ModerationConfig)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    group_info: GroupInfoConfig = Field(default_factory=GroupInfoConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    channels: ChannelsConfig = Field(default_factory=ChannelsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    currency_rates: dict[str, float] = Field(default_factory=default_currency_rates)

    @field_validator("currency_rates")
    @classmethod
    def _normalize_rates(cls, value: dict[str, float]) -> dict[str, float]:
        rates = {code.strip().upper(): float(rate) for code, rate in value.items() if code.strip()}
        bad = sorted(code for code, rate in rates.items() if rate <= 0)
        if bad:
            raise ValueError("currency_rates must be positive: " + ", ".join(bad))
        return rates

    @property
    def openai_api_key(self) -> str:
        """Configured OpenAI key, falling back to ``OPENAI_API_KEY``."""
        key = self.providers.openai.api_key.strip()
        return key or os.environ.get("OPENAI_API_KEY", "").strip()
