"""Configuration module for chatwarden."""

from chatwarden.config.loader import get_config_path, load_config
from chatwarden.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
