"""Utility functions for chatwarden."""

from chatwarden.utils.helpers import configure_logging, ensure_dir, get_data_path, get_logs_path

__all__ = ["configure_logging", "ensure_dir", "get_data_path", "get_logs_path"]
