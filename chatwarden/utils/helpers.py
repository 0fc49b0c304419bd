"""Utility functions for chatwarden."""

import os
import sys
from pathlib import Path

from loguru import logger


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the chatwarden data directory.

    Respects CHATWARDEN_HOME environment variable; falls back to ~/.chatwarden.
    """
    home = os.environ.get("CHATWARDEN_HOME", "").strip()
    if home:
        return ensure_dir(Path(home))
    return ensure_dir(Path.home() / ".chatwarden")


def get_logs_path() -> Path:
    """Get the logs directory (~/.chatwarden/var/logs)."""
    return ensure_dir(get_data_path() / "var" / "logs")


def configure_logging(
    level: str = "INFO",
    *,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "14 days",
) -> None:
    """Reset loguru sinks: stderr at ``level`` plus an optional rotating file."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    if log_file is not None:
        ensure_dir(log_file.parent)
        logger.add(
            log_file,
            level=level.upper(),
            rotation=rotation,
            retention=retention,
            enqueue=True,
        )
