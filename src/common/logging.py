"""
Logging configuration helpers.
The pricing stages themselves never log; boundary modules and the preview CLI do.
This keeps one format and one level source for every entrypoint in the repository.
"""

from __future__ import annotations

import logging

from src.common.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LOGGING_CONFIGURED = False


def resolve_log_level(level_name: str | None) -> int:
    if not level_name:
        return logging.INFO
    return int(getattr(logging, level_name.strip().upper(), logging.INFO))


def configure_logging(*, level_override: str | None = None) -> None:
    """Configure process-wide logging; `level_override` wins over `LOG_LEVEL`."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level_name = level_override or get_settings().LOG_LEVEL
    logging.basicConfig(level=resolve_log_level(level_name), format=LOG_FORMAT)
    _LOGGING_CONFIGURED = True
