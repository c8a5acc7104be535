from __future__ import annotations

from .config import LoggingConfig
from .core import (
    _CONFIGURED_FLAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    get_logger,
    parse_level,
    shutdown_logging,
)
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "get_logger",
    "parse_level",
    "shutdown_logging",
    "_CONFIGURED_FLAG_ATTR",
    "_HANDLER_TAG_ATTR",
    "_QUEUE_LISTENER_ATTR",
]
