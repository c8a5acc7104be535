from __future__ import annotations

"""
Logging Configuration Models.

Defines the settings used to initialize the logging subsystem of the CLI
and the mapping from textual severity names to ``logging`` constants.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging setup of one CLI run.

    Console records are short (level, logger, message). The optional log
    file keeps timestamped records and rolls over at ``max_bytes``, keeping
    ``backup_count`` older segments next to it.

    Attributes:
        level: Minimum severity name (``DEBUG`` ... ``CRITICAL``).
        console: Write records to stderr.
        log_file: Rotating diagnostic log path; None disables it.
        max_bytes: Rollover size of the log file.
        backup_count: Rolled-over segments to keep.
        console_fmt: Format of stderr records.
        file_fmt: Format of log file records.
        datefmt: Timestamp format of log file records.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = "%(levelname)s | %(name)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_config(cls, config: Dict[str, Any], *, console: bool = True) -> "LoggingConfig":
        """
        Build the logging setup from a validated analysis configuration.

        Reads ``log_level`` and ``log_file``; an empty ``log_file`` means
        console only.
        """
        return cls(
            level=config.get("log_level") or "INFO",
            console=console,
            log_file=config.get("log_file") or None,
        )
