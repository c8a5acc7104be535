from __future__ import annotations

"""
Configuration Domain Management.

Handles the dict-based analysis configuration: defaults, loading from a
JSON file in the user data directory, and conversion of a validated
dictionary into the immutable settings object consumed by the services.
"""

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from p5analysis.domain.constants import (
    CONFIG_FILE_NAME,
    CURRENT_CONFIG_VERSION,
    DEFAULT_LIBRARY_SCRIPT_PATTERN,
    DEFAULT_LISTING_EXCLUSIONS,
    DEFAULT_MAX_FILE_BYTES,
    DEFAULT_NAMESPACE,
    DEFAULT_SKETCH_FUNCTIONS,
)
from p5analysis.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default analysis configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,

        # Sketch detection
        "namespace": DEFAULT_NAMESPACE,
        "sketch_functions": list(DEFAULT_SKETCH_FUNCTIONS),
        "library_script_pattern": DEFAULT_LIBRARY_SCRIPT_PATTERN,

        # Resource limit
        "max_file_bytes": DEFAULT_MAX_FILE_BYTES,

        # Directory listing
        "listing_exclusions": list(DEFAULT_LISTING_EXCLUSIONS),

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration from disk and merge it over the defaults.

    Missing or corrupted files fall back to the defaults; unknown keys are
    kept so that the validator can report them.

    Args:
        path: JSON file to read. Defaults to ``CONFIG_FILE``.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config_path = path or CONFIG_FILE
    defaults = get_default_config()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Returning defaults.")
        return defaults

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return defaults

    merged = dict(defaults)
    merged.update(data)
    merged["version"] = CURRENT_CONFIG_VERSION
    return merged


# -----------------------------------------------------------------------------
# Runtime Settings
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalysisSettings:
    """
    Immutable settings consumed by the classifier and scanner services.

    Attributes:
        namespace: Identifier whose member accesses are extracted.
        sketch_functions: Top-level function names that mark a sketch script.
        library_script_pattern: Regex matched against ``<script src>`` values.
        max_file_bytes: Per-file size limit; 0 disables the check.
        listing_exclusions: Glob patterns hidden from directory listings.
    """
    namespace: str = DEFAULT_NAMESPACE
    sketch_functions: Tuple[str, ...] = tuple(DEFAULT_SKETCH_FUNCTIONS)
    library_script_pattern: str = DEFAULT_LIBRARY_SCRIPT_PATTERN
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    listing_exclusions: Tuple[str, ...] = tuple(DEFAULT_LISTING_EXCLUSIONS)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "AnalysisSettings":
        """Build settings from a validated configuration dictionary."""
        defaults = get_default_config()
        return cls(
            namespace=config.get("namespace", defaults["namespace"]),
            sketch_functions=tuple(config.get("sketch_functions", defaults["sketch_functions"])),
            library_script_pattern=config.get(
                "library_script_pattern", defaults["library_script_pattern"]
            ),
            max_file_bytes=int(config.get("max_file_bytes", defaults["max_file_bytes"])),
            listing_exclusions=tuple(
                config.get("listing_exclusions", defaults["listing_exclusions"])
            ),
        )

    @property
    def library_script_regex(self) -> re.Pattern:
        return re.compile(self.library_script_pattern)

    @property
    def sketch_fallback_regex(self) -> re.Pattern:
        """Textual stand-in for a parse: ``function`` keyword, whitespace, entry-point name."""
        names = "|".join(re.escape(name) for name in self.sketch_functions)
        return re.compile(rf"function\s+({names})\b")

