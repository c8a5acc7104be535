from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (JSON file, CLI flags)
and the analysis services. Coerces types, rejects values the engine cannot
use (invalid identifiers, regexes that do not compile, negative limits)
and fills gaps with the domain defaults.
"""

import logging
import os
import re
from typing import Any, Dict, List, Tuple

from p5analysis.domain.config import get_default_config

logger = logging.getLogger(__name__)

# JavaScript identifier, ASCII subset
_IDENTIFIER_RX = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize an analysis configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises on invalid values instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.

    Raises:
        TypeError: In strict mode, on a value of the wrong type.
        ValueError: In strict mode, on a value of the right type that the
                    engine cannot use.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    unknown = sorted(k for k in config if k not in defaults)
    for key in unknown:
        warnings.append(f"Unknown field '{key}' ignored.")
        merged.pop(key)

    # 2. Field Processing & Normalization
    merged["version"] = _as_str(merged.get("version"), defaults["version"], "version", warnings, strict)

    merged["namespace"] = _as_identifier(
        merged.get("namespace"), defaults["namespace"], "namespace", warnings, strict
    )

    functions = _as_list_str(
        merged.get("sketch_functions"), defaults["sketch_functions"], "sketch_functions", warnings, strict
    )
    merged["sketch_functions"] = _filter_identifiers(
        functions, defaults["sketch_functions"], "sketch_functions", warnings, strict
    )

    merged["library_script_pattern"] = _as_regex(
        merged.get("library_script_pattern"),
        defaults["library_script_pattern"],
        "library_script_pattern",
        warnings,
        strict,
    )

    merged["max_file_bytes"] = _as_non_negative_int(
        merged.get("max_file_bytes"), defaults["max_file_bytes"], "max_file_bytes", warnings, strict
    )

    merged["listing_exclusions"] = _as_list_str(
        merged.get("listing_exclusions"),
        defaults["listing_exclusions"],
        "listing_exclusions",
        warnings,
        strict,
        allow_empty=True,
    )

    merged["log_level"] = _as_log_level(merged.get("log_level"), defaults["log_level"], warnings, strict)
    merged["log_file"] = _as_log_path(merged.get("log_file"), defaults["log_file"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(
        value: Any,
        fallback: List[str],
        field: str,
        warnings: List[str],
        strict: bool,
        allow_empty: bool = False,
) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items if items or allow_empty else list(fallback)

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out or allow_empty else list(fallback)

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_non_negative_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Accept ints (and numeric strings outside strict mode) that are >= 0."""
    if value is None:
        return fallback

    number = value
    # bool is an int subclass but never a byte count
    if isinstance(value, bool) or not isinstance(value, int):
        if strict or not isinstance(value, str) or not value.strip().isdigit():
            msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
            if strict:
                raise TypeError(msg)
            warnings.append(f"{msg} Using fallback.")
            return fallback
        number = int(value.strip())
        warnings.append(f"Field '{field}' converted from '{value}' to {number}.")

    if number < 0:
        msg = f"Invalid field '{field}': must be >= 0, received {number}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback
    return number


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _as_identifier(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    name = _as_str(value, fallback, field, warnings, strict)
    if _IDENTIFIER_RX.match(name):
        return name

    msg = f"Invalid field '{field}': '{name}' is not a JavaScript identifier."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _filter_identifiers(
        names: List[str],
        fallback: List[str],
        field: str,
        warnings: List[str],
        strict: bool,
) -> List[str]:
    """Drop entries that are not identifiers; duplicates are removed, order kept."""
    out: List[str] = []
    for name in names:
        if not _IDENTIFIER_RX.match(name):
            msg = f"Invalid item in '{field}': '{name}' is not a JavaScript identifier."
            if strict:
                raise ValueError(msg)
            warnings.append(f"{msg} Item discarded.")
            continue
        if name not in out:
            out.append(name)
    return out if out else list(fallback)


def _as_regex(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Keep the pattern only if it compiles."""
    pattern = _as_str(value, fallback, field, warnings, strict)
    try:
        re.compile(pattern)
    except re.error as e:
        msg = f"Invalid field '{field}': '{pattern}' is not a valid regex ({e})."
        if strict:
            raise ValueError(msg) from e
        warnings.append(f"{msg} Using fallback.")
        return fallback
    return pattern


def _as_log_level(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    level = _as_str(value, fallback, "log_level", warnings, strict).upper()
    if level in _LOG_LEVELS:
        return level

    msg = f"Invalid field 'log_level': '{level}' is not one of {', '.join(_LOG_LEVELS)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_log_path(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    """Empty string disables file logging; ``~`` is expanded."""
    path = _as_str(value, fallback, "log_file", warnings, strict)
    return os.path.expanduser(path) if path else ""
