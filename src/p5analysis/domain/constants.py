from __future__ import annotations

"""
Domain Constants.

Provides centralized access to the defaults that drive sketch detection:
the runtime namespace identifier, the entry-point function names, the
library script pattern and the file extensions the scanner understands.
"""

from typing import List, Tuple

CURRENT_CONFIG_VERSION = "1.0.0"
CONFIG_FILE_NAME = "p5analysis.json"

# -----------------------------------------------------------------------------
# SKETCH DETECTION DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_NAMESPACE = "p5"
DEFAULT_SKETCH_FUNCTIONS: List[str] = ["setup", "draw"]

# Matched against the end of a <script src="..."> attribute value.
DEFAULT_LIBRARY_SCRIPT_PATTERN = r"\bp5(\.min)?\.js$"

# 0 disables the per-file size limit.
DEFAULT_MAX_FILE_BYTES = 0

MARKUP_EXTENSIONS: Tuple[str, ...] = (".htm", ".html")
SCRIPT_EXTENSIONS: Tuple[str, ...] = (".js",)

# Script a sketch page is assumed to load, claimed with the page when present.
DEFAULT_SKETCH_SCRIPT = "sketch.js"

# -----------------------------------------------------------------------------
# DIRECTORY LISTING DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_LISTING_EXCLUSIONS: List[str] = [
    "node_modules",
    "package.json",
    "package-lock.json",
]

README_FILE_NAME = "readme.md"
