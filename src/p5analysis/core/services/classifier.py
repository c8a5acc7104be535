from __future__ import annotations

"""
Sketch Classification Service.

Decides whether a script or an HTML page is a p5.js sketch. Scripts are
recognised by their top-level entry-point functions (``setup``/``draw``);
pages by a ``<script src>`` that loads the p5 library.

This is the single place where a failed parse becomes a boolean: a script
that does not parse is judged by a textual search for the entry-point
declarations instead.
"""

import logging
import os
from html.parser import HTMLParser
from typing import List, Optional, Set

from p5analysis.core.analysis.free_variables import top_level_functions
from p5analysis.core.analysis.parser import parse_result
from p5analysis.domain.config import AnalysisSettings
from p5analysis.domain.constants import MARKUP_EXTENSIONS, SCRIPT_EXTENSIONS
from p5analysis.domain.syntax_tree import Program
from p5analysis.infra.fs import read_text

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API (PATH CLASSIFICATION)
# -----------------------------------------------------------------------------

def is_sketch_script(path: str, settings: Optional[AnalysisSettings] = None) -> bool:
    """
    Check whether a file is a sketch script.

    Args:
        path: File to classify.
        settings: Analysis settings; defaults apply when omitted.

    Returns:
        bool: True if the file is a ``.js`` file declaring a sketch entry point.

    Raises:
        FileTooLargeError: If the file exceeds the configured size limit.
        OSError: If the file cannot be read.
    """
    settings = settings or AnalysisSettings()
    if os.path.isdir(path) or not _has_extension(path, SCRIPT_EXTENSIONS):
        return False

    text = read_text(path, settings.max_file_bytes)
    return classify_script_source(text, path, settings)


def is_sketch_markup(path: str, settings: Optional[AnalysisSettings] = None) -> bool:
    """
    Check whether a file is an HTML page that loads the p5 library.

    Args:
        path: File to classify.
        settings: Analysis settings; defaults apply when omitted.

    Returns:
        bool: True if the file is ``.htm``/``.html`` and includes the library.
    """
    settings = settings or AnalysisSettings()
    if os.path.isdir(path) or not _has_extension(path, MARKUP_EXTENSIONS):
        return False

    text = read_text(path, settings.max_file_bytes)
    return classify_markup_source(text, settings)


# -----------------------------------------------------------------------------
# PUBLIC API (SOURCE CLASSIFICATION)
# -----------------------------------------------------------------------------

def classify_script_source(
        text: str,
        file_name: str = "<anonymous>",
        settings: Optional[AnalysisSettings] = None,
) -> bool:
    """
    Classify script text, falling back to a regex when it does not parse.

    Args:
        text: Script source.
        file_name: Identifier used in log messages.
        settings: Analysis settings; defaults apply when omitted.

    Returns:
        bool: True if a top-level function is one of the sketch entry points.
    """
    settings = settings or AnalysisSettings()
    result = parse_result(text, file_name)

    if result.ok:
        names = top_level_function_names(result.program)
        return any(name in names for name in settings.sketch_functions)

    logger.debug(f"Falling back to textual sketch detection for {file_name}: {result.error.message}")
    return settings.sketch_fallback_regex.search(result.error.source_text) is not None


def classify_markup_source(text: str, settings: Optional[AnalysisSettings] = None) -> bool:
    """True if some ``<script src>`` in the page matches the library pattern."""
    settings = settings or AnalysisSettings()
    pattern = settings.library_script_regex
    return any(pattern.search(src) for src in script_sources(text))


def script_sources(text: str) -> List[str]:
    """
    Collect the ``src`` attribute of every ``<script>`` element, in document order.

    Args:
        text: HTML source.

    Returns:
        List[str]: Attribute values; scripts without ``src`` are skipped.
    """
    collector = _ScriptSourceCollector()
    collector.feed(text)
    collector.close()
    return collector.sources


def top_level_function_names(program: Program) -> Set[str]:
    return {fn.id.name for fn in top_level_functions(program) if fn.id is not None}


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

class _ScriptSourceCollector(HTMLParser):
    """Accumulates ``<script src>`` values while the page is fed through it."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.sources: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag != "script":
            return
        for name, value in attrs:
            if name == "src" and value:
                self.sources.append(value)


def _has_extension(path: str, extensions) -> bool:
    return os.path.splitext(path)[1].lower() in extensions
