from __future__ import annotations

"""
Project Discovery Service.

Groups the entries of a single directory into sketch projects and leftover
files. HTML pages that load the p5 library are claimed first; every script
they do not claim is then checked for sketch entry points. A sketch page
also claims the `sketch.js` next to it, when there is one. Each directory
entry ends up in exactly one place: a project or the residual list.
"""

import logging
import os
from typing import List, Optional, Set

from p5analysis.core.services.classifier import is_sketch_markup, is_sketch_script
from p5analysis.domain.config import AnalysisSettings
from p5analysis.domain.constants import DEFAULT_SKETCH_SCRIPT, MARKUP_EXTENSIONS
from p5analysis.domain.errors import FileTooLargeError
from p5analysis.domain.project_models import Project, ScanResult
from p5analysis.infra.fs import list_directory

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def scan_directory(dir_path: str, settings: Optional[AnalysisSettings] = None) -> ScanResult:
    """
    Find the sketch projects in a directory.

    Not recursive: subdirectories are reported as residual entries.

    Args:
        dir_path: Directory to scan.
        settings: Analysis settings; defaults apply when omitted.

    Returns:
        ScanResult: Markup-derived projects, then script-derived projects,
                    and the entries no project claimed, all in name order.

    Raises:
        OSError: If the directory is missing or unreadable.
    """
    settings = settings or AnalysisSettings()
    entries = list_directory(dir_path)
    projects: List[Project] = []

    # 1. Pages that load the library, with their default script if present
    companion = DEFAULT_SKETCH_SCRIPT if DEFAULT_SKETCH_SCRIPT in entries else None
    for name in entries:
        if not _is_markup_name(name):
            continue
        if _classify(is_sketch_markup, os.path.join(dir_path, name), settings):
            projects.append(Project(dir_path, markup_file=name, script_file=companion))

    # 2. Unclaimed scripts with sketch entry points
    for name in _unclaimed(entries, projects):
        if _classify(is_sketch_script, os.path.join(dir_path, name), settings):
            projects.append(Project(dir_path, script_file=name))

    # 3. Residual
    files = _unclaimed(entries, projects)

    logger.debug(f"Scanned {dir_path}: {len(projects)} project(s), {len(files)} other entries")
    return ScanResult(projects=projects, files=files)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _unclaimed(entries: List[str], projects: List[Project]) -> List[str]:
    claimed: Set[str] = set()
    for project in projects:
        claimed.update(project.files)
    return [name for name in entries if name not in claimed]


def _is_markup_name(name: str) -> bool:
    return os.path.splitext(name)[1].lower() in MARKUP_EXTENSIONS


def _classify(predicate, file_path: str, settings: AnalysisSettings) -> bool:
    """
    Run a classifier, treating unreadable entries as non-sketches.

    Files over the size limit and entries that vanish between listing and
    reading (including dangling symlinks) are logged and skipped. Any other
    I/O error propagates.
    """
    try:
        return predicate(file_path, settings)
    except FileTooLargeError as e:
        logger.warning(f"Skipping {file_path}: {e}")
        return False
    except FileNotFoundError:
        logger.warning(f"Skipping {file_path}: no such file")
        return False
