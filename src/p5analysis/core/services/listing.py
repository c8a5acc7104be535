from __future__ import annotations

"""
Directory Listing Service.

Builds the data behind a directory index page: the sketch projects of the
directory plus its visible subdirectories and files, and resolves the
display title of a project.
"""

import fnmatch
import logging
import os
import re
from typing import Optional

from p5analysis.core.services.scanner import scan_directory
from p5analysis.domain.config import AnalysisSettings
from p5analysis.domain.constants import README_FILE_NAME
from p5analysis.domain.project_models import DirectoryListing, Project
from p5analysis.infra.fs import read_text

logger = logging.getLogger(__name__)

_TITLE_RX = re.compile(r"<title>(.+?)</title>", re.DOTALL)
_ROOT_FILE_SUFFIX_RX = re.compile(r"\.(html?|js)$")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_directory_listing(dir_path: str, settings: Optional[AnalysisSettings] = None) -> DirectoryListing:
    """
    Assemble the listing model for a directory.

    Residual entries that are hidden (leading dot) or match one of the
    configured exclusion globs are dropped. The remaining names are sorted
    case-insensitively; a ``README.md`` (any case) is set aside as the
    readme, and subdirectories are separated from files.

    Args:
        dir_path: Directory to list.
        settings: Analysis settings; defaults apply when omitted.

    Returns:
        DirectoryListing: Listing data, titled with the directory basename.
    """
    settings = settings or AnalysisSettings()
    scan = scan_directory(dir_path, settings)

    visible = [
        name for name in scan.files
        if not name.startswith(".") and not _is_excluded(name, settings.listing_exclusions)
    ]
    visible.sort(key=str.lower)

    readme = next((name for name in visible if name.lower() == README_FILE_NAME), None)
    directories = [name for name in visible if os.path.isdir(os.path.join(dir_path, name))]
    files = [name for name in visible if name not in directories and name != readme]

    return DirectoryListing(
        title=os.path.basename(os.path.normpath(dir_path)),
        projects=scan.projects,
        directories=directories,
        files=files,
        readme=readme,
    )


def resolve_project_title(project: Project) -> str:
    """
    Determine the display name of a project.

    Order of precedence: the explicit title, the ``<title>`` element of the
    project's HTML page, then the root file name without its extension.

    Args:
        project: Project to name.

    Returns:
        str: Display title.
    """
    if project.title:
        return project.title

    if project.markup_file:
        title = _read_markup_title(os.path.join(project.dir_path, project.markup_file))
        if title:
            return title

    return _ROOT_FILE_SUFFIX_RX.sub("", project.root_file)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _is_excluded(name: str, patterns) -> bool:
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def _read_markup_title(markup_path: str) -> Optional[str]:
    try:
        text = read_text(markup_path)
    except FileNotFoundError:
        logger.debug(f"Title lookup skipped, {markup_path} does not exist")
        return None

    m = _TITLE_RX.search(text)
    if m:
        return m.group(1).strip() or None
    return None
