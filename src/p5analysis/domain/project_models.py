from __future__ import annotations

"""
Project Domain Data Models.

Defines the sketch project grouping produced by directory scans and the
listing model handed to the directory-listing renderer.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

# -----------------------------------------------------------------------------
# PROJECT MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Project:
    """
    A markup file and/or a script file that together form one sketch.

    Attributes:
        dir_path: Directory containing the project files.
        markup_file: Basename of the sketch HTML file, if any.
        script_file: Basename of the sketch script, if any.
        title: Explicit title overriding the resolved one.
    """
    dir_path: str
    markup_file: Optional[str] = None
    script_file: Optional[str] = None
    title: Optional[str] = None

    @property
    def files(self) -> List[str]:
        """Basenames of the project files, markup first."""
        files: List[str] = []
        if self.markup_file:
            files.append(os.path.basename(self.markup_file))
        if self.script_file:
            files.append(os.path.basename(self.script_file))
        return files

    @property
    def root_file(self) -> str:
        return self.markup_file or self.script_file or os.path.basename(self.dir_path)


@dataclass
class ScanResult:
    """
    Outcome of a directory scan.

    Attributes:
        projects: Markup-derived projects followed by script-derived ones.
        files: Directory entries not claimed by any project.
    """
    projects: List[Project] = field(default_factory=list)
    files: List[str] = field(default_factory=list)


@dataclass
class DirectoryListing:
    """
    Data behind a rendered directory index page.

    Attributes:
        title: Basename of the listed directory.
        projects: Sketch projects found in the directory.
        directories: Visible subdirectory names, case-insensitively sorted.
        files: Visible residual file names, case-insensitively sorted.
        readme: Name of the README file, if the directory has one.
    """
    title: str
    projects: List[Project] = field(default_factory=list)
    directories: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    readme: Optional[str] = None
