from __future__ import annotations

"""
Unit tests for the Directory Listing Service.

Verifies:
1. Filtering of hidden and excluded entries.
2. Case-insensitive ordering and the readme/directory split.
3. Project title resolution precedence.
"""

from pathlib import Path

from p5analysis.core.services.listing import build_directory_listing, resolve_project_title
from p5analysis.domain.config import AnalysisSettings
from p5analysis.domain.project_models import Project

# -----------------------------------------------------------------------------
# DIRECTORY LISTING
# -----------------------------------------------------------------------------

def test_listing_splits_entries(sketch_dir: Path) -> None:
    listing = build_directory_listing(str(sketch_dir))

    assert listing.title == "sketches"
    assert [p.root_file for p in listing.projects] == ["index.html", "standalone.js"]
    assert listing.directories == ["assets"]
    assert listing.files == ["about.html", "helpers.js"]
    assert listing.readme == "README.md"


def test_listing_hides_dotfiles_and_exclusions(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    (tmp_path / "node_modules").mkdir()
    (tmp_path / ".eslintrc").write_text("{}", encoding="utf-8")
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    (tmp_path / "notes.bak").write_text("", encoding="utf-8")
    (tmp_path / "Zebra.txt").write_text("", encoding="utf-8")
    (tmp_path / "apple.txt").write_text("", encoding="utf-8")

    settings = AnalysisSettings(listing_exclusions=("node_modules", "package.json", "*.bak"))
    listing = build_directory_listing(str(tmp_path), settings)

    assert listing.directories == []
    assert listing.files == ["apple.txt", "Zebra.txt"]
    assert listing.readme is None


def test_listing_trailing_separator_title(sketch_dir: Path) -> None:
    listing = build_directory_listing(str(sketch_dir) + "/")
    assert listing.title == "sketches"


# -----------------------------------------------------------------------------
# TITLE RESOLUTION
# -----------------------------------------------------------------------------

def test_explicit_title_wins(sketch_dir: Path) -> None:
    project = Project(str(sketch_dir), markup_file="index.html", title="Explicit")
    assert resolve_project_title(project) == "Explicit"


def test_title_from_markup(sketch_dir: Path) -> None:
    project = Project(str(sketch_dir), markup_file="index.html")
    assert resolve_project_title(project) == "Bouncing Ball"


def test_multiline_title_is_trimmed(tmp_path: Path) -> None:
    (tmp_path / "page.html").write_text("<title>\n  My\n  Sketch\n</title>", encoding="utf-8")

    project = Project(str(tmp_path), markup_file="page.html")
    assert resolve_project_title(project) == "My\n  Sketch"


def test_title_falls_back_to_file_name(tmp_path: Path) -> None:
    (tmp_path / "demo.htm").write_text("<html></html>", encoding="utf-8")

    assert resolve_project_title(Project(str(tmp_path), markup_file="demo.htm")) == "demo"
    assert resolve_project_title(Project(str(tmp_path), script_file="orbit.js")) == "orbit"


def test_missing_markup_file_means_no_title(tmp_path: Path) -> None:
    project = Project(str(tmp_path), markup_file="gone.html")
    assert resolve_project_title(project) == "gone"


def test_title_of_empty_project_is_directory_name(tmp_path: Path) -> None:
    folder = tmp_path / "empty_sketch"
    folder.mkdir()

    assert resolve_project_title(Project(str(folder))) == "empty_sketch"
