from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates cross-platform data directory resolution, deterministic directory
listing and size-limited text reads against a real temporary filesystem.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from p5analysis.domain.errors import FileTooLargeError
from p5analysis.infra.fs import get_user_data_dir, list_directory, read_text

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_windows() -> None:
    """TC-01: Verify resolution of %LOCALAPPDATA% on Windows systems."""
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            path = get_user_data_dir()
            assert "p5analysis" in path
            assert path.lower().startswith(os.path.abspath(mock_appdata).lower())


def test_get_user_data_dir_unix() -> None:
    """TC-01: Verify resolution of ~/.p5analysis on Unix-like systems."""
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            path = get_user_data_dir()
            normalized_path = path.replace("\\", "/")
            assert normalized_path.endswith("/home/testuser/.p5analysis")


# -----------------------------------------------------------------------------
# READ OPERATIONS TESTS
# -----------------------------------------------------------------------------

def test_list_directory_sorted(tmp_path: Path) -> None:
    """TC-02: Verify entries come back sorted, directories included."""
    (tmp_path / "b.js").write_text("")
    (tmp_path / "a.html").write_text("")
    (tmp_path / "lib").mkdir()

    assert list_directory(str(tmp_path)) == ["a.html", "b.js", "lib"]


def test_list_directory_missing(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        list_directory(str(tmp_path / "missing"))


def test_read_text_within_limit(tmp_path: Path) -> None:
    """TC-03: Verify reads succeed at or below the byte limit."""
    target = tmp_path / "sketch.js"
    target.write_text("function setup() {}", encoding="utf-8")

    assert read_text(str(target)) == "function setup() {}"
    assert read_text(str(target), max_bytes=19) == "function setup() {}"


def test_read_text_over_limit(tmp_path: Path) -> None:
    target = tmp_path / "big.js"
    target.write_text("x" * 100, encoding="utf-8")

    with pytest.raises(FileTooLargeError):
        read_text(str(target), max_bytes=10)


def test_read_text_replaces_undecodable_bytes(tmp_path: Path) -> None:
    """TC-04: Verify invalid UTF-8 does not abort the read."""
    target = tmp_path / "latin.js"
    target.write_bytes(b"var s = '\xe9';")

    assert read_text(str(target)) == "var s = '\ufffd';"


def test_read_text_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_text(str(tmp_path / "missing.js"))
