from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the few filesystem primitives the analysis engine needs: locating
the user data directory, listing a directory and reading a text file as a
single atomic acquisition, optionally bounded by a size limit.
"""

import os
from typing import List

from p5analysis.domain.errors import FileTooLargeError

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "p5analysis"
UNIX_APP_DIR_NAME = ".p5analysis"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/p5analysis
    - Linux/Mac: ~/.p5analysis

    The directory is not created; readers treat its absence as "no data".

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    return os.path.abspath(path)


# -----------------------------------------------------------------------------
# READ API
# -----------------------------------------------------------------------------

def list_directory(dir_path: str) -> List[str]:
    """
    List the entry names of a directory in a deterministic (sorted) order.

    Args:
        dir_path: Directory to list.

    Returns:
        List[str]: Entry basenames, files and subdirectories alike.

    Raises:
        OSError: If the directory is missing or unreadable.
    """
    return sorted(os.listdir(dir_path))


def read_text(file_path: str, max_bytes: int = 0) -> str:
    """
    Read a UTF-8 text file in one piece.

    Args:
        file_path: File to read.
        max_bytes: Size limit in bytes; 0 disables the check.

    Returns:
        str: Decoded file content.

    Raises:
        FileTooLargeError: If the file exceeds ``max_bytes``.
        OSError: On any I/O failure, including a missing file.
    """
    if max_bytes > 0:
        size = os.path.getsize(file_path)
        if size > max_bytes:
            raise FileTooLargeError(file_path, size, max_bytes)

    # Undecodable bytes become U+FFFD
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()
