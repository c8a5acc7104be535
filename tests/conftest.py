from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration dictionaries and sketch directories.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Sample Sources
# -----------------------------------------------------------------------------
SKETCH_JS = """\
function setup() {
  createCanvas(400, 400);
}

function draw() {
  background(220);
  ellipse(mouseX, mouseY, 20, 20);
}
"""

LIBRARY_JS = """\
function helper(a, b) {
  return a + b;
}
"""

SKETCH_HTML = """\
<!DOCTYPE html>
<html>
  <head>
    <title>Bouncing Ball</title>
    <script src="lib/p5.min.js"></script>
    <script src="sketch.js"></script>
  </head>
  <body></body>
</html>
"""

PLAIN_HTML = """\
<html>
  <head><script src="jquery.js"></script></head>
  <body><p>Not a sketch</p></body>
</html>
"""


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'p5analysis.domain.config'.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return {
        "version": "1.0.0",

        # Sketch detection
        "namespace": "p5",
        "sketch_functions": ["setup", "draw"],
        "library_script_pattern": r"\bp5(\.min)?\.js$",

        # Resource limit
        "max_file_bytes": 0,

        # Directory listing
        "listing_exclusions": ["node_modules", "package.json", "package-lock.json"],

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


@pytest.fixture
def sketch_dir(tmp_path: Path) -> Path:
    """
    Create a directory mixing page-based and script-only sketches.

    Structure:
    /sketches
      index.html        (loads p5.min.js and sketch.js)
      sketch.js         (claimed by index.html)
      standalone.js     (script-only sketch)
      helpers.js        (not a sketch)
      about.html        (does not load p5)
      README.md
      assets/
    """
    root = tmp_path / "sketches"
    root.mkdir()

    (root / "index.html").write_text(SKETCH_HTML, encoding="utf-8")
    (root / "sketch.js").write_text(SKETCH_JS, encoding="utf-8")
    (root / "standalone.js").write_text("function draw() { rect(0, 0, 10, 10); }\n", encoding="utf-8")
    (root / "helpers.js").write_text(LIBRARY_JS, encoding="utf-8")
    (root / "about.html").write_text(PLAIN_HTML, encoding="utf-8")
    (root / "README.md").write_text("# Sketches\n", encoding="utf-8")
    (root / "assets").mkdir()

    return root
