from __future__ import annotations

"""
Syntax Error Diagnostics.

Turns a ``JavascriptSyntaxError`` into a small replacement script. When the
browser requests a script that does not parse, it receives this snippet
instead, which reports the error in the console and on the page.
"""

import json
import logging
import os
from typing import Optional

from p5analysis.core.analysis.parser import parse_file
from p5analysis.domain.errors import JavascriptSyntaxError

logger = logging.getLogger(__name__)

_REPORT_TEMPLATE = """\
(function () {{
  var fileName = {file_name};
  var message = {message};
  console.error('Syntax error in ' + fileName + ': ' + message);
  function show() {{
    var el = document.createElement('pre');
    el.className = 'p5-syntax-error';
    el.style.color = '#b00020';
    el.textContent = 'Syntax error in ' + fileName + '\\n' + message;
    document.body.appendChild(el);
  }}
  if (document.body) {{
    show();
  }} else {{
    document.addEventListener('DOMContentLoaded', show);
  }}
}})();
"""


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_syntax_error_report(error: JavascriptSyntaxError) -> str:
    """
    Render the browser-side report for a syntax error.

    Both values are embedded as JSON string literals, which are valid
    JavaScript string literals, so quotes and newlines in the message cannot
    break out of the snippet.

    Args:
        error: The parse failure.

    Returns:
        str: JavaScript source text.
    """
    return _REPORT_TEMPLATE.format(
        file_name=json.dumps(os.path.basename(error.file_name)),
        message=json.dumps(error.message),
    )


def check_script(file_path: str, max_bytes: int = 0) -> Optional[str]:
    """
    Parse a script and render a report if it is malformed.

    Args:
        file_path: Script to check.
        max_bytes: Optional size limit; 0 disables it.

    Returns:
        Optional[str]: The rendered report, or None if the script parses.
    """
    try:
        parse_file(file_path, max_bytes)
    except JavascriptSyntaxError as e:
        logger.info(f"Syntax error in {file_path}: {e.message}")
        return render_syntax_error_report(e)
    return None
