from __future__ import annotations

"""
Analysis Error Models.

Exception hierarchy raised by the analysis engine. Parse failures keep the
verbatim source text so that the textual sketch heuristic can run without
reading the file a second time.
"""

# -----------------------------------------------------------------------------
# EXCEPTION HIERARCHY
# -----------------------------------------------------------------------------

class P5AnalysisError(Exception):
    """Base class for all errors raised by the analysis engine."""


class JavascriptSyntaxError(P5AnalysisError):
    """
    Raised when a script cannot be parsed.

    Attributes:
        message: Parser diagnostic, e.g. ``Line 3: Unexpected token )``.
        file_name: Identifier (usually the path) of the parsed source.
        source_text: The unmodified input text.
    """

    def __init__(self, message: str, file_name: str, source_text: str) -> None:
        super().__init__(message)
        self.message = message
        self.file_name = file_name
        self.source_text = source_text

    def __str__(self) -> str:
        return f"{self.file_name}: {self.message}"


class FileTooLargeError(P5AnalysisError):
    """
    Raised when a file exceeds the configured analysis size limit.

    Attributes:
        path: Path of the rejected file.
        size: Actual size in bytes.
        limit: Configured limit in bytes.
    """

    def __init__(self, path: str, size: int, limit: int) -> None:
        super().__init__(f"{path} is {size} bytes, over the {limit} byte analysis limit")
        self.path = path
        self.size = size
        self.limit = limit
