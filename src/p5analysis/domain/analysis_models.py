from __future__ import annotations

"""
Analysis Domain Data Models.

Defines the source document, parse outcome and scope structures shared by
the parser and the syntax tree walkers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from p5analysis.domain.errors import JavascriptSyntaxError
from p5analysis.domain.syntax_tree import Program

# -----------------------------------------------------------------------------
# SOURCE AND PARSE OUTCOME
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SourceDocument:
    """
    Text of a single script or markup file.

    Attributes:
        file_name: File identifier (usually the path).
        text: Raw UTF-8 decoded content.
    """
    file_name: str
    text: str


@dataclass(frozen=True)
class ParseResult:
    """
    Either a parsed program or the syntax error that prevented parsing.

    Exactly one of ``program`` and ``error`` is set.
    """
    document: SourceDocument
    program: Optional[Program] = None
    error: Optional[JavascriptSyntaxError] = None

    @property
    def ok(self) -> bool:
        return self.program is not None


# -----------------------------------------------------------------------------
# SCOPES
# -----------------------------------------------------------------------------

class BindingKind(str, Enum):
    """How a name came to be bound in a function scope."""
    FUNCTION = "function"
    PARAMETER = "parameter"
    VARIABLE = "variable"


@dataclass
class Scope:
    """
    Names bound by one function body.

    Attributes:
        bindings: Bound name to binding kind.
        parent: Index of the enclosing scope in the walker's scope stack,
                or None for a top-level function.
    """
    bindings: Dict[str, BindingKind] = field(default_factory=dict)
    parent: Optional[int] = None

    def bind(self, name: str, kind: BindingKind) -> None:
        # First binding wins: a later `var x` does not demote parameter `x`.
        self.bindings.setdefault(name, kind)

    def __contains__(self, name: object) -> bool:
        return name in self.bindings
