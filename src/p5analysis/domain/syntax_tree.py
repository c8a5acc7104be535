from __future__ import annotations

"""
JavaScript Syntax Tree Data Models.

Immutable, ESTree-shaped node kinds produced by the parser. The set of kinds
is closed: every grammar production the analyzers understand has its own
dataclass, and everything else is carried by one of the ``Unsupported*``
placeholders, which keep the ESTree name of the production so that walkers
can report what they skipped.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

# -----------------------------------------------------------------------------
# LEAF NODES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Identifier:
    """A name reference or binding."""
    name: str


@dataclass(frozen=True)
class PrivateIdentifier:
    """A ``#name`` class member key."""
    name: str


@dataclass(frozen=True)
class Literal:
    """Number, string, boolean, null or regular expression literal."""
    raw: str


@dataclass(frozen=True)
class Super:
    """The ``super`` keyword in callee or member-object position."""


# -----------------------------------------------------------------------------
# EXPRESSIONS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AssignmentExpression:
    operator: str
    left: Union["Pattern", "MemberExpression"]
    right: "Expression"


@dataclass(frozen=True)
class BinaryExpression:
    operator: str
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class SpreadElement:
    argument: "Expression"


@dataclass(frozen=True)
class CallExpression:
    callee: Union["Expression", Super]
    arguments: Tuple[Union["Expression", SpreadElement], ...]


@dataclass(frozen=True)
class MemberExpression:
    """
    Property access.

    Attributes:
        object: The accessed value, or ``Super``.
        property: ``Identifier``/``PrivateIdentifier`` for dotted access,
                  any expression when ``computed`` is set.
        computed: True for ``a[b]`` access.
    """
    object: Union["Expression", Super]
    property: Union["Expression", PrivateIdentifier]
    computed: bool = False


@dataclass(frozen=True)
class UnsupportedExpression:
    """
    Placeholder for expression productions the analyzers do not traverse.

    Attributes:
        kind: ESTree name of the production (e.g. ``ArrowFunctionExpression``).
        line: 1-based source line of the construct.
    """
    kind: str
    line: int = 0


# -----------------------------------------------------------------------------
# BINDING PATTERNS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AssignmentPattern:
    """A binding with a default value: ``left = right``."""
    left: "Pattern"
    right: "Expression"


@dataclass(frozen=True)
class RestElement:
    argument: "Pattern"


@dataclass(frozen=True)
class PatternProperty:
    """One ``key: value`` entry of an object pattern."""
    key: str
    value: "Pattern"


@dataclass(frozen=True)
class ObjectPattern:
    properties: Tuple[Union[PatternProperty, RestElement], ...]


@dataclass(frozen=True)
class ArrayPattern:
    elements: Tuple["Pattern", ...]


@dataclass(frozen=True)
class UnsupportedPattern:
    kind: str
    line: int = 0


# -----------------------------------------------------------------------------
# STATEMENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BlockStatement:
    body: Tuple["Statement", ...]


@dataclass(frozen=True)
class FunctionDeclaration:
    id: Optional[Identifier]
    params: Tuple["Pattern", ...]
    body: BlockStatement
    is_async: bool = False
    is_generator: bool = False


@dataclass(frozen=True)
class VariableDeclarator:
    id: "Pattern"
    init: Optional["Expression"] = None


@dataclass(frozen=True)
class VariableDeclaration:
    """``var``, ``let`` or ``const`` declaration (``kind``)."""
    kind: str
    declarations: Tuple[VariableDeclarator, ...]


@dataclass(frozen=True)
class ExpressionStatement:
    expression: "Expression"


@dataclass(frozen=True)
class DoWhileStatement:
    body: "Statement"
    test: "Expression"


@dataclass(frozen=True)
class WhileStatement:
    test: "Expression"
    body: "Statement"


@dataclass(frozen=True)
class ForStatement:
    init: Optional[Union[VariableDeclaration, "Expression"]]
    test: Optional["Expression"]
    update: Optional["Expression"]
    body: "Statement"


@dataclass(frozen=True)
class ForInStatement:
    left: Union[VariableDeclaration, "Pattern", MemberExpression]
    right: "Expression"
    body: "Statement"


@dataclass(frozen=True)
class ForOfStatement:
    left: Union[VariableDeclaration, "Pattern", MemberExpression]
    right: "Expression"
    body: "Statement"
    is_await: bool = False


@dataclass(frozen=True)
class IfStatement:
    test: "Expression"
    consequent: "Statement"
    alternate: Optional["Statement"] = None


@dataclass(frozen=True)
class LabeledStatement:
    label: Identifier
    body: "Statement"


@dataclass(frozen=True)
class ReturnStatement:
    argument: Optional["Expression"] = None


@dataclass(frozen=True)
class BreakStatement:
    label: Optional[Identifier] = None


@dataclass(frozen=True)
class ContinueStatement:
    label: Optional[Identifier] = None


@dataclass(frozen=True)
class DebuggerStatement:
    pass


@dataclass(frozen=True)
class EmptyStatement:
    pass


@dataclass(frozen=True)
class UnsupportedStatement:
    """
    Placeholder for statement productions the analyzers do not traverse.

    Attributes:
        kind: ESTree name of the production (e.g. ``SwitchStatement``).
        line: 1-based source line of the construct.
        nested: Statement lists of try/catch/finally blocks, switch cases
                and with bodies. Only searched for declarations.
    """
    kind: str
    line: int = 0
    nested: Tuple["Statement", ...] = ()


@dataclass(frozen=True)
class Program:
    body: Tuple["Statement", ...]


# -----------------------------------------------------------------------------
# SUM TYPES
# -----------------------------------------------------------------------------

Expression = Union[
    AssignmentExpression,
    BinaryExpression,
    CallExpression,
    MemberExpression,
    Identifier,
    Literal,
    UnsupportedExpression,
]

Pattern = Union[
    Identifier,
    ObjectPattern,
    ArrayPattern,
    RestElement,
    AssignmentPattern,
    MemberExpression,
    UnsupportedPattern,
]

Statement = Union[
    FunctionDeclaration,
    BlockStatement,
    DoWhileStatement,
    ExpressionStatement,
    ForStatement,
    ForInStatement,
    ForOfStatement,
    IfStatement,
    LabeledStatement,
    ReturnStatement,
    VariableDeclaration,
    WhileStatement,
    BreakStatement,
    ContinueStatement,
    DebuggerStatement,
    EmptyStatement,
    UnsupportedStatement,
]


def node_kind(node: object) -> str:
    """Return the ESTree kind name of a node (placeholders report the original kind)."""
    if isinstance(node, (UnsupportedStatement, UnsupportedExpression, UnsupportedPattern)):
        return node.kind
    return type(node).__name__
