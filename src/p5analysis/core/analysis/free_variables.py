from __future__ import annotations

"""
Free-Variable Analysis.

Finds the identifiers that top-level function declarations reference but do
not bind. Each function body gets a scope holding its own name, its
parameters and every function/variable declared anywhere in the body,
collected up front (hoisting-style) regardless of textual position or block
nesting. Nested function declarations push a child scope onto a stack that
lives for a single call.

Grammar coverage is partial. Statement and expression kinds without a rule
below are logged and not descended into, so free variables inside switch,
try or arrow functions are not reported.
"""

import logging
from typing import Iterable, List, Optional, Set

from p5analysis.domain.analysis_models import BindingKind, Scope
from p5analysis.domain.syntax_tree import (
    ArrayPattern,
    AssignmentExpression,
    AssignmentPattern,
    BinaryExpression,
    BlockStatement,
    BreakStatement,
    CallExpression,
    ContinueStatement,
    DebuggerStatement,
    DoWhileStatement,
    EmptyStatement,
    ExpressionStatement,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    LabeledStatement,
    Literal,
    MemberExpression,
    ObjectPattern,
    PatternProperty,
    Program,
    RestElement,
    ReturnStatement,
    SpreadElement,
    Super,
    UnsupportedStatement,
    VariableDeclaration,
    WhileStatement,
    node_kind,
)

logger = logging.getLogger(__name__)

_NO_OP_STATEMENTS = (DebuggerStatement, EmptyStatement, BreakStatement, ContinueStatement)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def find_free_variables(program: Program) -> Set[str]:
    """
    Collect the names referenced but not bound by the program's top-level functions.

    Top-level function names are bound everywhere (global functions see each
    other), so calls between them and recursion are never reported.

    Args:
        program: Parsed script.

    Returns:
        Set[str]: Free variable names, aggregated over all top-level functions.
    """
    functions = top_level_functions(program)
    global_functions = {fn.id.name for fn in functions if fn.id is not None}

    free: Set[str] = set()
    for fn in functions:
        _ScopeWalker(free).walk_function(fn)

    return free - global_functions


def top_level_functions(program: Program) -> List[FunctionDeclaration]:
    """Function declarations that are direct children of the program (nested ones excluded)."""
    return [node for node in program.body if isinstance(node, FunctionDeclaration)]


def find_global_names(program: Program) -> Set[str]:
    """
    Names bound at the top level by function and variable declarations.

    Args:
        program: Parsed script.

    Returns:
        Set[str]: Top-level function names plus every name bound by a
                  top-level ``var``/``let``/``const`` declarator.
    """
    names: Set[str] = set()
    for node in program.body:
        if isinstance(node, FunctionDeclaration) and node.id is not None:
            names.add(node.id.name)
        elif isinstance(node, VariableDeclaration):
            for declarator in node.declarations:
                names.update(pattern_names(declarator.id))
    return names


def pattern_names(pattern) -> Iterable[str]:
    """
    Yield every name bound by a binding pattern.

    Destructuring is followed recursively: object-pattern property values,
    array-pattern elements, rest elements and the left side of defaults.
    Member-expression targets bind nothing.
    """
    if isinstance(pattern, Identifier):
        yield pattern.name
    elif isinstance(pattern, ObjectPattern):
        for prop in pattern.properties:
            if isinstance(prop, PatternProperty):
                yield from pattern_names(prop.value)
            else:
                yield from pattern_names(prop)
    elif isinstance(pattern, ArrayPattern):
        for element in pattern.elements:
            yield from pattern_names(element)
    elif isinstance(pattern, RestElement):
        yield from pattern_names(pattern.argument)
    elif isinstance(pattern, AssignmentPattern):
        yield from pattern_names(pattern.left)


# -----------------------------------------------------------------------------
# SCOPE WALKER
# -----------------------------------------------------------------------------

class _ScopeWalker:
    """
    Walks one top-level function, adding unbound references to ``free``.

    ``scopes`` is a stack; each scope's ``parent`` is the index of its
    enclosing scope, so lookups never need references between scope objects.
    """

    def __init__(self, free: Set[str]) -> None:
        self.free = free
        self.scopes: List[Scope] = []

    # -- Scope management --

    def walk_function(self, fn: FunctionDeclaration) -> None:
        parent = len(self.scopes) - 1 if self.scopes else None
        scope = Scope(parent=parent)

        if fn.id is not None:
            scope.bind(fn.id.name, BindingKind.FUNCTION)
        for param in fn.params:
            for name in pattern_names(param):
                scope.bind(name, BindingKind.PARAMETER)
        _hoist_declarations(fn.body.body, scope)

        self.scopes.append(scope)
        try:
            for statement in fn.body.body:
                self.walk_statement(statement)
        finally:
            self.scopes.pop()

    def is_bound(self, name: str) -> bool:
        index: Optional[int] = len(self.scopes) - 1
        while index is not None and index >= 0:
            scope = self.scopes[index]
            if name in scope:
                return True
            index = scope.parent
        return False

    def reference(self, name: str) -> None:
        if not self.is_bound(name):
            self.free.add(name)

    # -- Statements --

    def walk_statement(self, node) -> None:
        if isinstance(node, FunctionDeclaration):
            self.walk_function(node)
        elif isinstance(node, BlockStatement):
            for child in node.body:
                self.walk_statement(child)
        elif isinstance(node, DoWhileStatement):
            self.walk_statement(node.body)
            self.walk_expression(node.test)
        elif isinstance(node, ExpressionStatement):
            self.walk_expression(node.expression)
        elif isinstance(node, ForStatement):
            # init is not traversed
            if node.test is not None:
                self.walk_expression(node.test)
            if node.update is not None:
                self.walk_expression(node.update)
            self.walk_statement(node.body)
        elif isinstance(node, ForInStatement):
            # the loop variable is neither a reference nor a new local
            self.walk_expression(node.right)
            self.walk_statement(node.body)
        elif isinstance(node, IfStatement):
            self.walk_expression(node.test)
            self.walk_statement(node.consequent)
            if node.alternate is not None:
                self.walk_statement(node.alternate)
        elif isinstance(node, LabeledStatement):
            self.walk_statement(node.body)
        elif isinstance(node, ReturnStatement):
            if node.argument is not None:
                self.walk_expression(node.argument)
        elif isinstance(node, VariableDeclaration):
            for declarator in node.declarations:
                if declarator.init is not None:
                    self.walk_expression(declarator.init)
        elif isinstance(node, WhileStatement):
            self.walk_expression(node.test)
            self.walk_statement(node.body)
        elif isinstance(node, _NO_OP_STATEMENTS):
            pass
        else:
            logger.warning(f"Unimplemented statement {node_kind(node)}{_at_line(node)}")

    # -- Expressions --

    def walk_expression(self, node) -> None:
        if isinstance(node, AssignmentExpression):
            self.walk_expression(node.right)
        elif isinstance(node, BinaryExpression):
            self.walk_expression(node.left)
            self.walk_expression(node.right)
        elif isinstance(node, CallExpression):
            if not isinstance(node.callee, Super):
                self.walk_expression(node.callee)
            for arg in node.arguments:
                if not isinstance(arg, SpreadElement):
                    self.walk_expression(arg)
        elif isinstance(node, MemberExpression):
            if not isinstance(node.object, Super):
                self.walk_expression(node.object)
        elif isinstance(node, Identifier):
            self.reference(node.name)
        elif isinstance(node, Literal):
            pass
        else:
            logger.warning(f"Unimplemented expression {node_kind(node)}{_at_line(node)}")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _hoist_declarations(statements, scope: Scope) -> None:
    """
    Bind every name declared in ``statements`` into ``scope``.

    Descends into blocks, loop bodies, conditionals, labels and the nested
    statements of try/switch/with placeholders, but not into nested function
    bodies, which get their own scopes. For-loop initializer declarations
    are bound; for-in/of loop variables and catch parameters are not.
    """
    for node in statements:
        if isinstance(node, FunctionDeclaration):
            if node.id is not None:
                scope.bind(node.id.name, BindingKind.FUNCTION)
        elif isinstance(node, VariableDeclaration):
            for declarator in node.declarations:
                for name in pattern_names(declarator.id):
                    scope.bind(name, BindingKind.VARIABLE)
        elif isinstance(node, BlockStatement):
            _hoist_declarations(node.body, scope)
        elif isinstance(node, IfStatement):
            _hoist_declarations([node.consequent], scope)
            if node.alternate is not None:
                _hoist_declarations([node.alternate], scope)
        elif isinstance(node, ForStatement):
            if isinstance(node.init, VariableDeclaration):
                _hoist_declarations([node.init], scope)
            _hoist_declarations([node.body], scope)
        elif isinstance(node, (ForInStatement, ForOfStatement, WhileStatement,
                               DoWhileStatement, LabeledStatement)):
            _hoist_declarations([node.body], scope)
        elif isinstance(node, UnsupportedStatement):
            # try/switch/with: declarations count, contents are not walked
            _hoist_declarations(node.nested, scope)


def _at_line(node) -> str:
    line = getattr(node, "line", 0)
    return f" at line {line}" if line else ""
