from __future__ import annotations

"""
Namespace Member Reference Extraction.

Collects the property names a script reads or writes directly off a single
global identifier (``p5.random``, ``p5.prototype``). Only one level is
tracked: ``p5.prototype.foo`` yields ``prototype``.
"""

import logging
from typing import Set

from p5analysis.domain.constants import DEFAULT_NAMESPACE
from p5analysis.domain.syntax_tree import (
    AssignmentExpression,
    BinaryExpression,
    CallExpression,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    Literal,
    MemberExpression,
    Program,
    ReturnStatement,
    SpreadElement,
    Super,
    VariableDeclaration,
    node_kind,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def find_namespace_member_references(program: Program, namespace: str = DEFAULT_NAMESPACE) -> Set[str]:
    """
    Extract the names of members accessed as ``<namespace>.<name>``.

    Statement coverage is narrower than the free-variable walk: function
    declarations, variable initializers, expression statements and returns.
    Other kinds are logged and skipped.

    Args:
        program: Parsed script.
        namespace: Identifier whose members are collected.

    Returns:
        Set[str]: Member names, without duplicates.
    """
    collector = _MemberCollector(namespace)
    for statement in program.body:
        collector.visit_statement(statement)
    return collector.members


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

class _MemberCollector:

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        self.members: Set[str] = set()

    def visit_statement(self, node) -> None:
        if isinstance(node, FunctionDeclaration):
            for statement in node.body.body:
                self.visit_statement(statement)
        elif isinstance(node, VariableDeclaration):
            for declarator in node.declarations:
                if declarator.init is not None:
                    self.visit_expression(declarator.init)
        elif isinstance(node, ExpressionStatement):
            self.visit_expression(node.expression)
        elif isinstance(node, ReturnStatement):
            if node.argument is not None:
                self.visit_expression(node.argument)
        else:
            logger.warning(f"Unimplemented statement {node_kind(node)}")

    def visit_expression(self, node) -> None:
        if isinstance(node, AssignmentExpression):
            # p5.prototype.foo = ... is a write through the namespace
            if isinstance(node.left, MemberExpression):
                self.visit_expression(node.left)
            self.visit_expression(node.right)
        elif isinstance(node, BinaryExpression):
            self.visit_expression(node.left)
            self.visit_expression(node.right)
        elif isinstance(node, CallExpression):
            if not isinstance(node.callee, Super):
                self.visit_expression(node.callee)
            for arg in node.arguments:
                if not isinstance(arg, SpreadElement):
                    self.visit_expression(arg)
        elif isinstance(node, MemberExpression):
            self._visit_member(node)
        elif isinstance(node, (Identifier, Literal)):
            pass
        else:
            logger.warning(f"Unimplemented expression {node_kind(node)}")

    def _visit_member(self, node: MemberExpression) -> None:
        obj = node.object
        if (
            not node.computed
            and isinstance(obj, Identifier)
            and obj.name == self.namespace
            and isinstance(node.property, Identifier)
        ):
            self.members.add(node.property.name)
        elif not isinstance(obj, Super):
            self.visit_expression(obj)
