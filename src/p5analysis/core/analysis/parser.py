from __future__ import annotations

"""
JavaScript Parsing Service.

Parses script text with tree-sitter and lowers the concrete syntax tree into
the immutable ESTree-shaped node kinds of ``p5analysis.domain.syntax_tree``.

Parsing is all-or-nothing: if tree-sitter recovered from any error (an ERROR
node or a MISSING token anywhere in the tree) the whole parse fails with a
``JavascriptSyntaxError`` carrying the original text, instead of returning a
partially valid tree.
"""

import logging
from typing import List, Optional

import tree_sitter_javascript as tsjavascript
from tree_sitter import Language, Node, Parser

from p5analysis.domain.analysis_models import ParseResult, SourceDocument
from p5analysis.domain.errors import JavascriptSyntaxError
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
    Expression,
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
    Pattern,
    PatternProperty,
    PrivateIdentifier,
    Program,
    RestElement,
    ReturnStatement,
    SpreadElement,
    Statement,
    Super,
    UnsupportedExpression,
    UnsupportedPattern,
    UnsupportedStatement,
    VariableDeclaration,
    VariableDeclarator,
    WhileStatement,
)
from p5analysis.infra.fs import read_text

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjavascript.language())

# Nodes that may appear anywhere and carry no syntax
_EXTRAS = frozenset({"comment", "html_comment", "hash_bang_line"})

_LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})
_LITERAL_TYPES = frozenset({"number", "string", "true", "false", "null", "regex"})
_DECLARATION_TYPES = frozenset({"variable_declaration", "lexical_declaration"})
_DECLARATION_KINDS = ("var", "let", "const")
_CHAIN_TYPES = frozenset({"call_expression", "member_expression", "subscript_expression"})

# tree-sitter node type -> ESTree production name, for kinds kept as placeholders
_UNSUPPORTED_STATEMENTS = {
    "with_statement": "WithStatement",
    "switch_statement": "SwitchStatement",
    "throw_statement": "ThrowStatement",
    "try_statement": "TryStatement",
    "class_declaration": "ClassDeclaration",
    "import_statement": "ImportDeclaration",
    "export_statement": "ExportNamedDeclaration",
}

_UNSUPPORTED_EXPRESSIONS = {
    "this": "ThisExpression",
    "super": "Super",
    "array": "ArrayExpression",
    "object": "ObjectExpression",
    "function": "FunctionExpression",
    "function_expression": "FunctionExpression",
    "generator_function": "FunctionExpression",
    "arrow_function": "ArrowFunctionExpression",
    "yield_expression": "YieldExpression",
    "unary_expression": "UnaryExpression",
    "update_expression": "UpdateExpression",
    "ternary_expression": "ConditionalExpression",
    "new_expression": "NewExpression",
    "sequence_expression": "SequenceExpression",
    "template_string": "TemplateLiteral",
    "class": "ClassExpression",
    "meta_property": "MetaProperty",
    "await_expression": "AwaitExpression",
    "jsx_element": "JSXElement",
    "jsx_self_closing_element": "JSXElement",
}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse(text: str, file_name: str = "<anonymous>") -> Program:
    """
    Parse JavaScript source text into a syntax tree.

    Args:
        text: Script source.
        file_name: Identifier reported in errors (usually the path).

    Returns:
        Program: The lowered syntax tree.

    Raises:
        JavascriptSyntaxError: If the text does not parse cleanly.
    """
    # Parser instances are not shared between calls.
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(text.encode("utf-8"))
    root = tree.root_node

    if root.has_error:
        message = _describe_error(root)
        logger.debug(f"Syntax error in {file_name}: {message}")
        raise JavascriptSyntaxError(message, file_name, text)

    return _TreeLowering().program(root)


def parse_result(text: str, file_name: str = "<anonymous>") -> ParseResult:
    """
    Parse source text, returning the syntax error as a value instead of raising.

    Args:
        text: Script source.
        file_name: Identifier reported in errors.

    Returns:
        ParseResult: Holds either the program or the error.
    """
    document = SourceDocument(file_name=file_name, text=text)
    try:
        return ParseResult(document=document, program=parse(text, file_name))
    except JavascriptSyntaxError as e:
        return ParseResult(document=document, error=e)


def parse_file(file_path: str, max_bytes: int = 0) -> Program:
    """
    Read and parse a script file.

    Args:
        file_path: Path to a UTF-8 script.
        max_bytes: Optional size limit; 0 disables it.

    Returns:
        Program: The lowered syntax tree.

    Raises:
        JavascriptSyntaxError: If the file does not parse. ``file_name`` is
                               the given path.
        FileTooLargeError: If the file exceeds ``max_bytes``.
        OSError: If the file cannot be read.
    """
    return parse(read_text(file_path, max_bytes), file_path)


# -----------------------------------------------------------------------------
# TREE LOWERING
# -----------------------------------------------------------------------------

class _TreeLowering:
    """
    Converts tree-sitter nodes into syntax tree dataclasses.

    Dispatch is by node type onto ``_stmt_<type>``, ``_expr_<type>`` and
    ``_pattern_<type>`` methods. Types without a method become placeholders.
    """

    def program(self, node: Node) -> Program:
        return Program(body=tuple(self.statement(c) for c in _named(node)))

    # -- Statements --

    def statement(self, node: Node) -> Statement:
        handler = getattr(self, f"_stmt_{node.type}", None)
        if handler is not None:
            return handler(node)
        kind = _UNSUPPORTED_STATEMENTS.get(node.type, _camel(node.type))
        return UnsupportedStatement(kind=kind, line=_line(node))

    def _stmt_function_declaration(self, node: Node) -> FunctionDeclaration:
        name = node.child_by_field_name("name")
        params = node.child_by_field_name("parameters")
        return FunctionDeclaration(
            id=Identifier(_text(name)) if name is not None else None,
            params=tuple(self.pattern(p) for p in _named(params)) if params is not None else (),
            body=self._stmt_statement_block(node.child_by_field_name("body")),
            is_async=_has_token(node, "async"),
            is_generator=node.type.startswith("generator") or _has_token(node, "*"),
        )

    _stmt_generator_function_declaration = _stmt_function_declaration

    def _stmt_statement_block(self, node: Node) -> BlockStatement:
        return BlockStatement(body=tuple(self.statement(c) for c in _named(node)))

    def _stmt_expression_statement(self, node: Node) -> ExpressionStatement:
        return ExpressionStatement(expression=self.expression(_first_named(node)))

    def _stmt_do_statement(self, node: Node) -> DoWhileStatement:
        return DoWhileStatement(
            body=self.statement(node.child_by_field_name("body")),
            test=self.expression(node.child_by_field_name("condition")),
        )

    def _stmt_while_statement(self, node: Node) -> WhileStatement:
        return WhileStatement(
            test=self.expression(node.child_by_field_name("condition")),
            body=self.statement(node.child_by_field_name("body")),
        )

    def _stmt_for_statement(self, node: Node) -> ForStatement:
        increment = node.child_by_field_name("increment")
        return ForStatement(
            init=self._for_clause(node.child_by_field_name("initializer")),
            test=self._for_clause(node.child_by_field_name("condition")),
            update=self.expression(increment) if increment is not None else None,
            body=self.statement(node.child_by_field_name("body")),
        )

    def _stmt_for_in_statement(self, node: Node) -> Statement:
        left = self.pattern(node.child_by_field_name("left"))
        kind = _declaration_kind(node)
        if kind:
            left = VariableDeclaration(kind=kind, declarations=(VariableDeclarator(id=left),))
        right = self.expression(node.child_by_field_name("right"))
        body = self.statement(node.child_by_field_name("body"))

        # tree-sitter uses one node type for both loop forms
        operator = node.child_by_field_name("operator")
        is_of = (operator is not None and operator.type == "of") or _has_token(node, "of")
        is_await = _has_token(node, "await")
        if is_of or is_await:
            return ForOfStatement(left=left, right=right, body=body, is_await=is_await)
        return ForInStatement(left=left, right=right, body=body)

    def _stmt_if_statement(self, node: Node) -> IfStatement:
        alternate: Optional[Statement] = None
        alternative = node.child_by_field_name("alternative")
        if alternative is not None:
            if alternative.type == "else_clause":
                alternative = _first_named(alternative)
            alternate = self.statement(alternative)
        return IfStatement(
            test=self.expression(node.child_by_field_name("condition")),
            consequent=self.statement(node.child_by_field_name("consequence")),
            alternate=alternate,
        )

    def _stmt_labeled_statement(self, node: Node) -> LabeledStatement:
        return LabeledStatement(
            label=Identifier(_text(node.child_by_field_name("label"))),
            body=self.statement(node.child_by_field_name("body")),
        )

    def _stmt_return_statement(self, node: Node) -> ReturnStatement:
        argument = _first_named(node)
        return ReturnStatement(argument=self.expression(argument) if argument is not None else None)

    def _stmt_break_statement(self, node: Node) -> BreakStatement:
        return BreakStatement(label=_optional_label(node))

    def _stmt_continue_statement(self, node: Node) -> ContinueStatement:
        return ContinueStatement(label=_optional_label(node))

    def _stmt_debugger_statement(self, node: Node) -> DebuggerStatement:
        return DebuggerStatement()

    def _stmt_empty_statement(self, node: Node) -> EmptyStatement:
        return EmptyStatement()

    def _stmt_variable_declaration(self, node: Node) -> VariableDeclaration:
        declarators: List[VariableDeclarator] = []
        for child in _named(node):
            if child.type != "variable_declarator":
                continue
            value = child.child_by_field_name("value")
            declarators.append(VariableDeclarator(
                id=self.pattern(child.child_by_field_name("name")),
                init=self.expression(value) if value is not None else None,
            ))
        return VariableDeclaration(kind=_declaration_kind(node) or "var", declarations=tuple(declarators))

    _stmt_lexical_declaration = _stmt_variable_declaration

    def _stmt_try_statement(self, node: Node) -> UnsupportedStatement:
        blocks = [node.child_by_field_name("body")]
        for clause_field in ("handler", "finalizer"):
            clause = node.child_by_field_name(clause_field)
            if clause is not None:
                blocks.append(clause.child_by_field_name("body"))
        return self._placeholder(node, blocks)

    def _stmt_switch_statement(self, node: Node) -> UnsupportedStatement:
        statements: List[Node] = []
        for case in _named(node.child_by_field_name("body")):
            statements.extend(case.children_by_field_name("body"))
        return self._placeholder(node, statements)

    def _stmt_with_statement(self, node: Node) -> UnsupportedStatement:
        return self._placeholder(node, [node.child_by_field_name("body")])

    def _placeholder(self, node: Node, nested: List[Optional[Node]]) -> UnsupportedStatement:
        """Placeholder that still carries the statements nested in the construct."""
        return UnsupportedStatement(
            kind=_UNSUPPORTED_STATEMENTS[node.type],
            line=_line(node),
            nested=tuple(self.statement(n) for n in nested if n is not None and n.type not in _EXTRAS),
        )

    def _for_clause(self, node: Optional[Node]):
        """Lower a for-loop initializer or condition, which may be empty."""
        if node is None or not node.is_named or node.type == "empty_statement":
            return None
        if node.type in _DECLARATION_TYPES:
            return self._stmt_variable_declaration(node)
        if node.type == "expression_statement":
            return self.expression(_first_named(node))
        return self.expression(node)

    # -- Expressions --

    def expression(self, node: Node) -> Expression:
        handler = getattr(self, f"_expr_{node.type}", None)
        if handler is not None:
            return handler(node)
        if node.type in _LITERAL_TYPES:
            return Literal(raw=_text(node))
        kind = _UNSUPPORTED_EXPRESSIONS.get(node.type, _camel(node.type))
        return UnsupportedExpression(kind=kind, line=_line(node))

    def _expr_parenthesized_expression(self, node: Node) -> Expression:
        return self.expression(_first_named(node))

    def _expr_identifier(self, node: Node) -> Identifier:
        return Identifier(_text(node))

    _expr_undefined = _expr_identifier

    def _expr_assignment_expression(self, node: Node) -> AssignmentExpression:
        operator = node.child_by_field_name("operator")
        return AssignmentExpression(
            operator=_text(operator) if operator is not None else "=",
            left=self.pattern(node.child_by_field_name("left")),
            right=self.expression(node.child_by_field_name("right")),
        )

    _expr_augmented_assignment_expression = _expr_assignment_expression

    def _expr_binary_expression(self, node: Node) -> Expression:
        operator = _text(node.child_by_field_name("operator"))
        if operator in _LOGICAL_OPERATORS:
            return UnsupportedExpression(kind="LogicalExpression", line=_line(node))
        return BinaryExpression(
            operator=operator,
            left=self.expression(node.child_by_field_name("left")),
            right=self.expression(node.child_by_field_name("right")),
        )

    def _expr_call_expression(self, node: Node) -> Expression:
        if _is_optional_chain(node):
            return UnsupportedExpression(kind="ChainExpression", line=_line(node))

        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if arguments.type == "template_string":
            return UnsupportedExpression(kind="TaggedTemplateExpression", line=_line(node))
        if function.type == "import":
            return UnsupportedExpression(kind="ImportExpression", line=_line(node))

        args = []
        for arg in _named(arguments):
            if arg.type == "spread_element":
                args.append(SpreadElement(argument=self.expression(_first_named(arg))))
            else:
                args.append(self.expression(arg))
        return CallExpression(callee=self._member_object(function), arguments=tuple(args))

    def _expr_member_expression(self, node: Node) -> Expression:
        if _is_optional_chain(node):
            return UnsupportedExpression(kind="ChainExpression", line=_line(node))

        prop = node.child_by_field_name("property")
        if prop.type == "private_property_identifier":
            property_node = PrivateIdentifier(_text(prop).lstrip("#"))
        else:
            property_node = Identifier(_text(prop))
        return MemberExpression(
            object=self._member_object(node.child_by_field_name("object")),
            property=property_node,
            computed=False,
        )

    def _expr_subscript_expression(self, node: Node) -> Expression:
        if _is_optional_chain(node):
            return UnsupportedExpression(kind="ChainExpression", line=_line(node))
        return MemberExpression(
            object=self._member_object(node.child_by_field_name("object")),
            property=self.expression(node.child_by_field_name("index")),
            computed=True,
        )

    def _member_object(self, node: Node):
        return Super() if node.type == "super" else self.expression(node)

    # -- Patterns --

    def pattern(self, node: Node) -> Pattern:
        handler = getattr(self, f"_pattern_{node.type}", None)
        if handler is not None:
            return handler(node)
        return UnsupportedPattern(kind=_camel(node.type), line=_line(node))

    def _pattern_identifier(self, node: Node) -> Identifier:
        return Identifier(_text(node))

    _pattern_undefined = _pattern_identifier
    _pattern_shorthand_property_identifier_pattern = _pattern_identifier

    def _pattern_object_pattern(self, node: Node) -> ObjectPattern:
        properties = []
        for child in _named(node):
            if child.type == "pair_pattern":
                properties.append(PatternProperty(
                    key=_text(child.child_by_field_name("key")),
                    value=self.pattern(child.child_by_field_name("value")),
                ))
            elif child.type == "object_assignment_pattern":
                left = child.child_by_field_name("left")
                properties.append(PatternProperty(
                    key=_text(left),
                    value=AssignmentPattern(
                        left=self.pattern(left),
                        right=self.expression(child.child_by_field_name("right")),
                    ),
                ))
            elif child.type == "rest_pattern":
                properties.append(self._pattern_rest_pattern(child))
            else:
                properties.append(PatternProperty(key=_text(child), value=self.pattern(child)))
        return ObjectPattern(properties=tuple(properties))

    def _pattern_array_pattern(self, node: Node) -> ArrayPattern:
        return ArrayPattern(elements=tuple(self.pattern(c) for c in _named(node)))

    def _pattern_rest_pattern(self, node: Node) -> RestElement:
        return RestElement(argument=self.pattern(_first_named(node)))

    def _pattern_assignment_pattern(self, node: Node) -> AssignmentPattern:
        return AssignmentPattern(
            left=self.pattern(node.child_by_field_name("left")),
            right=self.expression(node.child_by_field_name("right")),
        )

    def _pattern_member_expression(self, node: Node):
        return self.expression(node)

    _pattern_subscript_expression = _pattern_member_expression

    def _pattern_parenthesized_expression(self, node: Node):
        return self.pattern(_first_named(node))


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _named(node: Node) -> List[Node]:
    """Named children of a node, without comments."""
    return [c for c in node.named_children if c.type not in _EXTRAS]


def _first_named(node: Node) -> Optional[Node]:
    children = _named(node)
    return children[0] if children else None


def _text(node: Node) -> str:
    return node.text.decode("utf-8")


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _camel(node_type: str) -> str:
    return "".join(part.capitalize() for part in node_type.split("_"))


def _has_token(node: Node, token: str) -> bool:
    """Whether an anonymous (keyword/punctuation) child of ``node`` is ``token``."""
    return any(not c.is_named and c.type == token for c in node.children)


def _declaration_kind(node: Node) -> Optional[str]:
    for child in node.children:
        if not child.is_named and child.type in _DECLARATION_KINDS:
            return child.type
    return None


def _optional_label(node: Node) -> Optional[Identifier]:
    label = node.child_by_field_name("label")
    return Identifier(_text(label)) if label is not None else None


def _is_optional_chain(node: Node) -> bool:
    """Whether a call/member chain contains a ``?.`` link anywhere below it."""
    current: Optional[Node] = node
    while current is not None and current.type in _CHAIN_TYPES:
        if any(c.type == "optional_chain" for c in current.children):
            return True
        next_node = current.child_by_field_name("function")
        if next_node is None:
            next_node = current.child_by_field_name("object")
        current = next_node
    return False


def _describe_error(root: Node) -> str:
    """Describe the first error in the tree by line and offending token."""
    node = _find_error_node(root)
    if node is None:
        return "Unexpected token"

    line = _line(node)
    if node.is_missing:
        return f"Line {line}: Expected {node.type}"

    leaf = node
    while leaf.child_count > 0:
        leaf = leaf.children[0]
    token = _text(leaf).strip()
    if not token:
        return f"Line {line}: Unexpected end of input"
    return f"Line {line}: Unexpected token {token[:40]}"


def _find_error_node(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _find_error_node(child)
            if found is not None:
                return found
    return None
