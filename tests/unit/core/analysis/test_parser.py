from __future__ import annotations

"""
Unit tests for the JavaScript Parsing Service.

Verifies:
1. Lowering of covered productions into the syntax tree dataclasses.
2. Placeholders for productions the analyzers do not traverse.
3. All-or-nothing error handling with the original text preserved.
"""

from pathlib import Path

import pytest

from p5analysis.core.analysis.parser import parse, parse_file, parse_result
from p5analysis.domain.errors import FileTooLargeError, JavascriptSyntaxError
from p5analysis.domain.syntax_tree import (
    AssignmentExpression,
    AssignmentPattern,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    Literal,
    MemberExpression,
    ObjectPattern,
    RestElement,
    ReturnStatement,
    SpreadElement,
    Super,
    UnsupportedExpression,
    UnsupportedStatement,
    VariableDeclaration,
    node_kind,
)

# -----------------------------------------------------------------------------
# STATEMENT LOWERING
# -----------------------------------------------------------------------------

def test_parse_function_declaration() -> None:
    """Top-level functions keep their name, parameters and body."""
    program = parse("function setup(a, b) { return a; }")

    assert len(program.body) == 1
    fn = program.body[0]
    assert isinstance(fn, FunctionDeclaration)
    assert fn.id == Identifier("setup")
    assert fn.params == (Identifier("a"), Identifier("b"))
    assert isinstance(fn.body, BlockStatement)
    assert fn.body.body == (ReturnStatement(argument=Identifier("a")),)


def test_parse_comments_are_dropped() -> None:
    program = parse("// leading\nfunction f() { /* inner */ }\n")

    assert len(program.body) == 1
    assert program.body[0].body.body == ()


def test_parse_declaration_kinds() -> None:
    """var, let and const all lower to VariableDeclaration with their kind."""
    program = parse("var a = 1; let b; const c = 2;")

    kinds = [stmt.kind for stmt in program.body]
    assert kinds == ["var", "let", "const"]
    assert all(isinstance(stmt, VariableDeclaration) for stmt in program.body)
    assert program.body[1].declarations[0].init is None


def test_parse_destructuring_parameters() -> None:
    program = parse("function f({ a, b: c = 1 }, ...rest) {}")

    params = program.body[0].params
    assert isinstance(params[0], ObjectPattern)
    assert isinstance(params[1], RestElement)
    assert params[1].argument == Identifier("rest")
    assert isinstance(params[0].properties[1].value, AssignmentPattern)


def test_parse_for_loops() -> None:
    """Classic, for-in and for-of loops map to distinct statement kinds."""
    program = parse(
        "for (var i = 0; i < n; i++) {}\n"
        "for (var k in obj) {}\n"
        "for (const v of list) {}\n"
    )

    classic, for_in, for_of = program.body
    assert isinstance(classic, ForStatement)
    assert isinstance(classic.init, VariableDeclaration)
    assert isinstance(classic.test, BinaryExpression)

    assert isinstance(for_in, ForInStatement)
    assert isinstance(for_in.left, VariableDeclaration)
    assert for_in.right == Identifier("obj")

    assert isinstance(for_of, ForOfStatement)
    assert for_of.left.kind == "const"


def test_parse_if_else() -> None:
    program = parse("if (a) { b(); } else c();")

    stmt = program.body[0]
    assert isinstance(stmt, IfStatement)
    assert stmt.test == Identifier("a")
    assert isinstance(stmt.alternate, ExpressionStatement)


# -----------------------------------------------------------------------------
# EXPRESSION LOWERING
# -----------------------------------------------------------------------------

def test_parse_member_and_call() -> None:
    """Dotted and computed access both become MemberExpression."""
    program = parse("p5.random(xs[0], ...more);")

    call = program.body[0].expression
    assert isinstance(call, CallExpression)
    assert call.callee == MemberExpression(Identifier("p5"), Identifier("random"), computed=False)

    first, second = call.arguments
    assert isinstance(first, MemberExpression) and first.computed
    assert first.property == Literal("0")
    assert isinstance(second, SpreadElement)


def test_parse_parentheses_are_unwrapped() -> None:
    program = parse("x = (((y)));")

    expr = program.body[0].expression
    assert isinstance(expr, AssignmentExpression)
    assert expr.right == Identifier("y")


def test_parse_augmented_assignment_keeps_operator() -> None:
    expr = parse("total += step;").body[0].expression

    assert isinstance(expr, AssignmentExpression)
    assert expr.operator == "+="


def test_parse_super_call() -> None:
    program = parse("class A extends B { constructor() { super(); } }")

    # Class bodies are not lowered
    assert node_kind(program.body[0]) == "ClassDeclaration"

    fn = parse("function f() { super.x; }")
    member = fn.body[0].body.body[0].expression
    assert isinstance(member.object, Super)


@pytest.mark.parametrize(
    "source, kind",
    [
        ("a && b;", "LogicalExpression"),
        ("a ?? b;", "LogicalExpression"),
        ("a?.b;", "ChainExpression"),
        ("tag`x`;", "TaggedTemplateExpression"),
        ("import('m');", "ImportExpression"),
        ("() => 1;", "ArrowFunctionExpression"),
        ("new Thing();", "NewExpression"),
        ("this;", "ThisExpression"),
        ("a ? b : c;", "ConditionalExpression"),
        ("[1, 2];", "ArrayExpression"),
    ],
)
def test_parse_unsupported_expressions(source: str, kind: str) -> None:
    """Untraversed expressions are kept as placeholders named by ESTree kind."""
    expr = parse(source).body[0].expression

    assert isinstance(expr, UnsupportedExpression)
    assert expr.kind == kind
    assert expr.line == 1


def test_parse_unsupported_statement_records_line() -> None:
    program = parse("\n\nswitch (x) { case 1: break; }")

    stmt = program.body[0]
    assert isinstance(stmt, UnsupportedStatement)
    assert stmt.kind == "SwitchStatement"
    assert stmt.line == 3


def test_parse_placeholders_keep_nested_statements() -> None:
    program = parse(
        "try { var a; } catch (e) { b(); } finally { c(); }\n"
        "switch (k) { case 1: var d; break; default: e(); }\n"
        "with (o) f();"
    )
    try_stmt, switch_stmt, with_stmt = program.body

    assert try_stmt.kind == "TryStatement"
    assert [type(s) for s in try_stmt.nested] == [BlockStatement] * 3
    assert isinstance(try_stmt.nested[0].body[0], VariableDeclaration)

    assert [node_kind(s) for s in switch_stmt.nested] == [
        "VariableDeclaration", "BreakStatement", "ExpressionStatement",
    ]
    assert with_stmt.kind == "WithStatement"
    assert isinstance(with_stmt.nested[0], ExpressionStatement)


# -----------------------------------------------------------------------------
# ERROR HANDLING
# -----------------------------------------------------------------------------

def test_parse_error_keeps_original_text() -> None:
    """A malformed script raises with the verbatim source attached."""
    source = "function draw( {\n  let = ;\n"

    with pytest.raises(JavascriptSyntaxError) as exc_info:
        parse(source, "broken.js")

    err = exc_info.value
    assert err.source_text == source
    assert err.file_name == "broken.js"
    assert err.message.startswith("Line ")
    assert "broken.js" in str(err)


def test_parse_never_returns_partial_tree() -> None:
    with pytest.raises(JavascriptSyntaxError):
        parse("function ok() {}\nfunction broken( {")


def test_parse_result_wraps_outcome() -> None:
    good = parse_result("function f() {}", "good.js")
    bad = parse_result("function (", "bad.js")

    assert good.ok and good.error is None
    assert good.document.file_name == "good.js"
    assert not bad.ok and bad.program is None
    assert bad.error.source_text == "function ("


def test_parse_file_reads_utf8(tmp_path: Path) -> None:
    script = tmp_path / "sketch.js"
    script.write_text("function draw() { text('héllo', 0, 0); }", encoding="utf-8")

    program = parse_file(str(script))
    assert program.body[0].id.name == "draw"


def test_parse_file_size_limit(tmp_path: Path) -> None:
    script = tmp_path / "big.js"
    script.write_text("var x = 1;\n" * 100, encoding="utf-8")

    with pytest.raises(FileTooLargeError):
        parse_file(str(script), max_bytes=10)


def test_parse_file_missing_propagates(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        parse_file(str(tmp_path / "missing.js"))
