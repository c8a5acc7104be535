from __future__ import annotations

"""
Unit tests for the Free-Variable Analysis.

Verifies:
1. Scope rules: parameters, own name, hoisted declarations, nested functions.
2. Top-level functions never being reported as free.
3. The exact statement/expression coverage, including constructs that are
   intentionally not traversed.
"""

import logging

import pytest

from p5analysis.core.analysis.free_variables import (
    find_free_variables,
    find_global_names,
    pattern_names,
)
from p5analysis.core.analysis.parser import parse


def free(source: str):
    return find_free_variables(parse(source))


# -----------------------------------------------------------------------------
# SCOPE RULES
# -----------------------------------------------------------------------------

def test_no_references_yields_empty_set() -> None:
    assert free("function setup() { var a = 1; return a; }") == set()


def test_repeated_reference_reported_once() -> None:
    assert free("function f() { foo(); foo(); return foo; }") == {"foo"}


def test_recursion_is_not_free() -> None:
    assert free("function f() { f(); }") == set()


def test_top_level_functions_see_each_other() -> None:
    source = "function setup() { helper(); }\nfunction helper() { return width; }"
    assert free(source) == {"width"}


def test_parameter_shadows_global_function() -> None:
    """A parameter named like a top-level function is still a local."""
    source = "function f(x) { return x; }\nfunction x() {}"
    assert free(source) == set()


def test_destructured_parameters_are_bound() -> None:
    source = "function f({ a, b: [c, ...d] }, e = g) { return a + c + d + e; }"
    # Default values are not traversed
    assert free(source) == set()


def test_hoisted_declarations_are_bound() -> None:
    """Declarations anywhere in the body bind, even after use or in blocks."""
    source = """
    function draw() {
      use(later);
      if (ready) {
        var later = 1;
      }
      for (let i = 0; i < n; i = i + 1) {}
      inner();
      function inner() {}
    }
    """
    assert free(source) == {"use", "ready", "n"}


def test_nested_function_scopes() -> None:
    """Nested declarations see outer locals; their own locals stay private."""
    source = """
    function outer(a) {
      function inner(b) {
        var c = b;
        return a + b + c + missing;
      }
      return c;
    }
    """
    assert free(source) == {"missing", "c"}


def test_for_in_variable_is_not_a_local() -> None:
    source = "function f(obj) { for (k in obj) { use(k); } }"
    assert free(source) == {"use", "k"}


def test_top_level_code_is_ignored() -> None:
    source = "var cnv = createCanvas(10, 10);\nfunction setup() {}"
    assert free(source) == set()


# -----------------------------------------------------------------------------
# COVERAGE
# -----------------------------------------------------------------------------

def test_assignment_target_is_not_scanned() -> None:
    assert free("function f() { target = source; }") == {"source"}


def test_member_object_only() -> None:
    assert free("function f() { return a.b.c; }") == {"a"}


def test_spread_arguments_are_skipped() -> None:
    assert free("function f() { g(x, ...rest); }") == {"g", "x"}


def test_for_loop_init_not_traversed() -> None:
    source = "function f() { for (x = start; x < end; x = x + step) {} }"
    assert free(source) == {"x", "end", "step"}


def test_loops_and_labels_are_traversed() -> None:
    source = """
    function f() {
      outer: while (running) {
        do { tick(); } while (pending);
        break outer;
      }
    }
    """
    assert free(source) == {"running", "tick", "pending"}


@pytest.mark.parametrize(
    "body",
    [
        "switch (k) { case 1: hidden(); }",
        "try { hidden(); } catch (e) {}",
        "throw hidden;",
        "for (const v of hidden) {}",
        "return () => hidden;",
        "return hidden ? 1 : 2;",
        "return !hidden;",
        "return new Hidden();",
        "return a && hidden;",
    ],
)
def test_untraversed_constructs_hide_references(body: str) -> None:
    assert free(f"function f() {{ {body} }}") == set()


@pytest.mark.parametrize(
    "source",
    [
        "function f() { try { var x = 1; } catch (e) {} return x; }",
        "function f() { try {} catch (e) { var x; } finally {} return x; }",
        "function f() { try {} finally { function x() {} } return x; }",
        "function f(k) { switch (k) { case 1: var x = 2; break; default: } return x; }",
        "function f(k) { switch (k) { default: { let x; } } return x; }",
        "function f(o) { with (o) { var x; } return x; }",
    ],
)
def test_declarations_inside_untraversed_blocks_are_hoisted(source: str) -> None:
    assert free(source) == set()


def test_untraversed_block_contents_stay_hidden() -> None:
    """Hoisting a try block must not start walking its references."""
    assert free("function f() { try { var x = hidden(); } catch (e) {} return x + y; }") == {"y"}


def test_catch_parameter_is_not_a_local() -> None:
    assert free("function f() { try {} catch (e) {} return e; }") == {"e"}


def test_unsupported_kinds_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="p5analysis.core.analysis.free_variables"):
        free("function f() { switch (x) {} return () => 1; }")

    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "SwitchStatement" in messages
    assert "ArrowFunctionExpression" in messages


# -----------------------------------------------------------------------------
# GLOBAL NAMES AND PATTERNS
# -----------------------------------------------------------------------------

def test_find_global_names() -> None:
    program = parse("var x = 1, { y, z: [w] } = o;\nfunction setup() { let local; }")
    assert find_global_names(program) == {"x", "y", "w", "setup"}


def test_pattern_names_from_parsed_parameters() -> None:
    fn = parse("function f(a, [b, c = 1], { d, ...e }) {}").body[0]
    names = [name for param in fn.params for name in pattern_names(param)]
    assert names == ["a", "b", "c", "d", "e"]
