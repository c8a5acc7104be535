from __future__ import annotations

"""
Unit tests for Domain Models.

Verifies:
1. Project file ordering and root file resolution.
2. Scope binding precedence.
3. Immutability of frozen dataclasses and placeholder kind names.
"""

import dataclasses

import pytest

from p5analysis.domain.analysis_models import BindingKind, Scope
from p5analysis.domain.errors import FileTooLargeError, JavascriptSyntaxError, P5AnalysisError
from p5analysis.domain.project_models import Project, ScanResult
from p5analysis.domain.syntax_tree import Identifier, UnsupportedStatement, node_kind


def test_project_files_markup_first():
    project = Project("/sketches", markup_file="index.html", script_file="sketch.js")

    assert project.files == ["index.html", "sketch.js"]
    assert project.root_file == "index.html"


def test_project_files_only_set_members():
    assert Project("/sketches", script_file="orbit.js").files == ["orbit.js"]
    assert Project("/sketches").files == []
    assert Project("/sketches/ball").root_file == "ball"


def test_project_is_frozen():
    project = Project("/sketches", markup_file="index.html")

    with pytest.raises(dataclasses.FrozenInstanceError):
        project.title = "Other"


def test_scan_result_defaults_are_independent():
    a, b = ScanResult(), ScanResult()
    a.files.append("x")

    assert b.files == []


def test_scope_first_binding_wins():
    scope = Scope()
    scope.bind("x", BindingKind.PARAMETER)
    scope.bind("x", BindingKind.VARIABLE)

    assert "x" in scope
    assert scope.bindings["x"] is BindingKind.PARAMETER
    assert "y" not in scope


def test_error_hierarchy():
    err = JavascriptSyntaxError("Line 1: Unexpected token (", "a.js", "(")

    assert isinstance(err, P5AnalysisError)
    assert str(err) == "a.js: Line 1: Unexpected token ("
    assert isinstance(FileTooLargeError("big.js", 10, 5), P5AnalysisError)


def test_node_kind_names():
    assert node_kind(Identifier("a")) == "Identifier"
    assert node_kind(UnsupportedStatement(kind="TryStatement", line=4)) == "TryStatement"
