"""Tests for the annotation locator."""

from __future__ import annotations

import pytest

from proplint.analyzer.locator import is_marked, locate_marks, normalize_marker
from proplint.ir.nodes import NodeKind, Role
from proplint.ir.tree import SyntaxTree

MARKER = "clang::maybe_unhandled"


@pytest.mark.parametrize("spelling", [
    "maybe_unhandled",
    "clang::maybe_unhandled",
    "[[clang::maybe_unhandled]]",
    "[[ maybe_unhandled ]]",
    "__maybe_unhandled__",
    "gnu::__maybe_unhandled__",
])
def test_normalize_marker(spelling):
    assert normalize_marker(spelling) == "maybe_unhandled"


def test_declaration_and_statement_marks():
    t = SyntaxTree()
    var = t.add_node(NodeKind.VAR_DECL, annotations=("maybe_unhandled",))
    stmt = t.add_node(NodeKind.EXPR_STMT, annotations=("[[clang::maybe_unhandled]]",))
    plain = t.add_node(NodeKind.EXPR_STMT)
    assert is_marked(var, MARKER)
    assert is_marked(stmt, MARKER)
    assert not is_marked(plain, MARKER)


def test_other_annotations_ignored():
    t = SyntaxTree()
    node = t.add_node(NodeKind.RETURN, annotations=("likely", "nodiscard"))
    assert not is_marked(node, MARKER)


def test_expressions_never_marked():
    t = SyntaxTree()
    call = t.add_node(NodeKind.CALL, callee="f", annotations=("maybe_unhandled",))
    assert not is_marked(call, MARKER)


def test_custom_marker():
    t = SyntaxTree()
    node = t.add_node(NodeKind.EXPR_STMT, annotations=("may_throw",))
    assert is_marked(node, "may_throw")
    assert not is_marked(node, MARKER)


def test_mark_on_body_does_not_mark_control_statement():
    t = SyntaxTree()
    if_ = t.add_node(NodeKind.IF)
    t.add_node(NodeKind.EXPR, parent=if_.id, role=Role.CONDITION)
    t.add_node(NodeKind.EXPR_STMT, parent=if_.id, role=Role.THEN, annotations=("maybe_unhandled",))
    assert locate_marks(t, MARKER) == [False, False, True]
