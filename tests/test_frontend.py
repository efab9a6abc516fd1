"""Tests for loading native tree documents into a TranslationUnit."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from proplint.ir.frontend import TreeDocumentError, build_unit, load_unit, parse_document
from proplint.ir.nodes import NodeKind, Role


def _write(tmpdir: Path, name: str, content: str) -> Path:
    p = tmpdir / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p


def _unit(nodes: list[dict], callables: list[dict] | None = None, file: str = "t.cpp"):
    return build_unit(parse_document({"file": file, "callables": callables or [], "nodes": nodes}))


# ── Document parsing ──────────────────────────────────────────────────────


class TestParseDocument:
    def test_minimal(self):
        doc = parse_document({"file": "a.cpp"})
        assert doc.file == "a.cpp"
        assert doc.nodes == []

    def test_rejects_non_mapping(self):
        with pytest.raises(TreeDocumentError, match="mapping"):
            parse_document(["not", "a", "document"])

    def test_rejects_unknown_kind(self):
        with pytest.raises(TreeDocumentError, match="invalid tree document"):
            parse_document({"nodes": [{"kind": "lambda_capture"}]})

    def test_rejects_unknown_role(self):
        with pytest.raises(TreeDocumentError):
            parse_document({"nodes": [{"kind": "stmt", "role": "sideways"}]})


class TestLoadUnit:
    def test_json(self, tmp_path):
        path = _write(tmp_path, "a.tree.json", json.dumps({
            "file": "a.cpp",
            "callables": [{"name": "f"}],
            "nodes": [{"kind": "var_decl", "name": "x", "line": 3,
                       "children": [{"kind": "call", "callee": "f", "line": 3}]}],
        }))
        unit = load_unit(path)
        assert unit.source_file == "a.cpp"
        assert unit.document == path
        assert len(unit.tree) == 2
        assert unit.facts.may_propagate("f")

    def test_yaml(self, tmp_path):
        path = _write(tmp_path, "a.tree.yaml", """
file: a.cpp
callables:
  - {name: g, exception_spec: noexcept}
nodes:
  - kind: compound
    children:
      - {kind: call, callee: g, line: 2}
""")
        unit = load_unit(path)
        assert not unit.facts.may_propagate("g")
        assert [n.kind for n in unit.tree.preorder()] == [
            NodeKind.COMPOUND, NodeKind.EXPR_STMT, NodeKind.CALL,
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(TreeDocumentError, match="cannot read"):
            load_unit(tmp_path / "absent.tree.json")

    def test_malformed_json(self, tmp_path):
        path = _write(tmp_path, "bad.tree.json", "{not json")
        with pytest.raises(TreeDocumentError, match="cannot parse"):
            load_unit(path)

    def test_malformed_yaml(self, tmp_path):
        path = _write(tmp_path, "bad.tree.yaml", "nodes: [unclosed")
        with pytest.raises(TreeDocumentError, match="cannot parse"):
            load_unit(path)

    def test_unknown_frontend(self, tmp_path):
        path = _write(tmp_path, "a.tree.json", "{}")
        with pytest.raises(TreeDocumentError, match="unknown frontend"):
            load_unit(path, frontend="gcc")

    def test_auto_detects_clang(self, tmp_path):
        path = _write(tmp_path, "a.ast.json", json.dumps({
            "id": "0x1", "kind": "TranslationUnitDecl", "inner": [],
        }))
        unit = load_unit(path)
        assert len(unit.tree) == 0


# ── Tree building ─────────────────────────────────────────────────────────


class TestBuildUnit:
    def test_bare_call_in_compound_is_wrapped(self):
        unit = _unit([{"kind": "compound", "children": [
            {"kind": "call", "callee": "f", "line": 4, "column": 3,
             "annotations": ["maybe_unhandled"]},
        ]}])
        stmt = unit.tree.get(1)
        call = unit.tree.get(2)
        assert stmt.kind == NodeKind.EXPR_STMT
        assert stmt.annotations == ("maybe_unhandled",)
        assert (stmt.line, stmt.column) == (4, 3)
        assert call.kind == NodeKind.CALL
        assert call.annotations == ()
        assert call.parent == stmt.id

    def test_body_expression_is_wrapped_and_keeps_role(self):
        unit = _unit([{"kind": "while", "children": [
            {"kind": "call", "callee": "c", "role": "condition"},
            {"kind": "call", "callee": "b", "role": "body"},
        ]}])
        kinds_roles = [(n.kind, n.role) for n in unit.tree.children_of(0)]
        assert kinds_roles == [
            (NodeKind.CALL, Role.CONDITION),
            (NodeKind.EXPR_STMT, Role.BODY),
        ]

    def test_expression_under_expression_not_wrapped(self):
        unit = _unit([{"kind": "expr_stmt", "children": [
            {"kind": "expr", "children": [{"kind": "call", "callee": "f"}]},
        ]}])
        assert [n.kind for n in unit.tree.preorder()] == [
            NodeKind.EXPR_STMT, NodeKind.EXPR, NodeKind.CALL,
        ]

    def test_decl_stmt_annotation_moves_to_declarations(self):
        unit = _unit([{"kind": "decl_stmt", "annotations": ["maybe_unhandled"], "children": [
            {"kind": "var_decl", "name": "a"},
            {"kind": "var_decl", "name": "b"},
        ]}])
        decl_stmt, a, b = unit.tree.preorder()
        assert decl_stmt.annotations == ()
        assert a.annotations == ("maybe_unhandled",)
        assert b.annotations == ("maybe_unhandled",)

    def test_node_file_overrides_document_file(self):
        unit = _unit([{"kind": "stmt"}, {"kind": "stmt", "file": "inc.h"}], file="main.cpp")
        assert [n.file for n in unit.tree.preorder()] == ["main.cpp", "inc.h"]

    def test_callable_spec_derivation(self):
        unit = _unit([], callables=[
            {"name": "a"},
            {"name": "b", "exception_spec": "throw()"},
            {"name": "c", "exception_spec": "noexcept(false)"},
            {"name": "d", "non_throwing": True},
            {"name": "e", "extern_linkage": True},
        ])
        assert [unit.facts.may_propagate(n) for n in "abcde"] == [True, False, True, False, False]
