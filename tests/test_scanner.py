"""Tests for document discovery and the scan loop."""

from __future__ import annotations

import json
from pathlib import Path

from proplint.config import CheckConfig
from proplint.scanner import scan
from proplint.utils import discover_files, snippet


def _write(tmpdir: Path, name: str, content: str) -> Path:
    p = tmpdir / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p


def _doc(callee: str = "f", marked: bool = False, file: str = "a.cpp") -> str:
    return json.dumps({
        "file": file,
        "callables": [{"name": "f"}, {"name": "g", "exception_spec": "noexcept"}],
        "nodes": [{"kind": "decl_stmt", "line": 2, "column": 5,
                   "annotations": ["maybe_unhandled"] if marked else [],
                   "children": [{"kind": "var_decl", "name": "x", "line": 2, "column": 9,
                                 "children": [{"kind": "call", "callee": callee, "line": 2}]}]}],
    })


def test_snippet():
    assert snippet("a\n   b = 1  \nc", 2) == "b = 1"
    assert snippet("a", 5) == ""
    assert snippet("a", 0) == ""


class TestDiscovery:
    def test_patterns_and_order(self, tmp_path):
        _write(tmp_path, "b.tree.json", "{}")
        _write(tmp_path, "sub/a.tree.yaml", "")
        _write(tmp_path, "c.ast.json", "{}")
        _write(tmp_path, "notes.json", "{}")
        found = [p.relative_to(tmp_path).as_posix()
                 for p in discover_files(tmp_path, CheckConfig().patterns)]
        assert found == ["b.tree.json", "c.ast.json", "sub/a.tree.yaml"]

    def test_skip_dirs(self, tmp_path):
        _write(tmp_path, "build/x.tree.json", "{}")
        _write(tmp_path, ".git/y.tree.json", "{}")
        _write(tmp_path, "src/z.tree.json", "{}")
        found = [p.name for p in discover_files(tmp_path, ["*.tree.json"])]
        assert found == ["z.tree.json"]


class TestScan:
    def test_directory(self, tmp_path):
        _write(tmp_path, "one.tree.json", _doc("f"))
        _write(tmp_path, "two.tree.json", _doc("g", file="b.cpp"))
        result = scan(tmp_path)
        assert result.documents_scanned == 2
        assert [d.kind.value for d in result.diagnostics] == ["decl-missing-mark"]
        assert result.failures == []

    def test_single_file(self, tmp_path):
        path = _write(tmp_path, "one.tree.json", _doc("g", marked=True))
        result = scan(path)
        assert [d.kind.value for d in result.diagnostics] == ["decl-bad-mark"]

    def test_failure_does_not_stop_scan(self, tmp_path, caplog):
        _write(tmp_path, "bad.tree.json", "{broken")
        _write(tmp_path, "good.tree.json", _doc("f"))
        result = scan(tmp_path)
        assert len(result.reports) == 1
        assert len(result.failures) == 1
        assert result.failures[0].file.endswith("bad.tree.json")
        assert "cannot parse" in result.failures[0].error
        assert "Check failed" in caplog.text

    def test_schema_failure_recorded(self, tmp_path):
        _write(tmp_path, "odd.tree.json", json.dumps({"nodes": [{"kind": "goto_label"}]}))
        result = scan(tmp_path)
        assert result.reports == []
        assert "invalid tree document" in result.failures[0].error

    def test_snippets_from_source(self, tmp_path):
        _write(tmp_path, "src/a.cpp", "int f();\n    int x = f();\n")
        _write(tmp_path, "src/a.tree.json", _doc("f"))
        (diag,) = scan(tmp_path).diagnostics
        assert diag.snippet == "int x = f();"

    def test_missing_source_leaves_snippet_empty(self, tmp_path):
        _write(tmp_path, "a.tree.json", _doc("f", file="elsewhere.cpp"))
        (diag,) = scan(tmp_path).diagnostics
        assert diag.snippet == ""

    def test_config_patterns(self, tmp_path):
        _write(tmp_path, "one.tree.json", _doc("f"))
        _write(tmp_path, "two.custom", _doc("f"))
        result = scan(tmp_path, CheckConfig(patterns=["*.custom"], frontend="native"))
        assert [Path(r.document).name for r in result.reports] == ["two.custom"]
