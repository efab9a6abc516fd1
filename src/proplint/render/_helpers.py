"""Shared helpers for render backends (text, markdown, PDF)."""

from __future__ import annotations

import os

from proplint.analyzer.models import Diagnostic, DiagnosticKind
from proplint.scanner import ScanResult

_KIND_LABELS = {
    DiagnosticKind.DECL_BAD_MARK: "Declaration marked, cannot propagate",
    DiagnosticKind.DECL_MISSING_MARK: "Declaration may propagate, unmarked",
    DiagnosticKind.STMT_BAD_MARK: "Statement marked, cannot propagate",
    DiagnosticKind.STMT_MISSING_MARK: "Statement may propagate, unmarked",
}


def kind_label(kind: DiagnosticKind) -> str:
    return _KIND_LABELS.get(kind, kind.value)


def location(diag: Diagnostic, base: str | None = None) -> str:
    """file:line:col, with file relative to base when it lies below it."""
    file = diag.file or "<unknown>"
    if base and os.path.isabs(file):
        try:
            rel = os.path.relpath(file, base)
        except ValueError:
            rel = file
        if not rel.startswith(".."):
            file = rel
    return f"{file}:{diag.line}:{diag.column}"


def summary_counts(result: ScanResult) -> dict[str, int]:
    diags = result.diagnostics
    return {
        "documents": len(result.reports),
        "failed": len(result.failures),
        "nodes_checked": sum(r.nodes_checked for r in result.reports),
        "marked_ok": sum(r.marked_ok for r in result.reports),
        "missing_marks": sum(1 for d in diags if not d.kind.is_bad_mark),
        "bad_marks": sum(1 for d in diags if d.kind.is_bad_mark),
    }


def verdict(result: ScanResult) -> str:
    """One of 'clean', 'findings', 'error' (no document was checked)."""
    if result.diagnostics:
        return "findings"
    if not result.reports:
        return "error"
    return "clean"


# Unicode -> ASCII substitutions for PDF core fonts (latin-1 only).
_UNICODE_SUBS = str.maketrans({
    "\u2014": "--",   # em dash
    "\u2013": "-",    # en dash
    "\u2018": "'",    # left single quote
    "\u2019": "'",    # right single quote
    "\u201c": '"',    # left double quote
    "\u201d": '"',    # right double quote
    "\u2026": "...",  # ellipsis
    "\u2192": "->",   # right arrow
    "\u00a0": " ",    # non-breaking space
})


def latin1(text: str) -> str:
    """Sanitize text for latin-1 PDF core fonts."""
    result = text.translate(_UNICODE_SUBS)
    return result.encode("latin-1", errors="replace").decode("latin-1")
