"""Mismatch reconciler: one outcome per subject node, diagnostics for the mismatches."""

from __future__ import annotations

import logging

from proplint.analyzer.models import Diagnostic, DiagnosticKind, Outcome
from proplint.analyzer.suppression import is_subject
from proplint.analyzer.table import AnalysisTable
from proplint.ir.nodes import SyntaxNode

log = logging.getLogger(__name__)

_MESSAGES: dict[DiagnosticKind, str] = {
    DiagnosticKind.DECL_BAD_MARK: "declaration cannot propagate an exception; remove '{marker}'",
    DiagnosticKind.DECL_MISSING_MARK: "declaration may propagate an exception; add '{marker}'",
    DiagnosticKind.STMT_BAD_MARK: "statement cannot propagate an exception; remove '{marker}'",
    DiagnosticKind.STMT_MISSING_MARK: "statement may propagate an exception; add '{marker}'",
}


def outcome_for(marked: bool, can_propagate: bool) -> Outcome:
    if marked and not can_propagate:
        return Outcome.BAD_MARK
    if can_propagate and not marked:
        return Outcome.MISSING_MARK
    if marked:
        return Outcome.CORRECTLY_MARKED
    return Outcome.CORRECTLY_UNMARKED


def marker_spelling(marker: str) -> str:
    """Bracket a marker for messages: maybe_unhandled -> [[maybe_unhandled]]."""
    marker = marker.strip()
    return marker if marker.startswith("[[") else f"[[{marker}]]"


def diagnostic_message(kind: DiagnosticKind, marker: str) -> str:
    return _MESSAGES[kind].format(marker=marker_spelling(marker))


def reconcile(
    table: AnalysisTable,
    *,
    marker: str,
    check_name: str = "",
) -> tuple[dict[int, Outcome], list[Diagnostic]]:
    """Outcome for every subject node plus the diagnostics, in source order."""
    outcomes: dict[int, Outcome] = {}
    diagnostics: list[Diagnostic] = []

    for node in table.tree.preorder():
        if not is_subject(node, table.marked, table.covered):
            continue
        outcome = outcome_for(table.is_marked(node.id), table.can_propagate_at(node.id))
        outcomes[node.id] = outcome

        kind = _diagnostic_kind(node, outcome)
        if kind is None:
            continue
        log.debug("%s on %s node %d (%s:%d)", kind.value, node.kind.value, node.id, node.file, node.line)
        diagnostics.append(Diagnostic(
            kind=kind,
            message=diagnostic_message(kind, marker),
            file=node.file,
            line=node.line,
            column=node.column,
            node_id=node.id,
            node_kind=node.kind.value,
            name=node.name,
            check=check_name,
        ))

    diagnostics.sort(key=lambda d: (d.file, d.line, d.column, d.node_id))
    return outcomes, diagnostics


def _diagnostic_kind(node: SyntaxNode, outcome: Outcome) -> DiagnosticKind | None:
    if outcome == Outcome.BAD_MARK:
        return DiagnosticKind.DECL_BAD_MARK if node.is_declaration else DiagnosticKind.STMT_BAD_MARK
    if outcome == Outcome.MISSING_MARK:
        return DiagnosticKind.DECL_MISSING_MARK if node.is_declaration else DiagnosticKind.STMT_MISSING_MARK
    return None
