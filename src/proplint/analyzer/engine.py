"""
proplint engine: runs the check over one translation unit.

Usage:
    from proplint.analyzer.engine import check_unit
    from proplint.config import CheckConfig
    from proplint.ir import load_unit

    report = check_unit(load_unit(Path("main.tree.yaml")), CheckConfig())

    # report.diagnostics: list[Diagnostic], source-ordered

The passes run in a fixed order, each filling one column of the side table:
    1. locate   : is_marked per node          (preorder, own annotations only)
    2. resolve  : is_covered per node         (preorder, needs marks)
    3. classify : can_propagate per node      (bottom-up, needs marks and coverage)
then the reconciler turns the table into outcomes and diagnostics.
"""

from __future__ import annotations

import logging
from typing import Callable

from proplint.analyzer.classifier import classify
from proplint.analyzer.locator import locate_marks
from proplint.analyzer.models import CheckReport, Outcome
from proplint.analyzer.reconciler import reconcile
from proplint.analyzer.suppression import resolve_coverage
from proplint.analyzer.table import AnalysisTable
from proplint.config import CheckConfig
from proplint.ir.frontend import TranslationUnit

log = logging.getLogger(__name__)


def _locate(table: AnalysisTable, unit: TranslationUnit, config: CheckConfig) -> None:
    table.marked = locate_marks(unit.tree, config.marker)


def _resolve(table: AnalysisTable, unit: TranslationUnit, config: CheckConfig) -> None:
    table.covered = resolve_coverage(unit.tree, table.marked)


def _classify(table: AnalysisTable, unit: TranslationUnit, config: CheckConfig) -> None:
    table.can_propagate = classify(unit.tree, unit.facts, table.marked, table.covered)


PASSES: tuple[Callable[[AnalysisTable, TranslationUnit, CheckConfig], None], ...] = (
    _locate,
    _resolve,
    _classify,
)


def build_table(unit: TranslationUnit, config: CheckConfig) -> AnalysisTable:
    table = AnalysisTable(tree=unit.tree)
    for run_pass in PASSES:
        run_pass(table, unit, config)
    return table


def check_unit(unit: TranslationUnit, config: CheckConfig | None = None) -> CheckReport:
    """Check one translation unit and return its report."""
    config = config or CheckConfig()
    table = build_table(unit, config)
    outcomes, diagnostics = reconcile(
        table, marker=config.marker, check_name=config.check_name,
    )

    report = CheckReport(
        file=unit.source_file,
        document=str(unit.document) if unit.document else "",
        nodes_checked=len(outcomes),
        marked_ok=sum(1 for o in outcomes.values() if o == Outcome.CORRECTLY_MARKED),
        diagnostics=diagnostics,
    )
    log.info(
        "Checked %s: %d nodes, %d missing marks, %d bad marks",
        report.file or "<unnamed>", report.nodes_checked,
        report.missing_mark_count, report.bad_mark_count,
    )
    return report
