"""Unified scanner: discovers tree documents, checks each, collects the results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from proplint.analyzer.engine import check_unit
from proplint.analyzer.models import CheckReport, Diagnostic, FileFailure
from proplint.config import CheckConfig
from proplint.ir.frontend import TranslationUnit, load_unit
from proplint.utils import discover_files, snippet

log = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Combined result over every document found under project_path."""
    project_path: Path
    config: CheckConfig
    reports: list[CheckReport] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        out = [d for r in self.reports for d in r.diagnostics]
        out.sort(key=lambda d: (d.file, d.line, d.column, d.node_id))
        return out

    @property
    def documents_scanned(self) -> int:
        return len(self.reports) + len(self.failures)


def scan(project_path: Path, config: CheckConfig | None = None) -> ScanResult:
    """Check one tree document, or every matching document below a directory.

    Per-document failures are logged and recorded; they never stop the scan.
    """
    config = config or CheckConfig()
    project_path = project_path.resolve()

    if project_path.is_dir():
        documents = discover_files(project_path, config.patterns)
    else:
        documents = [project_path]
    log.info("Scanning %d tree documents under %s", len(documents), project_path)

    result = ScanResult(project_path=project_path, config=config)
    for document in documents:
        try:
            unit = load_unit(document, config.frontend, config.main_file_only)
            report = check_unit(unit, config)
        except Exception as exc:
            log.exception("Check failed for %s", document)
            result.failures.append(FileFailure(file=str(document), error=str(exc)))
            continue
        _attach_snippets(report, unit)
        result.reports.append(report)

    log.info(
        "Scan complete: %d diagnostics in %d documents (%d failed)",
        len(result.diagnostics), len(result.reports), len(result.failures),
    )
    return result


def _attach_snippets(report: CheckReport, unit: TranslationUnit) -> None:
    """Fill Diagnostic.snippet from the source files, when they are on disk."""
    sources: dict[str, str | None] = {}
    for diag in report.diagnostics:
        if diag.file not in sources:
            sources[diag.file] = _read_source(diag.file, unit.document)
        text = sources[diag.file]
        if text is not None:
            diag.snippet = snippet(text, diag.line)


def _read_source(name: str, document: Path | None) -> str | None:
    if not name:
        return None
    path = Path(name)
    if not path.is_absolute() and document is not None:
        path = document.parent / path
    try:
        return path.read_text(errors="replace")
    except OSError:
        log.debug("Source %s not available for snippets", path)
        return None
