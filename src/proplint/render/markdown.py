"""Render scan results as a Markdown report."""

from __future__ import annotations

from collections import defaultdict

from proplint.analyzer.models import Diagnostic
from proplint.analyzer.reconciler import marker_spelling
from proplint.render._helpers import kind_label, location, summary_counts, verdict
from proplint.scanner import ScanResult

_VERDICT_BADGES = {
    "clean": "**CLEAN** -- every propagation site is annotated",
    "findings": "**FINDINGS** -- annotations and propagation disagree",
    "error": "**ERROR** -- no document could be checked",
}


def render_markdown(result: ScanResult) -> str:
    """Produce a full Markdown report from a ScanResult."""
    sections: list[str] = []
    counts = summary_counts(result)
    base = str(result.project_path) if result.project_path.is_dir() else str(result.project_path.parent)

    # ── Title ────────────────────────────────────────────────────────────
    sections.append(f"# Exception Propagation Report: {result.project_path.name}\n")

    # ── Summary ──────────────────────────────────────────────────────────
    sections.append("\n".join([
        f"- **Path**: `{result.project_path}`",
        f"- **Marker**: `{marker_spelling(result.config.marker)}`",
        f"- **Documents checked**: {counts['documents']}",
        f"- **Nodes reconciled**: {counts['nodes_checked']}",
        f"- **Correct marks**: {counts['marked_ok']}",
        f"- **Missing marks**: {counts['missing_marks']}",
        f"- **Bad marks**: {counts['bad_marks']}",
        f"- **Verdict**: {_VERDICT_BADGES[verdict(result)]}",
    ]) + "\n")

    # ── Diagnostics, grouped by file ─────────────────────────────────────
    by_file: dict[str, list[Diagnostic]] = defaultdict(list)
    for d in result.diagnostics:
        by_file[d.file].append(d)

    if by_file:
        sections.append("## Diagnostics\n")
        for file, diags in by_file.items():
            sections.append(f"### `{file or '<unknown>'}`\n")
            sections.append("| Location | Kind | Node | Message |")
            sections.append("|---|---|---|---|")
            rows = []
            for d in diags:
                node = f"{d.node_kind} `{d.name}`" if d.name else d.node_kind
                rows.append(
                    f"| `{location(d, base)}` | {kind_label(d.kind)} | {node} | {d.message} |"
                )
            sections.append("\n".join(rows) + "\n")

            snippets = [d for d in diags if d.snippet]
            for d in snippets:
                sections.append(f"`{d.line}`: `{d.snippet}`")
            if snippets:
                sections.append("")

    # ── Failures ─────────────────────────────────────────────────────────
    if result.failures:
        sections.append("## Documents That Could Not Be Checked\n")
        for f in result.failures:
            sections.append(f"- `{f.file}`: {f.error}")
        sections.append("")

    return "\n".join(sections)
