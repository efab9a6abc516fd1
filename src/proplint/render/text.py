"""Render diagnostics as compiler-style text lines."""

from __future__ import annotations

from proplint.render._helpers import location, summary_counts
from proplint.scanner import ScanResult


def render_text(result: ScanResult) -> str:
    """`file:line:col: warning: message [check]`, one per diagnostic, plus a summary."""
    base = str(result.project_path) if result.project_path.is_dir() else str(result.project_path.parent)
    lines: list[str] = []
    for d in result.diagnostics:
        suffix = f" [{d.check}]" if d.check else ""
        lines.append(f"{location(d, base)}: warning: {d.message}{suffix}")
        if d.snippet:
            lines.append(f"    {d.snippet}")

    for f in result.failures:
        lines.append(f"{f.file}: error: {f.error}")

    counts = summary_counts(result)
    lines.append(
        f"{counts['missing_marks'] + counts['bad_marks']} diagnostics "
        f"({counts['missing_marks']} missing, {counts['bad_marks']} bad) "
        f"in {counts['documents']} documents"
        + (f", {counts['failed']} failed" if counts["failed"] else "")
    )
    return "\n".join(lines)
