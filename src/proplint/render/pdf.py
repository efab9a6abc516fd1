"""Render scan results as a PDF report.

Each diagnostic is laid out as a block (badge and location, then the full
message and the source snippet) rather than as a fixed-width table row.
Install via: pip install proplint[pdf]
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from proplint.analyzer.reconciler import marker_spelling
from proplint.render._helpers import kind_label, latin1, location, summary_counts, verdict
from proplint.scanner import ScanResult

# ── Palette: (text_rgb, fill_rgb) ─────────────────────────────────────────

_PILLS = {
    "missing":  ((194, 80, 0), (255, 237, 213)),
    "bad":      ((161, 120, 0), (254, 249, 195)),
    "findings": ((194, 80, 0), (255, 237, 213)),
    "error":    ((185, 28, 28), (254, 226, 226)),
    "clean":    ((22, 101, 52), (220, 252, 231)),
}

_INK = (30, 30, 30)
_GREY = (100, 100, 100)
_RULE = (200, 200, 200)


def render_pdf(result: ScanResult, output_path: Path) -> None:
    """Render the scan result to a PDF file."""
    try:
        from fpdf import FPDF
        from fpdf.enums import XPos, YPos
    except ImportError as exc:
        raise ImportError(
            "PDF output requires 'fpdf2'. "
            "Install it with: pip install proplint[pdf]"
        ) from exc

    title = latin1(f"{result.project_path.name} -- Propagation Report")
    today = date.today().isoformat()

    class _Report(FPDF):
        def header(self):
            if self.page_no() == 1:
                return
            self.set_font("Helvetica", "B", 8)
            self.set_text_color(*_GREY)
            self.cell(self.epw / 2, 5, title)
            self.set_font("Helvetica", "", 8)
            self.cell(self.epw / 2, 5, today, align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_draw_color(*_RULE)
            self.line(self.l_margin, self.get_y() + 1, self.w - self.r_margin, self.get_y() + 1)
            self.ln(5)

        def footer(self):
            self.set_y(-15)
            self.set_font("Helvetica", "", 7.5)
            self.set_text_color(*_GREY)
            self.cell(0, 5, f"Page {self.page_no()}", align="R")

    pdf = _Report()
    pdf.set_margins(15, 20, 15)
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    writer = _Writer(pdf, XPos.LMARGIN, YPos.NEXT, today)
    writer.title(result.project_path.name)
    writer.summary(result)
    writer.diagnostics(result)
    writer.failures(result)
    pdf.output(str(output_path))


class _Writer:
    """Lays out report sections on an fpdf2 document."""

    def __init__(self, pdf, lmargin, next_line, today: str):
        self.pdf = pdf
        self._newline = {"new_x": lmargin, "new_y": next_line}
        self._today = today

    def _text(self, text: str, size: float = 9, style: str = "", color=_INK,
              h: float = 4.5, family: str = "Helvetica") -> None:
        self.pdf.set_font(family, style, size)
        self.pdf.set_text_color(*color)
        self.pdf.multi_cell(0, h, latin1(str(text)), **self._newline)

    def _room(self, needed: float) -> None:
        if self.pdf.will_page_break(needed):
            self.pdf.add_page()

    def _pill(self, key: str) -> None:
        fg, bg = _PILLS[key]
        label = key.upper()
        self.pdf.set_font("Helvetica", "B", 7)
        self.pdf.set_fill_color(*bg)
        self.pdf.set_text_color(*fg)
        self.pdf.cell(self.pdf.get_string_width(label) + 4, 4.5, label, align="C", fill=True)
        self.pdf.set_x(self.pdf.get_x() + 2)

    def _section(self, name: str) -> None:
        self._room(20)
        self.pdf.ln(8)
        self._text(name, size=14, style="B", h=7)
        self.pdf.ln(2)

    def title(self, name: str) -> None:
        self.pdf.ln(10)
        self._text(name, size=20, style="B", h=10)
        self._text("Visible Exception Propagation Audit", size=10, color=_GREY, h=6)
        self._text(self._today, size=10, color=_GREY, h=6)
        y = self.pdf.get_y() + 6
        self.pdf.set_draw_color(*_RULE)
        self.pdf.line(self.pdf.l_margin, y, self.pdf.w - self.pdf.r_margin, y)
        self.pdf.set_y(y + 4)

    def summary(self, result: ScanResult) -> None:
        counts = summary_counts(result)
        self._section("Summary")
        self._pill(verdict(result))
        self.pdf.ln(8)
        rows = [
            ("Marker", marker_spelling(result.config.marker)),
            ("Documents checked", counts["documents"]),
            ("Nodes reconciled", counts["nodes_checked"]),
            ("Correct marks", counts["marked_ok"]),
            ("Missing marks", counts["missing_marks"]),
            ("Bad marks", counts["bad_marks"]),
        ]
        for key, value in rows:
            self._text(f"{key}: {value}")

    def diagnostics(self, result: ScanResult) -> None:
        if not result.diagnostics:
            return
        base = str(result.project_path) if result.project_path.is_dir() else str(result.project_path.parent)
        self._section("Diagnostics")
        for d in result.diagnostics:
            self._room(16)
            self._pill("bad" if d.kind.is_bad_mark else "missing")
            self._text(f"{location(d, base)}  {kind_label(d.kind)} ({d.node_kind})", style="B")
            self._text(d.message)
            if d.snippet:
                self._text(d.snippet.strip(), size=8, color=_GREY, h=4, family="Courier")
            self.pdf.ln(2)

    def failures(self, result: ScanResult) -> None:
        if not result.failures:
            return
        self._section("Documents That Could Not Be Checked")
        for f in result.failures:
            self._text(f"{Path(f.file).name}: {f.error}")
