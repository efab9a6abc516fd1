"""Pydantic models for check results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class Outcome(str, Enum):
    CORRECTLY_MARKED = "correctly_marked"
    BAD_MARK = "bad_mark"
    MISSING_MARK = "missing_mark"
    CORRECTLY_UNMARKED = "correctly_unmarked"


class DiagnosticKind(str, Enum):
    DECL_BAD_MARK = "decl-bad-mark"
    DECL_MISSING_MARK = "decl-missing-mark"
    STMT_BAD_MARK = "stmt-bad-mark"
    STMT_MISSING_MARK = "stmt-missing-mark"

    @property
    def is_bad_mark(self) -> bool:
        return self in (DiagnosticKind.DECL_BAD_MARK, DiagnosticKind.STMT_BAD_MARK)


class Diagnostic(BaseModel):
    kind: DiagnosticKind
    message: str
    file: str
    line: int
    column: int = 0
    node_id: int                 # arena id within its translation unit
    node_kind: str               # "var_decl", "if", "expr_stmt", ...
    name: str = ""               # declared name, for declarations
    snippet: str = ""
    check: str = ""              # check name shown in text output


class FileFailure(BaseModel):
    file: str
    error: str


class CheckReport(BaseModel):
    """Diagnostics for one translation unit."""
    file: str
    document: str = ""
    nodes_checked: int = 0       # declarations + statements reconciled
    marked_ok: int = 0
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @computed_field
    @property
    def bad_mark_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.kind.is_bad_mark)

    @computed_field
    @property
    def missing_mark_count(self) -> int:
        return sum(1 for d in self.diagnostics if not d.kind.is_bad_mark)

    @computed_field
    @property
    def clean(self) -> bool:
        return not self.diagnostics
