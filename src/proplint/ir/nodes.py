"""SyntaxNode dataclass and the closed set of node kinds and roles: pure data, no logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    # ── Declarations ─────────────────────────────────────────────────────
    VAR_DECL = "var_decl"
    DECL = "decl"              # function, typedef, ... (never throwing)

    # ── Statements ───────────────────────────────────────────────────────
    COMPOUND = "compound"      # { ... }, try/catch blocks
    LABELED = "labeled"        # case/default/goto labels
    DECL_STMT = "decl_stmt"
    EXPR_STMT = "expr_stmt"
    RETURN = "return"
    THROW = "throw"
    IF = "if"
    WHILE = "while"
    DO = "do"
    FOR = "for"
    RANGE_FOR = "range_for"
    SWITCH = "switch"
    STMT = "stmt"              # break, continue, null, goto

    # ── Expressions ──────────────────────────────────────────────────────
    CALL = "call"
    CONSTRUCT = "construct"
    EXPR = "expr"


class Role(str, Enum):
    """Position a node occupies inside its parent."""
    CHILD = "child"
    CONDITION = "condition"
    INIT = "init"
    INCREMENT = "increment"
    RANGE = "range"
    BODY = "body"
    THEN = "then"
    ELSE = "else"


DECLARATION_KINDS = frozenset({NodeKind.VAR_DECL, NodeKind.DECL})
GROUPING_KINDS = frozenset({NodeKind.COMPOUND, NodeKind.LABELED})
CONTROL_KINDS = frozenset({
    NodeKind.IF, NodeKind.WHILE, NodeKind.DO,
    NodeKind.FOR, NodeKind.RANGE_FOR, NodeKind.SWITCH,
})
CALL_KINDS = frozenset({NodeKind.CALL, NodeKind.CONSTRUCT})
EXPRESSION_KINDS = CALL_KINDS | {NodeKind.EXPR}
STATEMENT_KINDS = frozenset(NodeKind) - DECLARATION_KINDS - EXPRESSION_KINDS

CONTROLLING_ROLES = frozenset({Role.CONDITION, Role.INIT, Role.INCREMENT, Role.RANGE})
BODY_ROLES = frozenset({Role.BODY, Role.THEN, Role.ELSE})


@dataclass
class SyntaxNode:
    id: int                              # arena index, assigned in preorder
    kind: NodeKind
    file: str
    line: int
    column: int = 0
    role: Role = Role.CHILD
    parent: int | None = None
    name: str = ""                       # declared name, for reports
    callee: str | None = None            # for "call"/"construct" nodes
    annotations: tuple[str, ...] = ()
    children: list[int] = field(default_factory=list)

    @property
    def is_declaration(self) -> bool:
        return self.kind in DECLARATION_KINDS

    @property
    def is_statement(self) -> bool:
        return self.kind in STATEMENT_KINDS

    @property
    def is_expression(self) -> bool:
        return self.kind in EXPRESSION_KINDS
