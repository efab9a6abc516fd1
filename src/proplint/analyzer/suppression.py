"""Suppression resolver: which statements an enclosing node already accounts for.

Coverage is decided from the parent edge alone, walking the tree once in
preorder so each node sees its parent's final answer:

  - condition / init / increment / range clauses belong to their control
    statement and are never evaluated on their own
  - the body of a control statement is never covered by the control
    statement's own mark; it is covered only when an unmarked control
    statement is itself covered by an enclosing marked block
  - children of a grouping statement are covered when the grouping statement
    is marked or is itself covered
  - whatever sits below a leaf statement or an expression belongs to it
"""

from __future__ import annotations

from proplint.ir.nodes import (
    CONTROL_KINDS,
    CONTROLLING_ROLES,
    GROUPING_KINDS,
    NodeKind,
    SyntaxNode,
)
from proplint.ir.tree import SyntaxTree


def resolve_coverage(tree: SyntaxTree, marked: list[bool]) -> list[bool]:
    """is_covered for every node, indexed by arena id."""
    covered = [False] * len(tree)
    for node in tree.preorder():
        parent = tree.parent_of(node.id)
        if parent is not None:
            covered[node.id] = _covered_by_parent(node, parent, marked, covered)
    return covered


def _covered_by_parent(
    node: SyntaxNode,
    parent: SyntaxNode,
    marked: list[bool],
    covered: list[bool],
) -> bool:
    if parent.is_declaration:
        return False
    if parent.kind in CONTROL_KINDS:
        return node.role in CONTROLLING_ROLES or (covered[parent.id] and not marked[parent.id])
    if parent.kind in GROUPING_KINDS:
        return marked[parent.id] or covered[parent.id]
    return True


def is_subject(node: SyntaxNode, marked: list[bool], covered: list[bool]) -> bool:
    """Should this node get an outcome of its own?

    Every declaration does. A statement does unless it is a throw statement,
    a declaration statement (its declarations are the subjects), or an
    unmarked grouping / covered statement. A marked statement always does,
    so an explicit mark is never silently ignored.
    """
    if node.is_declaration:
        return True
    if not node.is_statement:
        return False
    if node.kind in (NodeKind.THROW, NodeKind.DECL_STMT):
        return False
    if marked[node.id]:
        return True
    return node.kind not in GROUPING_KINDS and not covered[node.id]
