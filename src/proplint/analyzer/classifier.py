"""Throw-potential classifier.

A node can propagate when some expression reachable from it calls a callable
that may propagate. Reachability never crosses into:
  - declarations (classified on their own)
  - throw statements (exempt, their propagation is already visible)
  - bodies of control statements (separate statements with their own outcome),
    unless an enclosing marked block covers the control statement
  - nested statements carrying their own mark (the innermost mark accounts for them)
"""

from __future__ import annotations

import logging

from proplint.ir.facts import CallableFacts
from proplint.ir.nodes import (
    CALL_KINDS,
    CONTROL_KINDS,
    CONTROLLING_ROLES,
    NodeKind,
    SyntaxNode,
)
from proplint.ir.tree import SyntaxTree

log = logging.getLogger(__name__)


def expression_throws(node: SyntaxNode, facts: CallableFacts) -> bool:
    """Call/construct rule: the callee is known, not non-throwing, not extern linkage."""
    return node.kind in CALL_KINDS and facts.may_propagate(node.callee)


def classify(
    tree: SyntaxTree,
    facts: CallableFacts,
    marked: list[bool],
    covered: list[bool] | None = None,
) -> list[bool]:
    """can_propagate for every node, indexed by arena id.

    One bottom-up pass: each node records both its own classification and
    whether that classification flows into its parent. A covered control
    statement also passes its body up, since the enclosing mark accounts for
    the body too.
    """
    covered = covered or [False] * len(tree)
    can_propagate = [False] * len(tree)
    contributes = [False] * len(tree)

    for node in tree.postorder():
        if node.kind == NodeKind.THROW:
            continue

        children = tree.children_of(node.id)
        if node.kind in CONTROL_KINDS:
            clauses = [c for c in children if c.role in CONTROLLING_ROLES]
        else:
            clauses = children

        own = any(contributes[c.id] for c in clauses)
        if not own and expression_throws(node, facts):
            own = True
            log.debug("Node %d calls %r which may propagate", node.id, node.callee)

        can_propagate[node.id] = own
        if node.is_declaration:
            continue
        if node.is_statement and marked[node.id]:
            continue
        if node.kind in CONTROL_KINDS and covered[node.id]:
            own = own or any(contributes[c.id] for c in children)
        contributes[node.id] = own

    return can_propagate
