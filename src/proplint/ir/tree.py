"""SyntaxTree: an arena of SyntaxNodes with parent/child edges."""

from __future__ import annotations

from typing import Callable, Iterator

from proplint.ir.nodes import NodeKind, Role, SyntaxNode


class SyntaxTree:
    """Read-only view over one translation unit once built.

    Node ids are arena indices handed out in preorder, so every parent has a
    smaller id than its descendants.
    """

    def __init__(self, file: str = "") -> None:
        self.file = file
        self._nodes: list[SyntaxNode] = []
        self._roots: list[int] = []

    def add_node(
        self,
        kind: NodeKind,
        *,
        parent: int | None = None,
        role: Role = Role.CHILD,
        line: int = 0,
        column: int = 0,
        file: str | None = None,
        name: str = "",
        callee: str | None = None,
        annotations: tuple[str, ...] = (),
    ) -> SyntaxNode:
        """Append a node; children must be added after their parent."""
        if parent is not None and not 0 <= parent < len(self._nodes):
            raise IndexError(f"unknown parent id {parent}")
        node = SyntaxNode(
            id=len(self._nodes),
            kind=kind,
            file=file if file is not None else self.file,
            line=line,
            column=column,
            role=role,
            parent=parent,
            name=name,
            callee=callee,
            annotations=tuple(annotations),
        )
        self._nodes.append(node)
        if parent is None:
            self._roots.append(node.id)
        else:
            self._nodes[parent].children.append(node.id)
        return node

    def get(self, node_id: int) -> SyntaxNode:
        return self._nodes[node_id]

    def parent_of(self, node_id: int) -> SyntaxNode | None:
        parent = self._nodes[node_id].parent
        return None if parent is None else self._nodes[parent]

    def children_of(self, node_id: int) -> list[SyntaxNode]:
        return [self._nodes[c] for c in self._nodes[node_id].children]

    def ancestors(self, node_id: int) -> Iterator[SyntaxNode]:
        """Yield ancestors from the nearest outwards."""
        parent = self._nodes[node_id].parent
        while parent is not None:
            node = self._nodes[parent]
            yield node
            parent = node.parent

    def roots(self) -> list[SyntaxNode]:
        return [self._nodes[r] for r in self._roots]

    def preorder(self) -> list[SyntaxNode]:
        """All nodes, parents before children (arena order)."""
        return list(self._nodes)

    def postorder(self) -> list[SyntaxNode]:
        """All nodes, children before parents (reverse arena order)."""
        return list(reversed(self._nodes))

    def nodes_matching(self, pred: Callable[[SyntaxNode], bool]) -> list[SyntaxNode]:
        return [n for n in self._nodes if pred(n)]

    def __len__(self) -> int:
        return len(self._nodes)
