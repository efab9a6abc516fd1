"""Per-node side table filled once per translation unit and queried in O(1)."""

from __future__ import annotations

from dataclasses import dataclass, field

from proplint.ir.tree import SyntaxTree


@dataclass
class AnalysisTable:
    tree: SyntaxTree
    marked: list[bool] = field(default_factory=list)
    covered: list[bool] = field(default_factory=list)
    can_propagate: list[bool] = field(default_factory=list)

    def is_marked(self, node_id: int) -> bool:
        return self.marked[node_id]

    def is_covered(self, node_id: int) -> bool:
        return self.covered[node_id]

    def can_propagate_at(self, node_id: int) -> bool:
        return self.can_propagate[node_id]
