"""Annotation locator: does a node carry the may-propagate marker itself?"""

from __future__ import annotations

from proplint.ir.nodes import SyntaxNode
from proplint.ir.tree import SyntaxTree


def normalize_marker(spelling: str) -> str:
    """Reduce "[[clang::maybe_unhandled]]" / "clang::maybe_unhandled" to "maybe_unhandled"."""
    text = spelling.strip()
    if text.startswith("[[") and text.endswith("]]"):
        text = text[2:-2].strip()
    text = text.rsplit("::", 1)[-1].strip()
    if text.startswith("__") and text.endswith("__") and len(text) > 4:
        text = text[2:-2]
    return text


def is_marked(node: SyntaxNode, marker: str) -> bool:
    """True iff the annotation is attached at this node's own position.

    Declarations and statements alike: a control statement is not marked by
    an annotation on its body, and vice versa.
    """
    if node.is_expression:
        return False
    wanted = normalize_marker(marker)
    return any(normalize_marker(a) == wanted for a in node.annotations)


def locate_marks(tree: SyntaxTree, marker: str) -> list[bool]:
    """is_marked for every node, indexed by arena id."""
    return [is_marked(node, marker) for node in tree.preorder()]
