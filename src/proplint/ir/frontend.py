"""Load tree documents into a SyntaxTree + CallableFacts pair.

Two input shapes are accepted:
  1. Native tree documents (JSON or YAML, see schemas/tree_document.py)
  2. clang JSON AST dumps (via adapters/clang.py)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from proplint.ir.facts import CallableFacts, make_fact
from proplint.ir.nodes import (
    BODY_ROLES,
    DECLARATION_KINDS,
    EXPRESSION_KINDS,
    GROUPING_KINDS,
    NodeKind,
    Role,
)
from proplint.ir.tree import SyntaxTree
from proplint.schemas.tree_document import NodeDoc, TreeDocument

log = logging.getLogger(__name__)


class TreeDocumentError(ValueError):
    """A tree document could not be read or does not match its schema."""


@dataclass
class TranslationUnit:
    """One analyzable unit: the tree, the callee facts, and where it came from."""
    tree: SyntaxTree
    facts: CallableFacts
    source_file: str                 # file the tree describes
    document: Path | None = None     # file the tree was loaded from


def load_unit(path: Path, frontend: str = "auto", main_file_only: bool = True) -> TranslationUnit:
    """Read a document from disk and build its TranslationUnit.

    Args:
        path: JSON or YAML document.
        frontend: "native", "clang", or "auto" (clang dumps are recognised by
            their TranslationUnitDecl root).
        main_file_only: clang only; skip declarations from included files.
    """
    data = _read_data(path)
    if frontend == "auto":
        frontend = "clang" if _looks_like_clang(data) else "native"
    log.debug("Loading %s with the %s frontend", path, frontend)

    if frontend == "clang":
        from proplint.ir.adapters.clang import clang_to_document
        document = clang_to_document(data, main_file_only=main_file_only)
    elif frontend == "native":
        document = parse_document(data)
    else:
        raise TreeDocumentError(f"unknown frontend {frontend!r}")

    unit = build_unit(document)
    unit.document = path
    return unit


def parse_document(data: object) -> TreeDocument:
    """Validate a decoded native document."""
    if not isinstance(data, dict):
        raise TreeDocumentError("tree document must be a mapping at the top level")
    try:
        return TreeDocument.model_validate(data)
    except ValidationError as exc:
        raise TreeDocumentError(f"invalid tree document: {exc}") from exc


def build_unit(document: TreeDocument) -> TranslationUnit:
    """Build the arena tree and facts table from a validated document."""
    facts = CallableFacts([
        make_fact(
            c.name,
            non_throwing=c.non_throwing,
            extern_linkage=c.extern_linkage,
            exception_spec=c.exception_spec,
        )
        for c in document.callables
    ])

    tree = SyntaxTree(file=document.file)
    for node in document.nodes:
        _add(tree, node, parent=None, parent_kind=None)

    log.debug(
        "Built tree for %s: %d nodes, %d callables",
        document.file or "<unnamed>", len(tree), len(facts),
    )
    return TranslationUnit(tree=tree, facts=facts, source_file=document.file)


def _add(
    tree: SyntaxTree,
    doc: NodeDoc,
    parent: int | None,
    parent_kind: NodeKind | None,
    inherited: tuple[str, ...] = (),
) -> None:
    role = doc.role
    annotations = inherited + tuple(doc.annotations)

    # A bare expression in statement position becomes an expression statement;
    # annotations belong to the statement, not to the expression.
    if doc.kind in EXPRESSION_KINDS and _statement_position(parent_kind, role):
        wrapper = tree.add_node(
            NodeKind.EXPR_STMT,
            parent=parent, role=role,
            line=doc.line, column=doc.column, file=doc.file,
            annotations=annotations,
        )
        parent, parent_kind, role, annotations = wrapper.id, NodeKind.EXPR_STMT, Role.CHILD, ()

    # `[[m]] int a = f(), b;` marks the declarations, not the declaration statement.
    pushed: tuple[str, ...] = ()
    if doc.kind == NodeKind.DECL_STMT:
        pushed, annotations = annotations, ()

    node = tree.add_node(
        doc.kind,
        parent=parent, role=role,
        line=doc.line, column=doc.column, file=doc.file,
        name=doc.name, callee=doc.callee,
        annotations=annotations,
    )
    for child in doc.children:
        _add(tree, child, parent=node.id, parent_kind=doc.kind,
             inherited=pushed if child.kind in DECLARATION_KINDS else ())


def _statement_position(parent_kind: NodeKind | None, role: Role) -> bool:
    if parent_kind is None:
        return True
    return parent_kind in GROUPING_KINDS or role in BODY_ROLES


def _read_data(path: Path) -> object:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise TreeDocumentError(f"cannot read {path}: {exc}") from exc

    try:
        if path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TreeDocumentError(f"cannot parse {path}: {exc}") from exc


def _looks_like_clang(data: object) -> bool:
    return isinstance(data, dict) and data.get("kind") == "TranslationUnitDecl"
