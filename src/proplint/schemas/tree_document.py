"""Pydantic model for native tree documents (*.tree.json / *.tree.yaml)."""

from __future__ import annotations

from pydantic import BaseModel, Field

from proplint.ir.nodes import NodeKind, Role


class CallableDoc(BaseModel):
    name: str
    non_throwing: bool | None = None     # derived from exception_spec when omitted
    extern_linkage: bool = False
    exception_spec: str | None = None    # e.g. "noexcept", "throw()", "noexcept(false)"


class NodeDoc(BaseModel):
    kind: NodeKind
    role: Role = Role.CHILD
    line: int = 0
    column: int = 0
    file: str | None = None              # defaults to the document's file
    name: str = ""
    callee: str | None = None
    annotations: list[str] = Field(default_factory=list)
    children: list[NodeDoc] = Field(default_factory=list)


class TreeDocument(BaseModel):
    file: str = ""                       # source file the tree was parsed from
    callables: list[CallableDoc] = Field(default_factory=list)
    nodes: list[NodeDoc] = Field(default_factory=list)


NodeDoc.model_rebuild()
