"""clang adapter: turn a `clang -Xclang -ast-dump=json` dump into a TreeDocument.

Pass 0 walks the whole dump in print order, resolving locations (clang only
prints "file" and "line" when they change) and collecting callable facts from
every function-like declaration, headers included. Pass 1 maps the main
file's declarations and function bodies onto the closed node kinds.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from proplint.ir.nodes import NodeKind, Role
from proplint.schemas.tree_document import CallableDoc, NodeDoc, TreeDocument

log = logging.getLogger(__name__)

_FUNCTION_DECLS = frozenset({
    "FunctionDecl", "CXXMethodDecl", "CXXConstructorDecl",
    "CXXDestructorDecl", "CXXConversionDecl",
})

# Declarations whose members are walked for functions and variables
_CONTAINER_DECLS = frozenset({
    "TranslationUnitDecl", "NamespaceDecl", "LinkageSpecDecl",
    "CXXRecordDecl", "ExportDecl",
})

_TEMPLATE_DECLS = frozenset({"FunctionTemplateDecl", "ClassTemplateDecl"})

_CALL_EXPRS = frozenset({
    "CallExpr", "CXXMemberCallExpr", "CXXOperatorCallExpr", "UserDefinedLiteral",
})
_CONSTRUCT_EXPRS = frozenset({"CXXConstructExpr", "CXXTemporaryObjectExpr"})

# Wrappers looked through when resolving a callee reference
_CALLEE_WRAPPERS = frozenset({
    "ImplicitCastExpr", "ParenExpr", "MaterializeTemporaryExpr", "CXXBindTemporaryExpr",
})

_GROUPING_STMTS = frozenset({"CompoundStmt", "CXXTryStmt", "CXXCatchStmt"})
_LABEL_STMTS = frozenset({"CaseStmt", "DefaultStmt", "LabelStmt"})
_SIMPLE_STMTS = frozenset({
    "BreakStmt", "ContinueStmt", "NullStmt", "GotoStmt", "IndirectGotoStmt",
})

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class _Where:
    file: str
    line: int
    column: int
    included: bool


def clang_to_document(data: dict, main_file_only: bool = True) -> TreeDocument:
    """Convert a decoded clang JSON AST (TranslationUnitDecl root)."""
    return _ClangConverter(main_file_only).convert(data)


def attr_spelling(attr: dict) -> str:
    """Spelling for an attribute node: "MaybeUnhandledAttr" -> "maybe_unhandled".

    annotate("...") attributes use their annotation string when the dump has it.
    """
    for key in ("annotation", "spelling"):
        value = attr.get(key)
        if isinstance(value, str) and value:
            return value
    kind = attr.get("kind", "")
    if kind.endswith("Attr"):
        kind = kind[: -len("Attr")]
    return _CAMEL_RE.sub("_", kind).lower()


class _ClangConverter:
    def __init__(self, main_file_only: bool) -> None:
        self._main_file_only = main_file_only
        self._where: dict[int, _Where] = {}       # id(json node) -> location
        self._callables: dict[str, CallableDoc] = {}
        self._main_file = ""
        # Running location state (clang elides unchanged fields)
        self._file = ""
        self._line = 0
        self._included = False

    def convert(self, root: dict) -> TreeDocument:
        self._scan(root, extern_c=False)
        nodes: list[NodeDoc] = []
        self._convert_decl(root, nodes)
        log.debug(
            "clang adapter: %d top-level nodes, %d callables, main file %s",
            len(nodes), len(self._callables), self._main_file or "<unknown>",
        )
        return TreeDocument(
            file=self._main_file,
            callables=list(self._callables.values()),
            nodes=nodes,
        )

    # ── Pass 0: locations + facts ─────────────────────────────────────

    def _scan(self, node: dict, extern_c: bool) -> None:
        self._where[id(node)] = self._resolve(node)
        kind = node.get("kind")

        if kind == "LinkageSpecDecl" and node.get("language") == "C":
            extern_c = True
        if kind in _FUNCTION_DECLS and "id" in node:
            self._callables[node["id"]] = CallableDoc(
                name=node["id"],
                extern_linkage=extern_c,
                exception_spec=_qual_type(node.get("type")),
            )

        for child in node.get("inner", ()):
            if isinstance(child, dict):
                self._scan(child, extern_c)

    def _resolve(self, node: dict) -> _Where:
        where = None
        loc = node.get("loc")
        if loc:
            where = self._advance(loc)
        rng = node.get("range") or {}
        if rng.get("begin"):
            begin = self._advance(rng["begin"])
            if where is None:
                where = begin
        if rng.get("end"):
            self._advance(rng["end"])
        return where or _Where(self._file, self._line, 0, self._included)

    def _advance(self, loc: dict) -> _Where:
        if "spellingLoc" in loc or "expansionLoc" in loc:
            where = None
            if "spellingLoc" in loc:
                where = self._advance_bare(loc["spellingLoc"])
            if "expansionLoc" in loc:
                where = self._advance_bare(loc["expansionLoc"])
            return where
        return self._advance_bare(loc)

    def _advance_bare(self, bare: dict) -> _Where:
        if "file" in bare:
            self._file = bare["file"]
            self._included = "includedFrom" in bare
            if not self._included and not self._main_file:
                self._main_file = self._file
        if "line" in bare:
            self._line = bare["line"]
        return _Where(self._file, self._line, bare.get("col", 0), self._included)

    # ── Pass 1: declarations ──────────────────────────────────────────

    def _skip(self, node: dict) -> bool:
        if node.get("isImplicit"):
            return True
        where = self._where.get(id(node))
        return self._main_file_only and where is not None and where.included

    def _convert_decl(self, node: dict, out: list[NodeDoc]) -> None:
        kind = node.get("kind")
        if kind in _CONTAINER_DECLS:
            if kind != "TranslationUnitDecl" and self._skip(node):
                return
            for child in node.get("inner", ()):
                if isinstance(child, dict):
                    self._convert_decl(child, out)
        elif kind in _TEMPLATE_DECLS:
            # Only the pattern; instantiations would repeat every diagnostic.
            for child in node.get("inner", ()):
                if child.get("kind") in _FUNCTION_DECLS or child.get("kind") == "CXXRecordDecl":
                    self._convert_decl(child, out)
                    break
        elif kind in _FUNCTION_DECLS:
            if self._skip(node):
                return
            out.append(self._node(node, NodeKind.DECL, name=node.get("name", ""),
                                  annotations=self._attrs(node)))
            body = [c for c in node.get("inner", ())
                    if c.get("kind") in ("CompoundStmt", "CXXTryStmt")]
            if body:
                converted = self._convert(body[-1], Role.CHILD)
                if converted is not None:
                    out.append(converted)
        elif kind == "VarDecl":
            if not self._skip(node):
                out.append(self._var(node, Role.CHILD))

    def _var(self, node: dict, role: Role) -> NodeDoc:
        children = [
            c for c in (self._convert(x, Role.CHILD) for x in _non_attrs(node))
            if c is not None
        ]
        return self._node(
            node, NodeKind.VAR_DECL, role=role, name=node.get("name", ""),
            annotations=self._attrs(node), children=children,
        )

    # ── Pass 1: statements and expressions ────────────────────────────

    def _convert(self, node: dict, role: Role) -> NodeDoc | None:
        kind = node.get("kind")
        if not kind or kind.endswith("Attr"):
            return None

        if kind == "AttributedStmt":
            rest = _non_attrs(node)
            if not rest:
                return None
            sub = self._convert(rest[-1], role)
            if sub is None:
                return None
            where = self._where.get(id(node))
            sub.annotations = self._attrs(node) + sub.annotations
            if where is not None:
                sub.line, sub.column = where.line, where.column
            return sub

        if kind in _GROUPING_STMTS:
            return self._node(node, NodeKind.COMPOUND, role=role,
                              children=self._convert_all(_non_attrs(node)))
        if kind in _LABEL_STMTS:
            # Case values are constants; only the labelled statement matters.
            inner = _non_attrs(node)
            return self._node(node, NodeKind.LABELED, role=role,
                              children=self._convert_all(inner[-1:]))
        if kind == "DeclStmt":
            decls = [self._var(d, Role.CHILD) for d in node.get("inner", ())
                     if d.get("kind") == "VarDecl"]
            return self._node(node, NodeKind.DECL_STMT, role=role, children=decls)
        if kind == "VarDecl":
            return self._var(node, role)
        if kind == "ReturnStmt":
            return self._node(node, NodeKind.RETURN, role=role,
                              children=self._convert_all(node.get("inner", ())))
        if kind == "CXXThrowExpr":
            return self._node(node, NodeKind.THROW, role=role,
                              children=self._convert_all(node.get("inner", ())))
        if kind in _SIMPLE_STMTS:
            return self._node(node, NodeKind.STMT, role=role)

        if kind == "IfStmt":
            roles = (
                ([Role.INIT] if node.get("hasInit") else [])
                + ([Role.CONDITION] if node.get("hasVar") else [])
                + [Role.CONDITION, Role.THEN]
                + ([Role.ELSE] if node.get("hasElse") else [])
            )
            return self._control(node, NodeKind.IF, role, roles)
        if kind == "WhileStmt":
            roles = ([Role.CONDITION] if node.get("hasVar") else []) + [Role.CONDITION, Role.BODY]
            return self._control(node, NodeKind.WHILE, role, roles)
        if kind == "DoStmt":
            return self._control(node, NodeKind.DO, role, [Role.BODY, Role.CONDITION])
        if kind == "SwitchStmt":
            roles = (
                ([Role.INIT] if node.get("hasInit") else [])
                + ([Role.CONDITION] if node.get("hasVar") else [])
                + [Role.CONDITION, Role.BODY]
            )
            return self._control(node, NodeKind.SWITCH, role, roles)
        if kind == "ForStmt":
            roles = [Role.INIT, Role.CONDITION, Role.CONDITION, Role.INCREMENT, Role.BODY]
            return self._control(node, NodeKind.FOR, role, roles)
        if kind == "CXXForRangeStmt":
            return self._range_for(node, role)

        return self._expr(node, role)

    def _expr(self, node: dict, role: Role) -> NodeDoc:
        kind = node.get("kind")
        if kind in _CALL_EXPRS:
            return self._node(node, NodeKind.CALL, role=role, callee=self._callee(node),
                              children=self._convert_all(node.get("inner", ())))
        if kind in _CONSTRUCT_EXPRS:
            return self._node(node, NodeKind.CONSTRUCT, role=role,
                              callee=self._constructor(node),
                              children=self._convert_all(node.get("inner", ())))
        if kind == "LambdaExpr":
            # Defining a lambda does not run its body.
            return self._node(node, NodeKind.EXPR, role=role)
        return self._node(node, NodeKind.EXPR, role=role,
                          children=self._convert_all(node.get("inner", ())))

    def _control(self, node: dict, kind: NodeKind, role: Role, roles: list[Role]) -> NodeDoc:
        inner = node.get("inner", [])
        if len(inner) != len(roles):
            # Unexpected layout: last child is the body, the rest control it.
            log.debug("Unexpected %s layout (%d children)", node.get("kind"), len(inner))
            controls = [Role.CONDITION] * max(len(inner) - 1, 0)
            if kind == NodeKind.DO:
                roles = [Role.BODY] + controls
            else:
                roles = controls + [Role.BODY]
        children = []
        for child, child_role in zip(inner, roles):
            converted = self._convert(child, child_role) if isinstance(child, dict) else None
            if converted is not None:
                children.append(converted)
        return self._node(node, kind, role=role, children=children)

    def _range_for(self, node: dict, role: Role) -> NodeDoc:
        inner = node.get("inner", [])
        children: list[NodeDoc] = []
        if len(inner) == 8:
            init, range_stmt, _begin, _end, _cond, _inc, loop_var, body = inner
            if init:
                converted = self._convert(init, Role.INIT)
                if converted is not None:
                    children.append(converted)
            # The implicit __range variable: keep only its initializer.
            for decl in range_stmt.get("inner", ()):
                for expr in _non_attrs(decl):
                    converted = self._convert(expr, Role.RANGE)
                    if converted is not None:
                        children.append(converted)
            for converted in (self._convert(loop_var, Role.INIT), self._convert(body, Role.BODY)):
                if converted is not None:
                    children.append(converted)
        elif inner:
            log.debug("Unexpected CXXForRangeStmt layout (%d children)", len(inner))
            converted = self._convert(inner[-1], Role.BODY)
            if converted is not None:
                children.append(converted)
        return self._node(node, NodeKind.RANGE_FOR, role=role, children=children)

    # ── Callee resolution ─────────────────────────────────────────────

    def _callee(self, call: dict) -> str | None:
        inner = call.get("inner") or []
        expr = inner[0] if inner else None
        while isinstance(expr, dict):
            ref = expr.get("referencedDecl")
            if isinstance(ref, dict):
                return self._function_ref(ref)
            member = expr.get("referencedMemberDecl")
            if isinstance(member, str):
                return member
            if expr.get("kind") not in _CALLEE_WRAPPERS:
                break
            nested = expr.get("inner") or []
            expr = nested[0] if nested else None
        log.debug("Unresolved callee for %s at %s", call.get("kind"), self._where.get(id(call)))
        return None

    def _function_ref(self, ref: dict) -> str | None:
        if ref.get("kind") not in _FUNCTION_DECLS:
            return None   # call through a variable or parameter: unknown
        ref_id = ref.get("id")
        if ref_id and ref_id not in self._callables:
            self._callables[ref_id] = CallableDoc(
                name=ref_id, exception_spec=_qual_type(ref.get("type")),
            )
        return ref_id

    def _constructor(self, construct: dict) -> str | None:
        ctor_type = _qual_type(construct.get("ctorType"))
        if ctor_type is None:
            return None
        name = f"{_qual_type(construct.get('type')) or '?'}::{ctor_type}"
        if name not in self._callables:
            self._callables[name] = CallableDoc(name=name, exception_spec=ctor_type)
        return name

    # ── Helpers ───────────────────────────────────────────────────────

    def _convert_all(self, nodes) -> list[NodeDoc]:
        out = []
        for node in nodes:
            if isinstance(node, dict):
                converted = self._convert(node, Role.CHILD)
                if converted is not None:
                    out.append(converted)
        return out

    def _attrs(self, node: dict) -> list[str]:
        return [attr_spelling(a) for a in node.get("inner", ())
                if isinstance(a, dict) and a.get("kind", "").endswith("Attr")]

    def _node(self, node: dict, kind: NodeKind, *, role: Role = Role.CHILD, **fields) -> NodeDoc:
        where = self._where.get(id(node))
        if where is None:
            return NodeDoc(kind=kind, role=role, **fields)
        return NodeDoc(
            kind=kind, role=role,
            line=where.line, column=where.column,
            file=where.file if where.file and where.file != self._main_file else None,
            **fields,
        )


def _non_attrs(node: dict) -> list[dict]:
    return [c for c in node.get("inner", ())
            if isinstance(c, dict) and c and not c.get("kind", "").endswith("Attr")]


def _qual_type(type_info: dict | None) -> str | None:
    if isinstance(type_info, dict):
        return type_info.get("qualType")
    return None
