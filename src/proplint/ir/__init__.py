"""IR (Intermediate Representation) package for proplint.

Provides:
    load_unit(path, frontend) -> TranslationUnit
    build_unit(document) -> TranslationUnit
"""

from __future__ import annotations

from proplint.ir.facts import CallableFact, CallableFacts
from proplint.ir.frontend import (
    TranslationUnit,
    TreeDocumentError,
    build_unit,
    load_unit,
)
from proplint.ir.tree import SyntaxTree

__all__ = [
    "CallableFact",
    "CallableFacts",
    "SyntaxTree",
    "TranslationUnit",
    "TreeDocumentError",
    "build_unit",
    "load_unit",
]
