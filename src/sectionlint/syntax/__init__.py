"""Syntax-tree abstraction for sectionlint.

Document loading lives in `sectionlint.syntax.loader`, which depends on the
pydantic schema and is imported explicitly by its callers.
"""

from sectionlint.syntax.model import (
    Span,
    StatementKind,
    StatementNode,
    SyntaxUnit,
    ValueShape,
)

__all__ = [
    "Span",
    "StatementKind",
    "StatementNode",
    "SyntaxUnit",
    "ValueShape",
]
