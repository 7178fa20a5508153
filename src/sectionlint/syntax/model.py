"""Syntax-tree abstraction consumed by the linter.

An external parser turns a component source file into a `SyntaxUnit`: the
ordered top-level statements of the file, each with its declared names, span,
leading comment and the identifiers it reads. Nothing here parses source text.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum


class StatementKind(StrEnum):
    IMPORT = "import"
    VARIABLE = "variable"
    FUNCTION = "function"
    CLASS = "class"
    ENUM = "enum"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"
    EXPRESSION = "expression"
    RETURN = "return"
    EXPORT = "export"
    ASSIGNMENT = "assignment"


class ValueShape(StrEnum):
    """Shape of a variable initializer or returned expression."""

    CALL = "call"
    FUNCTION = "function"
    OBJECT = "object"
    FROZEN_OBJECT = "frozen_object"
    LITERAL = "literal"
    BOOLEAN = "boolean"
    JSX = "jsx"
    OTHER = "other"


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    line: int = 0
    column: int = 0
    end_line: int = 0


@dataclass(frozen=True)
class StatementNode:
    kind: StatementKind
    span: Span
    names: tuple[str, ...] = ()
    reads: frozenset[str] = frozenset()
    leading_comment: str | None = None
    leading_start: int | None = None
    callee: str | None = None
    value: ValueShape | None = None
    module: str | None = None
    specifiers: tuple[str, ...] = ()
    members: tuple[str, ...] = ()
    target: str | None = None
    is_props_type: bool = False
    exported: bool = False
    body: tuple[StatementNode, ...] | None = None

    @property
    def name(self) -> str | None:
        return self.names[0] if self.names else None

    @property
    def slot_start(self) -> int:
        """Offset where the statement's text begins, leading comments included."""
        if self.leading_start is None:
            return self.span.start
        return min(self.leading_start, self.span.start)

    def with_body(self, body: tuple[StatementNode, ...]) -> StatementNode:
        return replace(self, body=body)


@dataclass(frozen=True)
class SyntaxUnit:
    unit: str
    statements: tuple[StatementNode, ...] = field(default_factory=tuple)
    source: str | None = None

    def with_statements(self, statements: tuple[StatementNode, ...]) -> SyntaxUnit:
        return replace(self, statements=statements)
