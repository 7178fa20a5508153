from __future__ import annotations

from typing import Iterable

from sectionlint.model import (
    ComponentSignature,
    Constant,
    Declaration,
    DeclarationKind,
    Diagnostic,
    DiagnosticKind,
    EnumLike,
    ExportStatement,
    Extraction,
    HookBinding,
    Import,
    Interface,
    Opaque,
    PlainFunction,
    RenderFunction,
    Scope,
    TypeAlias,
    Value,
)
from sectionlint.syntax.model import StatementKind, StatementNode, SyntaxUnit, ValueShape
from sectionlint.taxonomy import hook_section, parse_marker

_COMPONENT_KINDS = frozenset({StatementKind.FUNCTION, StatementKind.VARIABLE})
_STATIC_MEMBERS = frozenset({"propTypes", "defaultProps", "displayName"})


def find_component(statements: Iterable[StatementNode]) -> int | None:
    """Index of the first module statement that declares a component."""
    for index, statement in enumerate(statements):
        if _is_component(statement):
            return index
    return None


def _is_component(statement: StatementNode) -> bool:
    name = statement.name
    return (
        statement.kind in _COMPONENT_KINDS
        and statement.body is not None
        and bool(name)
        and name[0].isupper()
    )


def extract_declarations(
    unit: SyntaxUnit,
    *,
    props_type_names: Iterable[str] = ("Props",),
) -> Extraction:
    component_index = find_component(unit.statements)
    if component_index is None:
        return Extraction(
            diagnostics=(
                Diagnostic(
                    kind=DiagnosticKind.NOT_A_COMPONENT,
                    message=f"{unit.unit}: no component signature found",
                ),
            )
        )
    component = unit.statements[component_index]
    component_name = component.name or ""
    props_names = set(props_type_names)
    props_names.add(f"{component_name}Props")

    flattened: list[tuple[StatementNode, Scope]] = []
    for index, statement in enumerate(unit.statements):
        flattened.append((statement, Scope.MODULE))
        if index == component_index:
            flattened.extend((child, Scope.COMPONENT) for child in component.body or ())
    last_body_index = len(component.body or ()) - 1

    declared: set[str] = set()
    for statement, _scope in flattened:
        declared.update(_bound_names(statement))

    declarations: list[Declaration] = []
    body_position = -1
    for index, (statement, scope) in enumerate(flattened):
        if scope is Scope.COMPONENT:
            body_position += 1
        kind = _declaration_kind(
            statement,
            scope=scope,
            is_component=index == component_index,
            is_terminal=scope is Scope.COMPONENT and body_position == last_body_index,
            component_name=component_name,
            props_names=props_names,
        )
        bound = frozenset(_bound_names(statement))
        declarations.append(
            Declaration(
                name=_declaration_name(statement, kind),
                kind=kind,
                span=statement.span,
                index=index,
                scope=scope,
                statement=statement,
                bound_names=bound,
                reads=frozenset(statement.reads & declared) - bound,
                section_hint=parse_marker(statement.leading_comment),
            )
        )
    return Extraction(
        declarations=tuple(declarations),
        component_name=component_name,
    )


def _bound_names(statement: StatementNode) -> tuple[str, ...]:
    if statement.kind in (StatementKind.EXPORT, StatementKind.ASSIGNMENT):
        return ()
    if statement.kind in (StatementKind.EXPRESSION, StatementKind.RETURN):
        return ()
    return statement.names


def _declaration_kind(
    statement: StatementNode,
    *,
    scope: Scope,
    is_component: bool,
    is_terminal: bool,
    component_name: str,
    props_names: set[str],
) -> DeclarationKind:
    kind = statement.kind
    if is_component:
        return ComponentSignature()
    if kind is StatementKind.IMPORT:
        return Import(
            module=statement.module or statement.name or "",
            specifiers=statement.specifiers or statement.names,
        )
    if kind is StatementKind.ENUM:
        return EnumLike(members=statement.members)
    if kind is StatementKind.INTERFACE:
        return Interface(is_props_type=_is_props_type(statement, props_names))
    if kind is StatementKind.TYPE_ALIAS:
        return TypeAlias(is_props_type=_is_props_type(statement, props_names))
    if kind is StatementKind.EXPORT:
        return ExportStatement(target=statement.target or statement.name or "default")
    if kind is StatementKind.ASSIGNMENT:
        target = statement.target or statement.name or ""
        owner, _, member = target.rpartition(".")
        if owner == component_name and member in _STATIC_MEMBERS:
            return ExportStatement(target=target)
        return Opaque(reason=f"assignment to {target or 'unknown target'}")
    if kind is StatementKind.RETURN:
        if is_terminal:
            return RenderFunction()
        return Opaque(reason="early return")
    if statement.callee and hook_section(statement.callee) is not None:
        if kind in (StatementKind.VARIABLE, StatementKind.EXPRESSION):
            return HookBinding(hook_name=statement.callee.rsplit(".", 1)[-1])
    if kind is StatementKind.EXPRESSION:
        return Opaque(reason="expression statement")
    if kind is StatementKind.VARIABLE and statement.value is ValueShape.FROZEN_OBJECT:
        return EnumLike(members=statement.members, frozen=True)
    if kind is StatementKind.FUNCTION or statement.value is ValueShape.FUNCTION:
        if scope is Scope.MODULE:
            return Constant()
        return PlainFunction()
    if kind is StatementKind.CLASS:
        if scope is Scope.MODULE:
            return Constant()
        return Opaque(reason="class declared inside the component")
    if kind is StatementKind.VARIABLE:
        if scope is Scope.MODULE:
            return Constant()
        return Value(boolean=statement.value is ValueShape.BOOLEAN)
    return Opaque(reason=f"unrecognised {kind.value} statement")


def _is_props_type(statement: StatementNode, props_names: set[str]) -> bool:
    return statement.is_props_type or (statement.name or "") in props_names


def _declaration_name(statement: StatementNode, kind: DeclarationKind) -> str:
    if isinstance(kind, Import):
        return kind.module
    if isinstance(kind, ExportStatement):
        return kind.target
    if isinstance(kind, HookBinding) and not statement.names:
        return kind.hook_name
    if isinstance(kind, RenderFunction):
        return "return"
    if statement.name:
        return statement.name
    return f"<{statement.kind.value}@{statement.span.line}>"
