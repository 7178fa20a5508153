"""Assign every declaration to exactly one section."""

from __future__ import annotations

from sectionlint.invariants import never
from sectionlint.model import (
    Classification,
    ClassificationSource,
    ComponentSignature,
    Constant,
    Declaration,
    EnumLike,
    ExportStatement,
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
from sectionlint.taxonomy import Section, hook_section, prefixed_section


def classify(declaration: Declaration) -> Classification:
    """Classify one declaration.

    Priority: an explicit comment marker, then the statement's structure for
    kinds that can only live in one section, then the invoked hook's name,
    then the naming prefix, then the statement's shape. The hook name wins
    over the prefix, so ``const getTotal = useMemo(...)`` is a memo.
    """
    if declaration.section_hint is not None:
        return Classification(declaration.section_hint, ClassificationSource.MARKER)

    match declaration.kind:
        case Import():
            return Classification(Section.IMPORTS, ClassificationSource.STRUCTURE)
        case EnumLike():
            return Classification(Section.CONSTANTS_ENUMS, ClassificationSource.STRUCTURE)
        case Interface() | TypeAlias():
            return Classification(Section.TYPES_INTERFACES, ClassificationSource.STRUCTURE)
        case ComponentSignature():
            return Classification(
                Section.COMPONENT_SIGNATURE, ClassificationSource.STRUCTURE
            )
        case RenderFunction():
            return Classification(Section.RENDER, ClassificationSource.STRUCTURE)
        case ExportStatement():
            return Classification(
                Section.PROP_TYPES_EXPORTS, ClassificationSource.STRUCTURE
            )
        case HookBinding(hook_name=hook_name):
            section = hook_section(hook_name)
            if section is None:
                never("hook binding without a hook section", hook=hook_name)
            return Classification(section, ClassificationSource.HOOK_NAME)
        case Constant():
            return Classification(Section.CONSTANTS_ENUMS, ClassificationSource.SHAPE)
        case PlainFunction() | Value():
            return _classify_body_binding(declaration)
        case Opaque():
            return Classification(Section.UNCLASSIFIED, ClassificationSource.NONE)
    never("unhandled declaration kind", kind=type(declaration.kind).__name__)


def _classify_body_binding(declaration: Declaration) -> Classification:
    if declaration.scope is not Scope.COMPONENT:
        never("body binding outside the component", name=declaration.name)
    section = prefixed_section(declaration.name)
    if section is not None:
        return Classification(section, ClassificationSource.NAME_PREFIX)
    if isinstance(declaration.kind, PlainFunction):
        return Classification(Section.FUNCTIONS, ClassificationSource.SHAPE)
    return Classification(Section.DERIVED_VALUES, ClassificationSource.SHAPE)


def classify_all(declarations: tuple[Declaration, ...]) -> dict[int, Classification]:
    return {declaration.index: classify(declaration) for declaration in declarations}
