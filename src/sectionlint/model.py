from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable

from sectionlint.exceptions import ConfigError
from sectionlint.syntax.model import Span, StatementNode, SyntaxUnit
from sectionlint.taxonomy import (
    CANONICAL_SECTION_ORDER,
    SORTABLE_SECTIONS,
    Section,
    parse_section,
    section_order,
)


# Declaration kinds form a closed tagged union; the classifier dispatches on
# the concrete type.


@dataclass(frozen=True)
class Import:
    module: str
    specifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumLike:
    members: tuple[str, ...] = ()
    frozen: bool = False


@dataclass(frozen=True)
class TypeAlias:
    is_props_type: bool = False


@dataclass(frozen=True)
class Interface:
    is_props_type: bool = False


@dataclass(frozen=True)
class Constant:
    pass


@dataclass(frozen=True)
class ComponentSignature:
    pass


@dataclass(frozen=True)
class HookBinding:
    hook_name: str


@dataclass(frozen=True)
class PlainFunction:
    pass


@dataclass(frozen=True)
class Value:
    boolean: bool = False


@dataclass(frozen=True)
class RenderFunction:
    pass


@dataclass(frozen=True)
class ExportStatement:
    target: str = ""


@dataclass(frozen=True)
class Opaque:
    reason: str


DeclarationKind = (
    Import
    | EnumLike
    | TypeAlias
    | Interface
    | Constant
    | ComponentSignature
    | HookBinding
    | PlainFunction
    | Value
    | RenderFunction
    | ExportStatement
    | Opaque
)


class Scope(StrEnum):
    MODULE = "module"
    COMPONENT = "component"


@dataclass(frozen=True)
class Declaration:
    """One statement of the unit, in source order.

    `index` is the position in the flattened declaration sequence (module
    statements with the component body spliced in after the signature).
    `reads` holds only names declared elsewhere in the same unit.
    """

    name: str
    kind: DeclarationKind
    span: Span
    index: int
    scope: Scope
    statement: StatementNode
    bound_names: frozenset[str] = frozenset()
    reads: frozenset[str] = frozenset()
    section_hint: Section | None = None

    @property
    def sort_key(self) -> str:
        return self.name.casefold()

    @property
    def is_props_type(self) -> bool:
        return isinstance(self.kind, (Interface, TypeAlias)) and self.kind.is_props_type


class DiagnosticKind(StrEnum):
    NOT_A_COMPONENT = "NotAComponent"
    SOURCE_NOT_REWRITTEN = "SourceNotRewritten"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str


@dataclass(frozen=True)
class Extraction:
    declarations: tuple[Declaration, ...] = ()
    component_name: str | None = None
    diagnostics: tuple[Diagnostic, ...] = ()


class ClassificationSource(StrEnum):
    MARKER = "marker"
    STRUCTURE = "structure"
    HOOK_NAME = "hook_name"
    NAME_PREFIX = "name_prefix"
    SHAPE = "shape"
    NONE = "none"


@dataclass(frozen=True)
class Classification:
    section: Section
    source: ClassificationSource


class Severity(StrEnum):
    HINT = "hint"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.HINT: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
}


def parse_severity(value: str | Severity) -> Severity:
    if isinstance(value, Severity):
        return value
    try:
        return Severity(value.strip().lower())
    except ValueError:
        allowed = ", ".join(item.value for item in Severity)
        raise ConfigError(f"unknown severity {value!r} (expected one of: {allowed})") from None


class ViolationKind(StrEnum):
    SECTION_ORDER = "SectionOrderViolation"
    ALPHABETICAL_ORDER = "AlphabeticalOrderViolation"
    NAMING_CONVENTION = "NamingConventionViolation"
    PROPS_INTERFACE_POSITION = "PropsInterfacePositionViolation"
    DEPENDENCY_CYCLE = "DependencyCycleError"
    UNCLASSIFIED = "Unclassified"


DEFAULT_SEVERITIES: dict[ViolationKind, Severity] = {
    ViolationKind.SECTION_ORDER: Severity.WARNING,
    ViolationKind.ALPHABETICAL_ORDER: Severity.WARNING,
    ViolationKind.PROPS_INTERFACE_POSITION: Severity.WARNING,
    ViolationKind.NAMING_CONVENTION: Severity.HINT,
    ViolationKind.UNCLASSIFIED: Severity.INFO,
    ViolationKind.DEPENDENCY_CYCLE: Severity.ERROR,
}

# Violations of these kinds are resolved by reordering a section.
ORDERING_KINDS: frozenset[ViolationKind] = frozenset(
    {
        ViolationKind.SECTION_ORDER,
        ViolationKind.ALPHABETICAL_ORDER,
        ViolationKind.PROPS_INTERFACE_POSITION,
    }
)


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    declaration_name: str
    section: Section
    expected_position: int
    actual_position: int
    message: str
    line: int = 0
    column: int = 0
    related: tuple[str, ...] = ()
    fixable: bool = True
    severity: Severity = Severity.WARNING

    @property
    def sort_key(self) -> tuple[int, str, str]:
        return (self.actual_position, self.kind.value, self.declaration_name)


@dataclass(frozen=True)
class LintOptions:
    """Options record consumed by the core.

    Section names may be given as enum values, titles or marker aliases; they
    are normalised to `Section` members on construction.
    """

    section_order: tuple[Section, ...] = CANONICAL_SECTION_ORDER
    severity_threshold: Severity = Severity.WARNING
    naming_checks_enabled: bool = True
    sortable_sections: frozenset[Section] = SORTABLE_SECTIONS
    props_type_names: tuple[str, ...] = ("Props",)

    def __post_init__(self) -> None:
        object.__setattr__(self, "section_order", section_order(self.section_order))
        object.__setattr__(
            self, "severity_threshold", parse_severity(self.severity_threshold)
        )
        object.__setattr__(
            self, "sortable_sections", _normalize_sections(self.sortable_sections)
        )
        object.__setattr__(
            self,
            "props_type_names",
            tuple(name.strip() for name in self.props_type_names if name.strip()),
        )

    def section_index(self, section: Section) -> int:
        return self.section_order.index(section)


def _normalize_sections(values: Iterable[str | Section]) -> frozenset[Section]:
    sections = set()
    for value in values:
        section = value if isinstance(value, Section) else parse_section(value)
        if section is Section.UNCLASSIFIED:
            raise ConfigError("unclassified declarations cannot be sorted")
        sections.add(section)
    return frozenset(sections)


@dataclass(frozen=True)
class LintResult:
    unit: str
    violations: tuple[Violation, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    fixed_unit: SyntaxUnit | None = None
    fixed_source: str | None = None
    skipped_sections: tuple[Section, ...] = ()
    fixed: bool = False

    @property
    def skipped(self) -> bool:
        return any(d.kind is DiagnosticKind.NOT_A_COMPONENT for d in self.diagnostics)

    def at_or_above(self, threshold: Severity) -> list[Violation]:
        return [v for v in self.violations if v.severity.rank >= threshold.rank]


@dataclass
class FixPlan:
    unit: SyntaxUnit
    order: list[int] = field(default_factory=list)
    changed: bool = False
    source: str | None = None
    skipped_sections: list[Section] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
