from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from sectionlint.autofix import arrange
from sectionlint.graph import SectionGraph
from sectionlint.model import (
    DEFAULT_SEVERITIES,
    Classification,
    Declaration,
    EnumLike,
    Import,
    LintOptions,
    Scope,
    Value,
    Violation,
    ViolationKind,
)
from sectionlint.taxonomy import (
    NAMING_PREFIXES,
    PROPS_RESERVED_PREFIXES,
    SECTION_TITLES,
    Section,
    has_prefix,
)


@dataclass(frozen=True)
class Validation:
    violations: tuple[Violation, ...] = ()
    order: list[int] = field(default_factory=list)
    resorted_sections: frozenset[Section] = frozenset()
    cyclic_sections: frozenset[Section] = frozenset()


def validate(
    declarations: Sequence[Declaration],
    classifications: Mapping[int, Classification],
    graphs: Mapping[Section, SectionGraph],
    options: LintOptions,
) -> Validation:
    """Check section order, props position, alphabetical order and naming.

    Deterministic: violations are sorted by source position, then kind.
    `order` is the arrangement autofix would apply; expected positions refer
    to it.
    """
    members = _section_members(declarations, classifications)

    alphabetical = []
    for section in options.section_order:
        if section in options.sortable_sections and section in members:
            for group in _by_container(members[section]):
                alphabetical.extend(_alphabetical_pairs(group, graphs[section]))
    props = _props_position(members.get(Section.TYPES_INTERFACES, []))

    resorted = {section for section, _, _, _ in alphabetical}
    if props is not None:
        resorted.add(Section.TYPES_INTERFACES)
    cyclic = frozenset(section for section, graph in graphs.items() if graph.cycles)
    order = arrange(declarations, classifications, graphs, options, resorted=resorted)
    expected = {index: position for position, index in enumerate(order)}

    violations: list[Violation] = []
    violations.extend(
        _section_order_violations(declarations, classifications, options, expected)
    )
    for section, earlier, later, reason in alphabetical:
        violations.append(
            _violation(
                ViolationKind.ALPHABETICAL_ORDER,
                later,
                section,
                expected=expected[later.index],
                message=reason,
                related=(earlier.name,),
            )
        )
    if props is not None:
        violations.append(
            _violation(
                ViolationKind.PROPS_INTERFACE_POSITION,
                props,
                Section.TYPES_INTERFACES,
                expected=expected[props.index],
                message=f"props type '{props.name}' must be the last "
                f"{SECTION_TITLES[Section.TYPES_INTERFACES]} declaration",
            )
        )
    violations.extend(_member_violations(declarations, classifications, expected))
    if options.naming_checks_enabled:
        violations.extend(_naming_violations(declarations, classifications))
    violations.extend(_unclassified_violations(declarations, classifications))
    lookup = {declaration.index: declaration for declaration in declarations}
    for section, graph in graphs.items():
        violations.extend(_cycle_violations(section, graph, lookup, expected))
    return Validation(
        violations=tuple(sorted(violations, key=lambda item: item.sort_key)),
        order=order,
        resorted_sections=frozenset(resorted),
        cyclic_sections=cyclic,
    )


def _section_members(
    declarations: Iterable[Declaration],
    classifications: Mapping[int, Classification],
) -> dict[Section, list[Declaration]]:
    members: dict[Section, list[Declaration]] = defaultdict(list)
    for declaration in declarations:
        section = classifications[declaration.index].section
        if section is not Section.UNCLASSIFIED:
            members[section].append(declaration)
    return members


def _violation(
    kind: ViolationKind,
    declaration: Declaration,
    section: Section,
    *,
    expected: int,
    message: str,
    related: tuple[str, ...] = (),
    fixable: bool = True,
) -> Violation:
    return Violation(
        kind=kind,
        declaration_name=declaration.name,
        section=section,
        expected_position=expected,
        actual_position=declaration.index,
        message=message,
        line=declaration.span.line,
        column=declaration.span.column,
        related=related,
        fixable=fixable,
        severity=DEFAULT_SEVERITIES[kind],
    )


def _section_order_violations(
    declarations: Iterable[Declaration],
    classifications: Mapping[int, Classification],
    options: LintOptions,
    expected: Mapping[int, int],
) -> list[Violation]:
    # Each container (module, component body) is ordered on its own.
    violations: list[Violation] = []
    highest: dict[Scope, tuple[int, Section]] = {}
    for declaration in declarations:
        section = classifications[declaration.index].section
        if section is Section.UNCLASSIFIED:
            continue
        position = options.section_index(section)
        seen = highest.get(declaration.scope)
        if seen is None or position >= seen[0]:
            highest[declaration.scope] = (position, section)
            continue
        highest_section = seen[1]
        violations.append(
            _violation(
                ViolationKind.SECTION_ORDER,
                declaration,
                section,
                expected=expected[declaration.index],
                message=f"{SECTION_TITLES[section]} declaration '{declaration.name}' "
                f"must come before the {SECTION_TITLES[highest_section]} section",
                related=(highest_section.value,),
            )
        )
    return violations


def _by_container(members: Sequence[Declaration]) -> list[list[Declaration]]:
    groups: dict[Scope, list[Declaration]] = defaultdict(list)
    for member in members:
        groups[member.scope].append(member)
    return list(groups.values())


def _props_position(members: Sequence[Declaration]) -> Declaration | None:
    props = next((member for member in members if member.is_props_type), None)
    if props is None:
        return None
    siblings = [member for member in members if member.scope is props.scope]
    if siblings[-1] is props:
        return None
    return props


def _alphabetical_pairs(
    members: Sequence[Declaration],
    graph: SectionGraph,
) -> list[tuple[Section, Declaration, Declaration, str]]:
    """Adjacent source-order pairs that break alphabetical or dependency order.

    Each entry is (section, earlier, later, reason); the fix moves `later`
    before `earlier`. The props type is exempt from the alphabetical rule;
    its place at the end of the section is checked by `_props_position`.
    """
    in_cycle = graph.cycle_members
    checked = [member for member in members if member.index not in in_cycle]
    pairs = []
    for earlier, later in zip(checked, checked[1:]):
        if graph.depends_on(earlier.index, later.index):
            pairs.append(
                (
                    graph.section,
                    earlier,
                    later,
                    f"'{later.name}' must be declared before '{earlier.name}', "
                    "which reads it",
                )
            )
            continue
        if later.is_props_type or earlier.sort_key <= later.sort_key:
            continue
        if graph.depends_on(later.index, earlier.index):
            continue
        pairs.append(
            (
                graph.section,
                earlier,
                later,
                f"'{later.name}' should be declared before '{earlier.name}' "
                "(alphabetical order)",
            )
        )
    return pairs


def _member_violations(
    declarations: Iterable[Declaration],
    classifications: Mapping[int, Classification],
    expected: Mapping[int, int],
) -> list[Violation]:
    violations: list[Violation] = []
    for declaration in declarations:
        match declaration.kind:
            case EnumLike(members=members):
                noun = "member"
            case Import(specifiers=members):
                noun = "specifier"
            case _:
                continue
        for earlier, later in zip(members, members[1:]):
            if earlier.casefold() <= later.casefold():
                continue
            violations.append(
                _violation(
                    ViolationKind.ALPHABETICAL_ORDER,
                    declaration,
                    classifications[declaration.index].section,
                    expected=expected[declaration.index],
                    message=f"{noun} '{later}' of '{declaration.name}' should come "
                    f"before '{earlier}' (alphabetical order)",
                    related=(earlier, later),
                    fixable=False,
                )
            )
            break
    return violations


def _naming_violations(
    declarations: Iterable[Declaration],
    classifications: Mapping[int, Classification],
) -> list[Violation]:
    violations: list[Violation] = []
    for declaration in declarations:
        section = classifications[declaration.index].section
        message = _naming_problem(declaration, section)
        if message is None:
            continue
        violations.append(
            _violation(
                ViolationKind.NAMING_CONVENTION,
                declaration,
                section,
                expected=declaration.index,
                message=message,
                fixable=False,
            )
        )
    return violations


def _naming_problem(declaration: Declaration, section: Section) -> str | None:
    name = declaration.name
    prefixes = NAMING_PREFIXES.get(section)
    if prefixes is None:
        return None
    if section is Section.DERIVED_VALUES:
        if not isinstance(declaration.kind, Value) or not declaration.kind.boolean:
            return None
        if any(has_prefix(name, prefix) for prefix in prefixes):
            return None
        return f"boolean value '{name}' should start with 'is' or 'has'"
    if any(has_prefix(name, prefix) for prefix in prefixes):
        return None
    expected = " or ".join(f"'{prefix}'" for prefix in prefixes)
    title = SECTION_TITLES[section]
    for reserved in PROPS_RESERVED_PREFIXES:
        if has_prefix(name, reserved):
            return (
                f"'{name}' uses the '{reserved}' prefix, which is reserved for props; "
                f"{title} should start with {expected}"
            )
    return f"{title} declaration '{name}' should start with {expected}"


def _unclassified_violations(
    declarations: Iterable[Declaration],
    classifications: Mapping[int, Classification],
) -> list[Violation]:
    violations: list[Violation] = []
    for declaration in declarations:
        if classifications[declaration.index].section is not Section.UNCLASSIFIED:
            continue
        reason = getattr(declaration.kind, "reason", "no recognisable section")
        violations.append(
            _violation(
                ViolationKind.UNCLASSIFIED,
                declaration,
                Section.UNCLASSIFIED,
                expected=declaration.index,
                message=f"'{declaration.name}' could not be classified ({reason}); "
                "add a section marker comment",
                fixable=False,
            )
        )
    return violations


def _cycle_violations(
    section: Section,
    graph: SectionGraph,
    lookup: Mapping[int, Declaration],
    expected: Mapping[int, int],
) -> list[Violation]:
    violations: list[Violation] = []
    for cycle in graph.cycles:
        cycle_members = sorted((lookup[index] for index in cycle), key=lambda d: d.index)
        names = tuple(sorted(member.name for member in cycle_members))
        first = cycle_members[0]
        violations.append(
            _violation(
                ViolationKind.DEPENDENCY_CYCLE,
                first,
                section,
                expected=expected[first.index],
                message=f"{SECTION_TITLES[section]} declarations reference each other "
                f"({', '.join(names)}); the section is left unsorted",
                related=names,
                fixable=False,
            )
        )
    return violations
