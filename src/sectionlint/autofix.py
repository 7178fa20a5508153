"""Reorder a unit's statements into canonical section order.

Statements only move within their container: module statements stay at
module scope and component statements stay inside the component body.
Unclassified statements travel with the declaration they follow.
"""

from __future__ import annotations

import bisect
import logging
from collections import defaultdict
from dataclasses import replace
from typing import Collection, Mapping, Sequence

from sectionlint.graph import SectionGraph, topological_order
from sectionlint.model import (
    Classification,
    ComponentSignature,
    Declaration,
    Diagnostic,
    DiagnosticKind,
    FixPlan,
    LintOptions,
    Scope,
)
from sectionlint.syntax.model import Span, StatementNode, SyntaxUnit
from sectionlint.taxonomy import Section

logger = logging.getLogger(__name__)


def arrange(
    declarations: Sequence[Declaration],
    classifications: Mapping[int, Classification],
    graphs: Mapping[Section, SectionGraph],
    options: LintOptions,
    *,
    resorted: Collection[Section] = (),
) -> list[int]:
    """Target order of declaration indices.

    Sections are concatenated in the configured order. Sections in `resorted`
    without a dependency cycle take the lexicographically smallest
    topological order; every other section keeps its source order.
    """
    order: list[int] = []
    module = [d for d in declarations if d.scope is Scope.MODULE]
    body = [d for d in declarations if d.scope is Scope.COMPONENT]
    component = next((d.index for d in module if isinstance(d.kind, ComponentSignature)), None)
    body_order = _arrange_container(body, classifications, graphs, options, resorted)
    for index in _arrange_container(module, classifications, graphs, options, resorted):
        order.append(index)
        if index == component:
            order.extend(body_order)
    return order


def _arrange_container(
    members: Sequence[Declaration],
    classifications: Mapping[int, Classification],
    graphs: Mapping[Section, SectionGraph],
    options: LintOptions,
    resorted: Collection[Section],
) -> list[int]:
    head: list[int] = []
    attached: dict[int, list[int]] = defaultdict(list)
    by_section: dict[Section, list[Declaration]] = defaultdict(list)
    anchor: int | None = None
    for declaration in members:
        section = classifications[declaration.index].section
        if section is Section.UNCLASSIFIED:
            if anchor is None:
                head.append(declaration.index)
            else:
                attached[anchor].append(declaration.index)
            continue
        by_section[section].append(declaration)
        anchor = declaration.index

    order = list(head)
    for section in options.section_order:
        section_members = by_section.get(section)
        if not section_members:
            continue
        for index in _arrange_section(section, section_members, graphs.get(section), resorted):
            order.append(index)
            order.extend(attached.get(index, ()))
    return order


def _arrange_section(
    section: Section,
    members: list[Declaration],
    graph: SectionGraph | None,
    resorted: Collection[Section],
) -> list[int]:
    source_order = [member.index for member in members]
    if section not in resorted or graph is None or graph.cycles:
        return source_order
    lookup = {member.index: member for member in members}
    subgraph = {
        index: {dep for dep in graph.edges.get(index, set()) if dep in lookup}
        for index in source_order
    }

    def _key(index: int) -> tuple[bool, str, int]:
        member = lookup[index]
        return (member.is_props_type, member.sort_key, member.index)

    return topological_order(subgraph, key=_key)


def plan_fix(
    unit: SyntaxUnit,
    declarations: Sequence[Declaration],
    order: list[int],
    *,
    skipped_sections: Collection[Section] = (),
) -> FixPlan:
    plan = FixPlan(unit=unit, order=list(order), skipped_sections=list(skipped_sections))
    if order == [declaration.index for declaration in declarations]:
        plan.source = unit.source
        return plan

    lookup = {declaration.index: declaration for declaration in declarations}
    module_nodes = [
        lookup[index].statement for index in order if lookup[index].scope is Scope.MODULE
    ]
    body_nodes = [
        lookup[index].statement for index in order if lookup[index].scope is Scope.COMPONENT
    ]
    component = next(
        (d.statement for d in declarations if isinstance(d.kind, ComponentSignature)),
        None,
    )
    plan.changed = True
    if component is None or unit.source is None:
        plan.unit = _rebuild(unit, module_nodes, component, tuple(body_nodes))
        return plan

    rewritten = _rewrite_source(unit, module_nodes, component, body_nodes)
    if rewritten is None:
        plan.diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.SOURCE_NOT_REWRITTEN,
                message=f"{unit.unit}: statement spans do not tile the source; "
                "only the statement list was reordered",
            )
        )
        plan.unit = _rebuild(unit, module_nodes, component, tuple(body_nodes))
        return plan
    plan.unit = rewritten
    plan.source = rewritten.source
    return plan


def _rebuild(
    unit: SyntaxUnit,
    module_nodes: list[StatementNode],
    component: StatementNode | None,
    body: tuple[StatementNode, ...],
) -> SyntaxUnit:
    statements = tuple(
        node.with_body(body) if node is component else node for node in module_nodes
    )
    return unit.with_statements(statements)


def _slots_tile(nodes: Sequence[StatementNode], start: int, end: int) -> bool:
    cursor = start
    for node in nodes:
        if node.slot_start < cursor or node.span.end > end or node.span.end < node.slot_start:
            return False
        cursor = node.span.end
    return True


def _rewrite_source(
    unit: SyntaxUnit,
    module_nodes: list[StatementNode],
    component: StatementNode,
    body_nodes: list[StatementNode],
) -> SyntaxUnit | None:
    # Spans are UTF-8 byte offsets.
    source = (unit.source or "").encode("utf-8")
    originals = list(unit.statements)
    body_originals = list(component.body or ())
    if not _slots_tile(originals, 0, len(source)):
        return None
    if not _slots_tile(body_originals, component.span.start, component.span.end):
        return None

    component_text, body_offsets = _splice(
        source, component.slot_start, component.span.end, body_originals, body_nodes, {}
    )
    texts = {id(component): component_text}
    new_source, module_offsets = _splice(
        source, 0, len(source), originals, module_nodes, texts
    )
    try:
        text = new_source.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("%s: a statement slot splits a UTF-8 sequence", unit.unit)
        return None
    newlines = [i for i, byte in enumerate(new_source) if byte == 0x0A]

    component_start = next(
        offset for node, offset in zip(module_nodes, module_offsets) if node is component
    )
    body = tuple(
        _relocate(node, component_start + offset, newlines)
        for node, offset in zip(body_nodes, body_offsets)
    )
    statements = []
    for node, offset in zip(module_nodes, module_offsets):
        moved = _relocate(node, offset, newlines)
        if node is component:
            moved = moved.with_body(body)
        statements.append(moved)
    logger.debug("rewrote %s (%d module statements)", unit.unit, len(statements))
    return replace(unit, statements=tuple(statements), source=text)


def _splice(
    source: bytes,
    start: int,
    end: int,
    originals: Sequence[StatementNode],
    placed: Sequence[StatementNode],
    texts: Mapping[int, bytes],
) -> tuple[bytes, list[int]]:
    """Fill the original statement slots of `source[start:end]` with `placed`.

    Returns the new text and, for each placed statement, the offset of its
    slot relative to `start`.
    """
    parts: list[bytes] = []
    offsets: list[int] = []
    cursor = start
    length = 0
    for original, node in zip(originals, placed):
        gap = source[cursor:original.slot_start]
        parts.append(gap)
        length += len(gap)
        offsets.append(length)
        text = texts.get(id(node), source[node.slot_start:node.span.end])
        parts.append(text)
        length += len(text)
        cursor = original.span.end
    parts.append(source[cursor:end])
    return b"".join(parts), offsets


def _relocate(node: StatementNode, slot_offset: int, newlines: list[int]) -> StatementNode:
    delta = slot_offset - node.slot_start
    start = node.span.start + delta
    end = node.span.end + delta
    span = node.span
    if span.line:
        line, column = _position(start, newlines)
        end_line, _ = _position(end, newlines)
        span = Span(start=start, end=end, line=line, column=column, end_line=end_line)
    else:
        span = replace(span, start=start, end=end)
    leading_start = None if node.leading_start is None else node.leading_start + delta
    return replace(node, span=span, leading_start=leading_start)


def _position(offset: int, newlines: list[int]) -> tuple[int, int]:
    """1-based line and 0-based byte column of `offset`."""
    line_index = bisect.bisect_left(newlines, offset)
    line_start = newlines[line_index - 1] + 1 if line_index else 0
    return line_index + 1, offset - line_start
