from __future__ import annotations

import heapq
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Set

from sectionlint.model import Classification, Declaration
from sectionlint.taxonomy import Section


@dataclass(frozen=True)
class SectionGraph:
    """Same-section dependencies, keyed by declaration index.

    `edges[a]` holds the declarations `a` reads, i.e. the ones that must be
    declared before it.
    """

    section: Section
    members: tuple[int, ...]
    edges: Dict[int, Set[int]] = field(default_factory=dict)
    cycles: List[frozenset[int]] = field(default_factory=list)

    def depends_on(self, dependent: int, dependency: int) -> bool:
        return dependency in self.edges.get(dependent, set())

    @property
    def cycle_members(self) -> frozenset[int]:
        return frozenset().union(*self.cycles)


def build_section_graphs(
    declarations: Iterable[Declaration],
    classifications: Mapping[int, Classification],
) -> dict[Section, SectionGraph]:
    by_section: dict[Section, list[Declaration]] = defaultdict(list)
    for declaration in declarations:
        section = classifications[declaration.index].section
        if section is Section.UNCLASSIFIED:
            continue
        by_section[section].append(declaration)
    return {
        section: build_section_graph(section, members)
        for section, members in by_section.items()
    }


def build_section_graph(section: Section, members: list[Declaration]) -> SectionGraph:
    edges: Dict[int, Set[int]] = {member.index: set() for member in members}
    for dependent in members:
        if not dependent.reads:
            continue
        for dependency in members:
            if dependency.index == dependent.index or dependency.name == dependent.name:
                continue
            if dependent.reads & dependency.bound_names:
                edges[dependent.index].add(dependency.index)
    components = _strongly_connected_components(edges)
    cycles = sorted(
        (frozenset(component) for component in components if len(component) > 1),
        key=min,
    )
    return SectionGraph(
        section=section,
        members=tuple(member.index for member in members),
        edges=edges,
        cycles=cycles,
    )


def topological_order(
    graph: Mapping[int, Set[int]],
    *,
    key: Callable[[int], tuple[Hashable, ...]],
) -> List[int]:
    """Lexicographically smallest topological order of an acyclic graph.

    At every step the ready node with the smallest `key` is placed next, so
    dependencies precede their dependents and everything else follows `key`.
    """
    incoming: Dict[int, Set[int]] = {node: set(deps) for node, deps in graph.items()}
    outgoing: Dict[int, Set[int]] = defaultdict(set)
    for node, deps in graph.items():
        for dep in deps:
            outgoing[dep].add(node)
    ready = [(key(node), node) for node, deps in incoming.items() if not deps]
    heapq.heapify(ready)
    order: List[int] = []
    while ready:
        _, node = heapq.heappop(ready)
        order.append(node)
        for follower in outgoing[node]:
            incoming[follower].discard(node)
            if not incoming[follower]:
                heapq.heappush(ready, (key(follower), follower))
    return order


def _strongly_connected_components(graph: Mapping[int, Set[int]]) -> List[Set[int]]:
    index = 0
    indices: Dict[int, int] = {}
    lowlinks: Dict[int, int] = {}
    stack: List[int] = []
    on_stack: Set[int] = set()
    components: List[Set[int]] = []

    def visit(node: int) -> None:
        nonlocal index
        indices[node] = index
        lowlinks[node] = index
        index += 1
        stack.append(node)
        on_stack.add(node)
        for neighbor in sorted(graph.get(node, set())):
            if neighbor not in indices:
                visit(neighbor)
                lowlinks[node] = min(lowlinks[node], lowlinks[neighbor])
            elif neighbor in on_stack:
                lowlinks[node] = min(lowlinks[node], indices[neighbor])
        if lowlinks[node] == indices[node]:
            component: Set[int] = set()
            while True:
                popped = stack.pop()
                on_stack.discard(popped)
                component.add(popped)
                if popped == node:
                    break
            components.append(component)

    for node in sorted(graph):
        if node not in indices:
            visit(node)

    return components
