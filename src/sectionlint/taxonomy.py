"""Canonical sections of a component unit and the tables that feed them."""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Iterable

from sectionlint.exceptions import ConfigError


class Section(StrEnum):
    IMPORTS = "imports"
    CONSTANTS_ENUMS = "constants_enums"
    TYPES_INTERFACES = "types_interfaces"
    COMPONENT_SIGNATURE = "component_signature"
    REDUX = "redux"
    HOOKS = "hooks"
    STATE = "state"
    REFS = "refs"
    MEMOS = "memos"
    DERIVED_VALUES = "derived_values"
    FUNCTIONS = "functions"
    CALLBACKS = "callbacks"
    EFFECTS = "effects"
    RENDER = "render"
    PROP_TYPES_EXPORTS = "prop_types_exports"
    UNCLASSIFIED = "unclassified"


CANONICAL_SECTION_ORDER: tuple[Section, ...] = (
    Section.IMPORTS,
    Section.CONSTANTS_ENUMS,
    Section.TYPES_INTERFACES,
    Section.COMPONENT_SIGNATURE,
    Section.REDUX,
    Section.HOOKS,
    Section.STATE,
    Section.REFS,
    Section.MEMOS,
    Section.DERIVED_VALUES,
    Section.FUNCTIONS,
    Section.CALLBACKS,
    Section.EFFECTS,
    Section.RENDER,
    Section.PROP_TYPES_EXPORTS,
)

MODULE_SECTIONS: frozenset[Section] = frozenset(
    {
        Section.IMPORTS,
        Section.CONSTANTS_ENUMS,
        Section.TYPES_INTERFACES,
        Section.COMPONENT_SIGNATURE,
        Section.PROP_TYPES_EXPORTS,
    }
)

# Effects run in declaration order; the rest of the unsortable sections hold
# a single statement or order-significant module tails.
SORTABLE_SECTIONS: frozenset[Section] = frozenset(
    {
        Section.IMPORTS,
        Section.CONSTANTS_ENUMS,
        Section.TYPES_INTERFACES,
        Section.REDUX,
        Section.HOOKS,
        Section.STATE,
        Section.REFS,
        Section.MEMOS,
        Section.DERIVED_VALUES,
        Section.FUNCTIONS,
        Section.CALLBACKS,
    }
)

SECTION_TITLES: dict[Section, str] = {
    Section.IMPORTS: "Imports",
    Section.CONSTANTS_ENUMS: "Constants & Enums",
    Section.TYPES_INTERFACES: "Types & Interfaces",
    Section.COMPONENT_SIGNATURE: "Component",
    Section.REDUX: "Redux",
    Section.HOOKS: "Hooks",
    Section.STATE: "State",
    Section.REFS: "Refs",
    Section.MEMOS: "Memos",
    Section.DERIVED_VALUES: "Derived Values",
    Section.FUNCTIONS: "Functions",
    Section.CALLBACKS: "Callbacks",
    Section.EFFECTS: "Effects",
    Section.RENDER: "Render",
    Section.PROP_TYPES_EXPORTS: "PropTypes & Exports",
    Section.UNCLASSIFIED: "Unclassified",
}

HOOK_SECTIONS: dict[str, Section] = {
    "useState": Section.STATE,
    "useReducer": Section.STATE,
    "useRef": Section.REFS,
    "useMemo": Section.MEMOS,
    "useCallback": Section.CALLBACKS,
    "useEffect": Section.EFFECTS,
    "useLayoutEffect": Section.EFFECTS,
    "useInsertionEffect": Section.EFFECTS,
    "useDispatch": Section.REDUX,
    "useSelector": Section.REDUX,
    "useStore": Section.REDUX,
    "useAppDispatch": Section.REDUX,
    "useAppSelector": Section.REDUX,
}

_HOOK_NAME_RE = re.compile(r"^use(?:[A-Z0-9_]|$)")

NAMING_PREFIXES: dict[Section, tuple[str, ...]] = {
    Section.FUNCTIONS: ("get", "render"),
    Section.CALLBACKS: ("handle",),
    Section.DERIVED_VALUES: ("is", "has"),
}

PROPS_RESERVED_PREFIXES: tuple[str, ...] = ("on",)

NAME_PREFIX_SECTIONS: tuple[tuple[str, Section], ...] = (
    ("get", Section.FUNCTIONS),
    ("render", Section.FUNCTIONS),
    ("handle", Section.CALLBACKS),
)

_MARKER_ALIASES: dict[str, Section] = {
    "imports": Section.IMPORTS,
    "import": Section.IMPORTS,
    "constants": Section.CONSTANTS_ENUMS,
    "constant": Section.CONSTANTS_ENUMS,
    "enums": Section.CONSTANTS_ENUMS,
    "constants enums": Section.CONSTANTS_ENUMS,
    "constants and enums": Section.CONSTANTS_ENUMS,
    "types": Section.TYPES_INTERFACES,
    "interfaces": Section.TYPES_INTERFACES,
    "types interfaces": Section.TYPES_INTERFACES,
    "types and interfaces": Section.TYPES_INTERFACES,
    "component": Section.COMPONENT_SIGNATURE,
    "component signature": Section.COMPONENT_SIGNATURE,
    "redux": Section.REDUX,
    "hooks": Section.HOOKS,
    "custom hooks": Section.HOOKS,
    "state": Section.STATE,
    "refs": Section.REFS,
    "memos": Section.MEMOS,
    "memo": Section.MEMOS,
    "memoized values": Section.MEMOS,
    "derived": Section.DERIVED_VALUES,
    "derived values": Section.DERIVED_VALUES,
    "derived state": Section.DERIVED_VALUES,
    "functions": Section.FUNCTIONS,
    "helpers": Section.FUNCTIONS,
    "callbacks": Section.CALLBACKS,
    "handlers": Section.CALLBACKS,
    "event handlers": Section.CALLBACKS,
    "effects": Section.EFFECTS,
    "render": Section.RENDER,
    "proptypes": Section.PROP_TYPES_EXPORTS,
    "prop types": Section.PROP_TYPES_EXPORTS,
    "exports": Section.PROP_TYPES_EXPORTS,
    "proptypes exports": Section.PROP_TYPES_EXPORTS,
    "proptypes and exports": Section.PROP_TYPES_EXPORTS,
    "prop types exports": Section.PROP_TYPES_EXPORTS,
}

_COMMENT_DELIMITERS_RE = re.compile(r"/\*+|\*+/|^\s*//+|^\s*\*+|^\s*#+", re.MULTILINE)
_DECORATION_RE = re.compile(r"[=\-*#/~_]{2,}")
_NON_WORD_RE = re.compile(r"[^0-9a-z]+")


def hook_section(hook_name: str) -> Section | None:
    """Section a hook call belongs to, or None for names that are not hooks."""
    name = hook_name.rsplit(".", 1)[-1]
    section = HOOK_SECTIONS.get(name)
    if section is not None:
        return section
    if _HOOK_NAME_RE.match(name):
        return Section.HOOKS
    return None


def has_prefix(name: str, prefix: str) -> bool:
    """True when `name` starts with `prefix` at a camelCase boundary."""
    if not name.startswith(prefix):
        return False
    rest = name[len(prefix):]
    return not rest or not rest[0].islower()


def prefixed_section(name: str) -> Section | None:
    for prefix, section in NAME_PREFIX_SECTIONS:
        if has_prefix(name, prefix):
            return section
    return None


def _normalize_marker_line(line: str) -> str:
    text = _DECORATION_RE.sub(" ", line.casefold())
    text = text.replace("&", " and ")
    return " ".join(_NON_WORD_RE.sub(" ", text).split())


def parse_marker(comment: str | None) -> Section | None:
    """Section named by a comment marker such as ``/* ===== State ===== */``."""
    if not comment:
        return None
    stripped = _COMMENT_DELIMITERS_RE.sub("\n", comment)
    found: Section | None = None
    for line in stripped.splitlines():
        key = _normalize_marker_line(line)
        if not key:
            continue
        section = _MARKER_ALIASES.get(key)
        if section is None:
            section = _MARKER_ALIASES.get(key.replace(" and ", " "))
        if section is not None:
            found = section
    return found


def parse_section(value: str) -> Section:
    """Resolve a configured section name (enum value, title or marker alias)."""
    raw = value.strip()
    try:
        return Section(raw.lower())
    except ValueError:
        pass
    section = parse_marker(raw)
    if section is None:
        raise ConfigError(f"unknown section: {value!r}")
    return section


def section_order(override: Iterable[str | Section] | None = None) -> tuple[Section, ...]:
    """Effective section order for an optional override list.

    Listed sections come first in the given order; sections the override
    leaves out keep their canonical relative order after them.
    """
    if not override:
        return CANONICAL_SECTION_ORDER
    listed: list[Section] = []
    for item in override:
        section = item if isinstance(item, Section) else parse_section(item)
        if section is Section.UNCLASSIFIED:
            raise ConfigError("unclassified has no slot in the section order")
        if section in listed:
            raise ConfigError(f"section listed twice: {section.value}")
        listed.append(section)
    remaining = [section for section in CANONICAL_SECTION_ORDER if section not in listed]
    return tuple(listed + remaining)
