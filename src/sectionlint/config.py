from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from sectionlint.exceptions import ConfigError
from sectionlint.model import LintOptions

DEFAULT_CONFIG_NAME = "sectionlint.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML: {exc}") from exc
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def lint_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("lint", {})
    if not isinstance(section, dict):
        raise ConfigError("[lint] must be a table")
    return section


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def options_from_table(section: TomlTable) -> LintOptions:
    kwargs: dict[str, object] = {}
    order = _normalize_name_list(section.get("section_order"))
    if order:
        kwargs["section_order"] = tuple(order)
    threshold = section.get("severity_threshold")
    if threshold is not None:
        kwargs["severity_threshold"] = str(threshold)
    if "naming_checks" in section:
        kwargs["naming_checks_enabled"] = _as_bool(section.get("naming_checks"))
    if "sortable_sections" in section:
        kwargs["sortable_sections"] = frozenset(
            _normalize_name_list(section.get("sortable_sections"))
        )
    props_names = _normalize_name_list(section.get("props_type_names"))
    if props_names:
        kwargs["props_type_names"] = tuple(props_names)
    return LintOptions(**kwargs)


def lint_options(
    payload: TomlTable | None = None,
    *,
    root: Path | None = None,
    config_path: Path | None = None,
) -> LintOptions:
    """Options from `sectionlint.toml`, with explicit (non-None) values on top."""
    defaults = lint_defaults(root=root, config_path=config_path)
    return options_from_table(merge_payload(payload or {}, defaults))

