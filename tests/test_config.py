from __future__ import annotations

from pathlib import Path

import pytest

from sectionlint import config
from sectionlint.exceptions import ConfigError
from sectionlint.model import LintOptions, Severity
from sectionlint.taxonomy import CANONICAL_SECTION_ORDER, SORTABLE_SECTIONS, Section


def test_missing_config_gives_defaults(tmp_path: Path) -> None:
    assert config.load_config(root=tmp_path) == {}
    assert config.lint_options(root=tmp_path) == LintOptions()


def test_lint_table_is_read(write_config) -> None:
    path = write_config(
        "\n".join(
            [
                "[lint]",
                'section_order = ["refs", "state"]',
                'severity_threshold = "error"',
                "naming_checks = false",
                'sortable_sections = "state, refs"',
                'props_type_names = ["Props", "OwnProps"]',
            ]
        )
    )
    options = config.lint_options(root=path.parent)
    assert options.section_order[:2] == (Section.REFS, Section.STATE)
    assert options.severity_threshold is Severity.ERROR
    assert options.naming_checks_enabled is False
    assert options.sortable_sections == frozenset({Section.STATE, Section.REFS})
    assert options.props_type_names == ("Props", "OwnProps")


def test_explicit_values_override_the_file(write_config) -> None:
    path = write_config('[lint]\nseverity_threshold = "error"\nnaming_checks = "no"\n')
    options = config.lint_options(
        {"severity_threshold": "hint", "naming_checks": None},
        config_path=path,
    )
    assert options.severity_threshold is Severity.HINT
    assert options.naming_checks_enabled is False
    assert options.section_order == CANONICAL_SECTION_ORDER
    assert options.sortable_sections == SORTABLE_SECTIONS


def test_invalid_toml_raises(write_config) -> None:
    path = write_config("[lint\n")
    with pytest.raises(ConfigError):
        config.load_config(config_path=path)


def test_lint_must_be_a_table(write_config) -> None:
    path = write_config('lint = "strict"\n')
    with pytest.raises(ConfigError):
        config.lint_defaults(config_path=path)


def test_unknown_section_raises(write_config) -> None:
    path = write_config('[lint]\nsection_order = ["state", "sagas"]\n')
    with pytest.raises(ConfigError):
        config.lint_options(config_path=path)


def test_helpers() -> None:
    assert config._normalize_name_list(" a, b ,,c") == ["a", "b", "c"]
    assert config._normalize_name_list(["a,b", 3, "c"]) == ["a", "b", "c"]
    assert config._normalize_name_list(None) == []
    assert config._as_bool("Yes") is True
    assert config._as_bool(0) is False
    assert config._as_bool(1.5) is False
    assert config.merge_payload({"a": None, "b": 2}, {"a": 1, "b": 1}) == {"a": 1, "b": 2}


def test_unreadable_config_path_gives_defaults(tmp_path: Path) -> None:
    assert config.load_config(config_path=tmp_path) == {}
    assert config.load_config(config_path=tmp_path / "absent.toml") == {}
