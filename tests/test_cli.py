from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from sectionlint import cli
from sectionlint.syntax.loader import load_unit_path
from tests.unit_builders import function, render, state, widget


def _invoke(args: list[str]):
    return CliRunner().invoke(cli.app, args)


def _unsorted():
    return widget([state("zIndex"), state("amount"), render()])


def test_clean_document_exits_zero(tmp_path: Path, write_unit_document) -> None:
    write_unit_document(tmp_path / "trees" / "Widget.json", widget([state("amount"), render()]))
    result = _invoke(["check", str(tmp_path / "trees")])
    assert result.exit_code == 0, result.output
    assert "1 unit(s) checked, 0 violation(s)" in result.output


def test_violations_exit_one(tmp_path: Path, write_unit_document) -> None:
    document = write_unit_document(tmp_path / "Widget.json", _unsorted())
    result = _invoke(["check", str(document)])
    assert result.exit_code == 1
    assert "AlphabeticalOrderViolation" in result.output

    relaxed = _invoke(["check", str(document), "--severity-threshold", "error"])
    assert relaxed.exit_code == 0


def test_fix_rewrites_the_document(tmp_path: Path, write_unit_document) -> None:
    document = write_unit_document(tmp_path / "Widget.json", _unsorted())
    result = _invoke(["check", str(document), "--fix"])
    assert result.exit_code == 1
    expected = widget([state("amount"), state("zIndex"), render()])
    assert load_unit_path(document) == expected
    assert not (tmp_path / "src" / "Widget.tsx").exists()

    again = _invoke(["check", str(document)])
    assert again.exit_code == 0, again.output


def test_fix_can_write_the_source_file(tmp_path: Path, write_unit_document) -> None:
    document = write_unit_document(tmp_path / "trees" / "Widget.json", _unsorted())
    (tmp_path / "src").mkdir()
    result = _invoke(
        ["check", str(document), "--fix", "--write-source", "--root", str(tmp_path)]
    )
    assert result.exit_code == 1
    expected = widget([state("amount"), state("zIndex"), render()])
    assert (tmp_path / "src" / "Widget.tsx").read_text(encoding="utf-8") == expected.source


def test_json_output(tmp_path: Path, write_unit_document) -> None:
    document = write_unit_document(tmp_path / "Widget.json", _unsorted())
    result = _invoke(["check", str(document), "--format", "json"])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["counts"]["AlphabeticalOrderViolation"] == 1
    assert payload["results"][0]["violations"][0]["declaration_name"] == "amount"


def test_naming_flag(tmp_path: Path, write_unit_document) -> None:
    document = write_unit_document(tmp_path / "Widget.json", widget([function("format"), render()]))
    strict = _invoke(["check", str(document), "--severity-threshold", "hint"])
    assert strict.exit_code == 1
    quiet = _invoke(["check", str(document), "--severity-threshold", "hint", "--no-naming"])
    assert quiet.exit_code == 0, quiet.output


def test_config_file_is_honoured(tmp_path: Path, write_unit_document, write_config) -> None:
    document = write_unit_document(tmp_path / "trees" / "Widget.json", _unsorted())
    write_config('[lint]\nsortable_sections = ["refs"]\n')
    result = _invoke(["check", str(document), "--root", str(tmp_path)])
    assert result.exit_code == 0, result.output


def test_usage_errors_exit_two(tmp_path: Path, write_config) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    assert _invoke(["check", str(empty)]).exit_code == 2

    broken = tmp_path / "broken.json"
    broken.write_text('{"unit": "a.tsx"}', encoding="utf-8")
    result = _invoke(["check", str(broken)])
    assert result.exit_code == 2
    assert "invalid syntax-tree document" in result.output

    config = write_config('[lint]\nseverity_threshold = "loud"\n', name="bad.toml")
    result = _invoke(["check", str(broken), "--config", str(config)])
    assert result.exit_code == 2
    assert "configuration error" in result.output


def test_sections_command(write_config) -> None:
    config = write_config('[lint]\nsection_order = ["state"]\n')
    result = _invoke(["sections", "--config", str(config)])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == " 1. State (state, sorted)"
    assert " 2. Imports (imports, sorted)" in lines
    assert "14. Render (render, source order)" in lines
