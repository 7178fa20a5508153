from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT / "src", ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from sectionlint.syntax.loader import unit_to_payload
from sectionlint.syntax.model import SyntaxUnit


@pytest.fixture
def write_unit_document():
    def _write(path: Path, unit: SyntaxUnit) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(unit_to_payload(unit), indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def write_config(tmp_path: Path):
    def _write(text: str, *, name: str = "sectionlint.toml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
