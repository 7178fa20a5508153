"""JSON syntax-tree documents <-> `SyntaxUnit`."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from sectionlint.exceptions import SyntaxTreeError
from sectionlint.schema import SpanDTO, StatementDTO, SyntaxUnitDTO
from sectionlint.syntax.model import Span, StatementNode, SyntaxUnit

logger = logging.getLogger(__name__)


def _statement_from_dto(dto: StatementDTO) -> StatementNode:
    body = None
    if dto.body is not None:
        body = tuple(_statement_from_dto(child) for child in dto.body)
    return StatementNode(
        kind=dto.kind,
        span=Span(
            start=dto.span.start,
            end=dto.span.end,
            line=dto.span.line,
            column=dto.span.column,
            end_line=dto.span.end_line,
        ),
        names=tuple(name for name in dto.names if name),
        reads=frozenset(name for name in dto.reads if name),
        leading_comment=dto.leading_comment,
        leading_start=dto.leading_start,
        callee=dto.callee,
        value=dto.value,
        module=dto.module,
        specifiers=tuple(dto.specifiers),
        members=tuple(dto.members),
        target=dto.target,
        is_props_type=dto.is_props_type,
        exported=dto.exported,
        body=body,
    )


def statement_to_dto(node: StatementNode) -> StatementDTO:
    body = None
    if node.body is not None:
        body = [statement_to_dto(child) for child in node.body]
    return StatementDTO(
        kind=node.kind,
        span=SpanDTO(
            start=node.span.start,
            end=node.span.end,
            line=node.span.line,
            column=node.span.column,
            end_line=node.span.end_line,
        ),
        names=list(node.names),
        reads=sorted(node.reads),
        leading_comment=node.leading_comment,
        leading_start=node.leading_start,
        callee=node.callee,
        value=node.value,
        module=node.module,
        specifiers=list(node.specifiers),
        members=list(node.members),
        target=node.target,
        is_props_type=node.is_props_type,
        exported=node.exported,
        body=body,
    )


def unit_to_dto(unit: SyntaxUnit) -> SyntaxUnitDTO:
    return SyntaxUnitDTO(
        unit=unit.unit,
        statements=[statement_to_dto(node) for node in unit.statements],
        source=unit.source,
    )


def unit_from_payload(payload: Mapping[str, Any], *, source: str = "") -> SyntaxUnit:
    try:
        dto = SyntaxUnitDTO.model_validate(payload)
    except ValidationError as exc:
        raise SyntaxTreeError(f"invalid syntax-tree document: {exc}", source=source) from exc
    for statement in dto.statements:
        _check_span(statement, source=source)
    return SyntaxUnit(
        unit=dto.unit,
        statements=tuple(_statement_from_dto(item) for item in dto.statements),
        source=dto.source,
    )


def _check_span(dto: StatementDTO, *, source: str) -> None:
    if dto.span.start < 0 or dto.span.end < dto.span.start:
        raise SyntaxTreeError(
            f"statement {dto.names or dto.kind.value} has an invalid span "
            f"({dto.span.start}, {dto.span.end})",
            source=source,
        )
    for child in dto.body or []:
        _check_span(child, source=source)


def unit_to_payload(unit: SyntaxUnit) -> dict[str, Any]:
    return unit_to_dto(unit).model_dump(mode="json", exclude_none=True)


def load_unit_path(path: Path) -> SyntaxUnit:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SyntaxTreeError(f"failed to read: {exc}", source=str(path)) from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SyntaxTreeError(f"invalid JSON: {exc}", source=str(path)) from exc
    if not isinstance(payload, dict):
        raise SyntaxTreeError("document root must be an object", source=str(path))
    unit = unit_from_payload(payload, source=str(path))
    logger.debug("loaded %s (%d statements) from %s", unit.unit, len(unit.statements), path)
    return unit


def dump_unit_path(unit: SyntaxUnit, path: Path) -> None:
    path.write_text(
        json.dumps(unit_to_payload(unit), indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
