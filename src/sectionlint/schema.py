from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from sectionlint.syntax.model import StatementKind, ValueShape


class SpanDTO(BaseModel):
    start: int
    end: int
    line: int = 0
    column: int = 0
    end_line: int = 0


class StatementDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    kind: StatementKind
    span: SpanDTO
    names: List[str] = []
    reads: List[str] = []
    leading_comment: Optional[str] = None
    leading_start: Optional[int] = None
    callee: Optional[str] = None
    value: Optional[ValueShape] = None
    module: Optional[str] = None
    specifiers: List[str] = []
    members: List[str] = []
    target: Optional[str] = None
    is_props_type: bool = False
    exported: bool = False
    body: Optional[List[StatementDTO]] = None


class SyntaxUnitDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    unit: str
    statements: List[StatementDTO]
    source: Optional[str] = None


class ViolationDTO(BaseModel):
    kind: str
    severity: str
    declaration_name: str
    section: str
    expected_position: int
    actual_position: int
    line: int
    column: int
    message: str
    related: List[str] = []


class DiagnosticDTO(BaseModel):
    kind: str
    message: str


class LintResultDTO(BaseModel):
    unit: str
    violations: List[ViolationDTO]
    diagnostics: List[DiagnosticDTO] = []
    skipped_sections: List[str] = []
    fixed: bool = False
    fixed_unit: Optional[SyntaxUnitDTO] = None


class LintReportDTO(BaseModel):
    results: List[LintResultDTO]
    counts: Dict[str, int]
    severity_threshold: str
    exit_code: int
