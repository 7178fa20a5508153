from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable

from sectionlint.model import LintResult, Severity, Violation
from sectionlint.schema import (
    DiagnosticDTO,
    LintReportDTO,
    LintResultDTO,
    ViolationDTO,
)
from sectionlint.syntax.loader import unit_to_dto


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


@dataclass
class LintReport:
    """Lint results for a batch of units, in the order they were linted."""

    results: list[LintResult] = field(default_factory=list)
    severity_threshold: Severity = Severity.WARNING

    def add(self, result: LintResult) -> None:
        self.results.append(result)

    @property
    def violations(self) -> list[Violation]:
        return [violation for result in self.results for violation in result.violations]

    @property
    def failing(self) -> list[Violation]:
        threshold = self.severity_threshold.rank
        return [v for v in self.violations if v.severity.rank >= threshold]

    def counts(self) -> dict[str, int]:
        counter: Counter[str] = Counter()
        for violation in self.violations:
            counter[violation.kind.value] += 1
            counter[f"severity:{violation.severity.value}"] += 1
        counter["units"] = len(self.results)
        counter["skipped_units"] = sum(1 for result in self.results if result.skipped)
        counter["fixed_units"] = sum(1 for result in self.results if result.fixed)
        return dict(counter)

    def exit_code(self) -> int:
        return 1 if self.failing else 0


def build_report(
    results: Iterable[LintResult],
    *,
    severity_threshold: Severity = Severity.WARNING,
) -> LintReport:
    return LintReport(results=list(results), severity_threshold=severity_threshold)


def violation_dto(violation: Violation) -> ViolationDTO:
    return ViolationDTO(
        kind=violation.kind.value,
        severity=violation.severity.value,
        declaration_name=violation.declaration_name,
        section=violation.section.value,
        expected_position=violation.expected_position,
        actual_position=violation.actual_position,
        line=violation.line,
        column=violation.column,
        message=violation.message,
        related=list(violation.related),
    )


def result_dto(result: LintResult) -> LintResultDTO:
    return LintResultDTO(
        unit=result.unit,
        violations=[violation_dto(violation) for violation in result.violations],
        diagnostics=[
            DiagnosticDTO(kind=item.kind.value, message=item.message)
            for item in result.diagnostics
        ],
        skipped_sections=[section.value for section in result.skipped_sections],
        fixed=result.fixed,
        fixed_unit=None if result.fixed_unit is None else unit_to_dto(result.fixed_unit),
    )


def report_dto(report: LintReport) -> LintReportDTO:
    return LintReportDTO(
        results=[result_dto(result) for result in report.results],
        counts=report.counts(),
        severity_threshold=report.severity_threshold.value,
        exit_code=report.exit_code(),
    )


def render_json(report: LintReport) -> str:
    payload = report_dto(report).model_dump(mode="json", exclude_none=True)
    return json.dumps(payload, indent=2, sort_keys=True)


def format_violation(unit: str, violation: Violation) -> str:
    location = f"{unit}:{violation.line}:{violation.column}"
    line = (
        f"{location}: {violation.severity.value} {violation.kind.value}: "
        f"{violation.message}"
    )
    if violation.expected_position != violation.actual_position:
        line += (
            f" [expected position {violation.expected_position}, "
            f"actual {violation.actual_position}]"
        )
    return line


def render_text(report: LintReport) -> str:
    lines: list[str] = []
    for result in report.results:
        for diagnostic in result.diagnostics:
            lines.append(f"{result.unit}: note {diagnostic.kind.value}: {diagnostic.message}")
        for violation in result.violations:
            lines.append(format_violation(result.unit, violation))
    lines.append(_summary_line(report))
    return "\n".join(lines)


def _summary_line(report: LintReport) -> str:
    counts = report.counts()
    by_severity = ", ".join(
        f"{counts.get(f'severity:{severity.value}', 0)} {severity.value}"
        for severity in reversed(Severity)
    )
    violations = len(report.violations)
    return (
        f"{counts['units']} unit(s) checked, {violations} violation(s) ({by_severity}); "
        f"{len(report.failing)} at or above '{report.severity_threshold.value}'"
    )


def render(report: LintReport, output_format: OutputFormat | str = OutputFormat.TEXT) -> str:
    if OutputFormat(output_format) is OutputFormat.JSON:
        return render_json(report)
    return render_text(report)
