"""The lint pipeline: extract, classify, graph, validate and optionally fix.

`lint` is a pure function of its inputs. It performs no I/O and shares no
mutable state, so callers may run it for many units concurrently.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Iterable

from sectionlint.autofix import plan_fix
from sectionlint.classify import classify_all
from sectionlint.extract import extract_declarations
from sectionlint.graph import build_section_graphs
from sectionlint.model import LintOptions, LintResult
from sectionlint.syntax.model import SyntaxUnit
from sectionlint.validate import validate

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = LintOptions()


def lint(
    unit: SyntaxUnit,
    options: LintOptions | None = None,
    *,
    fix: bool = False,
) -> LintResult:
    options = options or DEFAULT_OPTIONS
    extraction = extract_declarations(unit, props_type_names=options.props_type_names)
    if not extraction.declarations:
        logger.debug("skipping %s: %s", unit.unit, extraction.diagnostics)
        return LintResult(unit=unit.unit, diagnostics=extraction.diagnostics)

    declarations = extraction.declarations
    classifications = classify_all(declarations)
    graphs = build_section_graphs(declarations, classifications)
    validation = validate(declarations, classifications, graphs, options)
    logger.debug(
        "%s: %d declarations, %d violations",
        unit.unit,
        len(declarations),
        len(validation.violations),
    )
    skipped = tuple(
        section for section in options.section_order if section in validation.cyclic_sections
    )
    if not fix:
        return LintResult(
            unit=unit.unit,
            violations=validation.violations,
            diagnostics=extraction.diagnostics,
            skipped_sections=skipped,
        )

    plan = plan_fix(unit, declarations, validation.order, skipped_sections=skipped)
    if plan.changed:
        logger.info("%s: reordered statements", unit.unit)
    return LintResult(
        unit=unit.unit,
        violations=validation.violations,
        diagnostics=extraction.diagnostics + tuple(plan.diagnostics),
        fixed_unit=plan.unit,
        fixed_source=plan.source,
        skipped_sections=skipped,
        fixed=plan.changed,
    )


def fix(unit: SyntaxUnit, options: LintOptions | None = None) -> SyntaxUnit:
    """The unit with its statements in canonical order (unchanged if skipped)."""
    result = lint(unit, options, fix=True)
    return result.fixed_unit if result.fixed_unit is not None else unit


def lint_many(
    units: Iterable[SyntaxUnit],
    options: LintOptions | None = None,
    *,
    fix: bool = False,
    max_workers: int | None = None,
) -> list[LintResult]:
    """Lint independent units on a thread pool; results keep input order."""
    items = list(units)
    if max_workers == 1 or len(items) <= 1:
        return [lint(unit, options, fix=fix) for unit in items]
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(lint, unit, options, fix=fix) for unit in items]
        return [future.result() for future in futures]
