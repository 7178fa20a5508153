from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from sectionlint.config import lint_options
from sectionlint.engine import lint_many
from sectionlint.exceptions import ConfigError, SyntaxTreeError
from sectionlint.model import LintOptions, LintResult
from sectionlint.report import OutputFormat, build_report, render
from sectionlint.syntax.loader import dump_unit_path, load_unit_path
from sectionlint.syntax.model import SyntaxUnit
from sectionlint.taxonomy import SECTION_TITLES

app = typer.Typer(add_completion=False)
logger = logging.getLogger(__name__)

_TREE_SUFFIX = ".json"
_EXIT_USAGE = 2


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


def discover_documents(paths: List[Path]) -> list[Path]:
    """Expand directories to the syntax-tree documents below them."""
    out: list[Path] = []
    for path in paths:
        if path.is_dir():
            out.extend(sorted(p for p in path.rglob(f"*{_TREE_SUFFIX}") if p.is_file()))
        else:
            out.append(path)
    return out


def _resolve_options(
    *,
    root: Path,
    config: Optional[Path],
    severity_threshold: Optional[str],
    naming: Optional[bool],
) -> LintOptions:
    payload: dict[str, object] = {
        "severity_threshold": severity_threshold,
        "naming_checks": naming,
    }
    try:
        return lint_options(payload, root=root, config_path=config)
    except ConfigError as exc:
        typer.echo(f"configuration error: {exc}", err=True)
        raise typer.Exit(code=_EXIT_USAGE)


def _load_documents(documents: list[Path]) -> list[SyntaxUnit]:
    units: list[SyntaxUnit] = []
    for document in documents:
        try:
            units.append(load_unit_path(document))
        except SyntaxTreeError as exc:
            typer.echo(f"error: {exc}", err=True)
            raise typer.Exit(code=_EXIT_USAGE)
    return units


def _write_fixes(
    documents: list[Path],
    results: list[LintResult],
    *,
    root: Path,
    write_source: bool,
) -> None:
    for document, result in zip(documents, results):
        if not result.fixed or result.fixed_unit is None:
            continue
        dump_unit_path(result.fixed_unit, document)
        logger.info("wrote fixed syntax tree to %s", document)
        if write_source and result.fixed_source is not None:
            target = Path(result.unit)
            if not target.is_absolute():
                target = root / target
            target.write_text(result.fixed_source, encoding="utf-8")
            logger.info("wrote fixed source to %s", target)


@app.command("check")
def check(
    paths: List[Path] = typer.Argument(..., help="Syntax-tree documents or directories."),
    fix: bool = typer.Option(False, "--fix", help="Reorder statements and write them back."),
    output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--format"),
    severity_threshold: Optional[str] = typer.Option(None, "--severity-threshold"),
    config: Optional[Path] = typer.Option(None, "--config"),
    naming: Optional[bool] = typer.Option(None, "--naming/--no-naming"),
    write_source: bool = typer.Option(
        False, "--write-source", help="With --fix, also rewrite the unit's source file."
    ),
    root: Path = typer.Option(Path("."), "--root"),
    jobs: int = typer.Option(0, "--jobs", min=0, help="Worker threads (0 = default)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Check component units against the section ordering convention."""
    _configure_logging(verbose)
    options = _resolve_options(
        root=root,
        config=config,
        severity_threshold=severity_threshold,
        naming=naming,
    )
    documents = discover_documents(paths)
    if not documents:
        typer.echo("no syntax-tree documents found", err=True)
        raise typer.Exit(code=_EXIT_USAGE)
    units = _load_documents(documents)
    results = lint_many(units, options, fix=fix, max_workers=jobs or None)
    if fix:
        _write_fixes(documents, results, root=root, write_source=write_source)
    report = build_report(results, severity_threshold=options.severity_threshold)
    typer.echo(render(report, output_format))
    raise typer.Exit(code=report.exit_code())


@app.command("sections")
def sections(
    config: Optional[Path] = typer.Option(None, "--config"),
    root: Path = typer.Option(Path("."), "--root"),
) -> None:
    """Print the effective section order."""
    options = _resolve_options(root=root, config=config, severity_threshold=None, naming=None)
    for position, section in enumerate(options.section_order, start=1):
        sortable = "sorted" if section in options.sortable_sections else "source order"
        typer.echo(f"{position:2d}. {SECTION_TITLES[section]} ({section.value}, {sortable})")


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
