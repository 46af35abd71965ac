"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdmerge.config import Settings, load_config
from mdmerge.core.analysis import FileAnalysis
from mdmerge.core.merge import SmartMerger
from mdmerge.core.parse import make_parser, read_document
from mdmerge.core.utils.diff import diff_summary, unified_diff
from mdmerge.errors import MergeError


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, config: Optional[Path] = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides, path=config)
    except ValueError as e:
        _fail(str(e))


def _read(path: Path) -> str:
    try:
        return read_document(path)
    except OSError as e:
        _fail(f"Cannot read {path}", e)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def merge_cmd(
    template: Annotated[Path, typer.Argument(help="Template markdown file")],
    destination: Annotated[Path, typer.Argument(help="Destination markdown file")],
    out: Annotated[Optional[Path], typer.Option("--out", "-o", help="Write merged output here instead of stdout")] = None,
    in_place: Annotated[bool, typer.Option("--in-place", help="Overwrite the destination file")] = False,
    preference: Annotated[Optional[str], typer.Option("--preference", help="template or destination")] = None,
    add_template_only: Annotated[Optional[bool], typer.Option("--add-template-only/--skip-template-only", help="Carry over template-only blocks")] = None,
    freeze_token: Annotated[Optional[str], typer.Option("--freeze-token", help="Token used in freeze markers")] = None,
    fuzzy_tables: Annotated[Optional[bool], typer.Option("--fuzzy-tables/--exact-tables", help="Pair tables by header similarity")] = None,
    diff: Annotated[bool, typer.Option("--diff", help="Print a unified diff against the destination to stderr")] = False,
    report: Annotated[Optional[Path], typer.Option("--report", help="Write a JSON merge report")] = None,
    config: Annotated[Optional[Path], typer.Option("--config", help="Settings file (default: .mdmerge.yaml)")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ):
    """Merge TEMPLATE into DESTINATION, keeping destination customizations."""
    _configure_logging(verbose)
    if out and in_place:
        _fail("--out and --in-place are mutually exclusive")
    settings = _settings(overrides={
        "preference": preference, "add_template_only_nodes": add_template_only,
        "freeze_token": freeze_token, "fuzzy_tables": fuzzy_tables,
    }, config=config)
    template_text = _read(template)
    dest_text = _read(destination)

    try:
        result = SmartMerger.from_settings(template_text, dest_text, settings).merge()
    except (MergeError, ValueError) as e:
        _fail("Merge failed", e)

    target = destination if in_place else out
    if target:
        target.write_text(result.content, encoding="utf-8")
        summary = diff_summary(dest_text, result.content)
        typer.echo(
            f"Merged into {target}: {summary}, {len(result.frozen_blocks)} frozen",
            err=True,
        )
    else:
        typer.echo(result.content, nl=False)

    if diff:
        typer.echo(unified_diff(dest_text, result.content, str(destination)), err=True, nl=False)
    if report:
        report.write_text(result.to_report().model_dump_json(indent=2), encoding="utf-8")


def inspect_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to analyse")],
    freeze_token: Annotated[Optional[str], typer.Option("--freeze-token", help="Token used in freeze markers")] = None,
    config: Annotated[Optional[Path], typer.Option("--config", help="Settings file (default: .mdmerge.yaml)")] = None,
    ):
    """List the statement sequence of a document with spans and signatures."""
    settings = _settings(overrides={"freeze_token": freeze_token}, config=config)
    try:
        analysis = FileAnalysis(
            _read(path),
            freeze_token=settings.freeze_token,
            parser=make_parser({"preset": settings.parser_preset}),
        )
    except (MergeError, ValueError) as e:
        _fail(f"Cannot analyse {path}", e)

    for i, stmt in enumerate(analysis.statements):
        typer.echo(f"{i:>3}  {stmt.start_line}-{stmt.end_line}  {stmt.kind.value:<20} {analysis.signature_at(i)}")
    typer.echo(f"{len(analysis)} statement(s), {len(analysis.freeze_blocks)} freeze block(s)")
