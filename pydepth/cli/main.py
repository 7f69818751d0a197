from __future__ import annotations

from enum import Enum
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from pydepth.core.config import AnalyzeConfig, ReportConfig
from pydepth.presets import ConfigError, load_settings
from pydepth.analysis.runner import run_analysis
from pydepth.parsing.python_parser import SourceParseError
from pydepth.reporting.stats import average, format_average, format_lines, select_stats, sort_stats
from pydepth.reporting.exporters import export_json, print_table
from pydepth.utils.logs import configure_logging

HELP = """Calculate the maximum nesting depth of Python functions.

The output fields for each line are:
<depth> <module> <function> <file:row:column>
"""

app = typer.Typer(add_completion=False, help=HELP)
console = Console()


class OutputFormat(str, Enum):
    text = "text"
    table = "table"
    json = "json"


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        typer.echo(f"pydepth {_dist_version('pydepth')}")
    except PackageNotFoundError:
        typer.echo("pydepth (not installed)")
    raise typer.Exit()


@app.command()
def main(
    paths: List[Path] = typer.Argument(..., metavar="PATH...", help="Python files or directories to analyze"),
    over: Optional[int] = typer.Option(
        None, "--over", "-over", metavar="N",
        help="Show functions with depth > N only and exit with code 1 if the set is non-empty",
    ),
    top: Optional[int] = typer.Option(
        None, "--top", "-top", min=0, metavar="N", help="Show the N deepest functions only",
    ),
    avg: bool = typer.Option(
        False, "--avg", "-avg",
        help="Show the average depth over all functions, not depending on --over or --top",
    ),
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", help="Output format"),
    exclude: List[str] = typer.Option([], "--exclude", help="Glob patterns to skip while walking directories"),
    no_gitignore: bool = typer.Option(False, "--no-gitignore", help="Do not honour .gitignore files"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file (default: .pydepth.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit",
    ),
) -> None:
    configure_logging(verbose)

    try:
        settings = load_settings(config)
    except ConfigError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    report_cfg = ReportConfig(
        over=settings.over if over is None else over,
        top=settings.top if top is None else top,
        avg=avg or settings.avg,
        fmt=settings.format if fmt is None else fmt.value,
    )
    analyze_cfg = AnalyzeConfig(
        exclude=[*settings.exclude, *exclude],
        use_gitignore=settings.gitignore and not no_gitignore,
    )

    try:
        stats = run_analysis(paths, analyze_cfg)
    except SourceParseError as e:
        typer.secho(e.message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    selected = select_stats(sort_stats(stats), top=report_cfg.top, over=report_cfg.over)

    if report_cfg.fmt == "json":
        typer.echo(export_json(stats, selected, report_cfg))
    elif report_cfg.fmt == "table":
        print_table(console, stats, selected, report_cfg)
    else:
        for line in format_lines(selected):
            typer.echo(line)
        if report_cfg.avg:
            typer.echo(format_average(average(stats)))

    if report_cfg.gating and selected:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
