"""Run command: lint a project and print its quality report."""

from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.markup import escape

from ..analysis import rank_issues
from ..api import parse
from ..config import load_config
from ..exceptions import GoalityError
from ..formatters import format_categories, get_formatter
from ..logging_config import get_logger
from ..tree import ViewOptions
from . import app
from ._common import console, project_relative_paths, resolve_config_path, split_values

logger = get_logger(__name__)


@app.command()
def run(
    path: Path = typer.Argument(
        Path("."),
        help="Root of the Go project (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Path to a golangci-lint configuration file that should be used.",
    ),
    excludes: Optional[List[str]] = typer.Option(
        None,
        "-e",
        "--excludes",
        help="Names of directories that should be skipped.",
    ),
    linters: Optional[List[str]] = typer.Option(
        None,
        "-l",
        "--linters",
        help="Specific linters to run.",
    ),
    depth: int = typer.Option(
        -1,
        "-d",
        "--depth",
        help="Path granularity at which to perform the quality analysis.",
    ),
    paths: Optional[List[str]] = typer.Option(
        None,
        "-p",
        "--paths",
        help="Specific paths for which to provide aggregate quality analysis results.",
    ),
    output_format: str = typer.Option(
        "screen",
        "-f",
        "--format",
        help="Format to use when printing the results.",
        click_type=click.Choice(["screen", "csv", "json"]),
    ),
    categories: bool = typer.Option(
        False,
        "--categories",
        help="Rank recurring kinds of issues instead of printing per-path counts.",
    ),
    settings: Optional[Path] = typer.Option(
        None,
        "--settings",
        help="goality settings file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        hidden=True,
    ),
):
    """
    Perform a quality analysis of the specified project.

    Runs golangci-lint over the directory tree rooted at PATH and reports the
    number of issues per linter, along with the number of issues per 1000
    lines of code.

    [bold cyan]Examples:[/bold cyan]

      goality run

      goality run --config=~/.golangci.yaml --depth 1 ./cmd

      goality run -l govet,unused -p internal/server -f csv
    """
    try:
        cwd = Path.cwd()
        project_path = path.resolve()
        requested = project_relative_paths(list(split_values(paths) or ()), project_path)

        options = load_config(
            config_file=settings,
            config_path=resolve_config_path(config, cwd),
            linters=split_values(linters),
            exclude_dirs=split_values(excludes),
        )

        project = parse(str(project_path), options)
        view = project.generate_view(ViewOptions(depth=depth, paths=tuple(requested)))

        if categories:
            output = format_categories(rank_issues(view), output_format)
        else:
            output = get_formatter(output_format).format(view)
        typer.echo(output, nl=False)

    except GoalityError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    logger.debug("Execution successful.")
