from __future__ import annotations

from pathlib import Path

import typer

from gitver import __version__
from gitver.cli.commands.changelog_cmd import changelog
from gitver.cli.commands.version_cmd import version
from gitver.cli.context import GlobalOptions
from gitver.output.log import setup_logging


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Derive version triples and changelogs from git history.",
)


# Commands
app.command()(version)
app.command()(changelog)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    show_version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-C",
        help="Repository to inspect (any directory inside the work tree)",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: .gitver.toml at the repository root)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log git queries to stderr."),
) -> None:
    setup_logging(verbose=verbose)
    ctx.obj = GlobalOptions(repo_path=repo, config_path=config)


def main() -> None:
    app()
