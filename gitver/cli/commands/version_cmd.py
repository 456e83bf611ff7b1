from __future__ import annotations

import typer

from gitver.cli.commands._helpers import unwrap_or_exit
from gitver.cli.context import build_context
from gitver.resolve.classifier import classify
from gitver.resolve.model import TagMatchMode
from gitver.resolve.version import synthesize


def version(
    ctx: typer.Context,
    ref: str | None = typer.Argument(
        None,
        help="Tag or branch to describe (default: HEAD)",
        show_default=False,
    ),
    tags: TagMatchMode | None = typer.Option(
        None,
        "--tags",
        "-t",
        help="Tags considered when locating HEAD (default: from config, else annotated)",
        case_sensitive=False,
    ),
) -> None:
    """Print VERSION, RELEASE and METADATA for a reference."""
    cli = build_context(ctx.obj)
    mode = tags or TagMatchMode(cli.config.version.tags)

    classified = unwrap_or_exit(classify(cli.repo, ref, mode), cli.console)
    triple = unwrap_or_exit(synthesize(cli.repo, classified, mode), cli.console)

    for line in triple.as_lines():
        typer.echo(line)
