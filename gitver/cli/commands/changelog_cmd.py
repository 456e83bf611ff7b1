from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from enum import StrEnum

import typer

from gitver.cli.commands._helpers import unwrap_or_exit
from gitver.cli.context import build_context
from gitver.core.config import ChangelogConfig
from gitver.resolve.changelog import (
    ChangelogOptions,
    check_templates,
    render_rpm_entry,
    render_sections,
)
from gitver.resolve.classifier import classify
from gitver.resolve.model import TagMatchMode


class ChangelogFormat(StrEnum):
    MARKDOWN = "markdown"
    RPM = "rpm"


def changelog(
    ctx: typer.Context,
    ref: str | None = typer.Argument(
        None,
        help="Tag or branch to describe (default: HEAD)",
        show_default=False,
    ),
    tags: list[TagMatchMode] | None = typer.Option(
        None,
        "--tags",
        "-t",
        help="Boundary tag mode; repeat for one section per mode, in order",
        case_sensitive=False,
    ),
    output_format: ChangelogFormat | None = typer.Option(
        None,
        "--format",
        "-f",
        help="markdown sections or a single rpm %changelog entry",
        case_sensitive=False,
    ),
    line_format: str | None = typer.Option(
        None,
        "--line-format",
        help="Per-commit template: {subject} {sha} {short} {author} {date}",
    ),
    on_date: datetime | None = typer.Option(
        None,
        "--date",
        help="Date for the rpm header (default: today)",
        formats=["%Y-%m-%d"],
    ),
) -> None:
    """Print the commits since the previous tag."""
    cli = build_context(ctx.obj)
    cfg = cli.config.changelog

    modes = list(tags) if tags else [TagMatchMode(m) for m in cfg.tags]
    fmt = output_format or ChangelogFormat(cfg.format)
    day = on_date.date() if on_date is not None else date_type.today()
    options = _options(cfg, fmt, line_format, day)
    unwrap_or_exit(check_templates(options), cli.console)

    classified = unwrap_or_exit(classify(cli.repo, ref, modes[0]), cli.console)

    if fmt is ChangelogFormat.RPM:
        mode = TagMatchMode.ANNOTATED
        if TagMatchMode.LIGHTWEIGHT in modes:
            mode = TagMatchMode.LIGHTWEIGHT
        rendered = render_rpm_entry(cli.repo, classified.ref, mode, options)
    else:
        rendered = render_sections(cli.repo, classified.ref, modes, options)

    text = unwrap_or_exit(rendered, cli.console)
    typer.echo(text)


def _options(
    cfg: ChangelogConfig,
    fmt: ChangelogFormat,
    line_format: str | None,
    day: date_type,
) -> ChangelogOptions:
    default_line = cfg.rpm_line_format if fmt is ChangelogFormat.RPM else cfg.line_format
    return ChangelogOptions(
        line_format=line_format or default_line,
        section_header=cfg.section_header,
        history_header=cfg.history_header,
        rpm_header=cfg.rpm_header,
        date=day.strftime(cfg.date_format),
    )
