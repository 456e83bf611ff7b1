"""Changelog rendering.

Two layouts over the same commit lists:

- sections: one markdown section per requested tag mode, each listing the
  commits since that mode's boundary
- rpm: a single ``%changelog`` entry with a dated header and dash bullets

The renderer only picks ranges and orders lines; how a commit line and a
header look is decided by the templates in ChangelogOptions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from gitver.core.result import Err, Ok, Result
from gitver.git.repository import CommitLine
from gitver.resolve.access import RepositoryAccess
from gitver.resolve.boundary import nearest_boundary
from gitver.resolve.errors import ResolveError, repository_failure
from gitver.resolve.model import Boundary, TagMatchMode

__all__ = [
    "ChangelogOptions",
    "boundary_or_history",
    "check_templates",
    "format_line",
    "render_rpm_entry",
    "render_sections",
]

_SAMPLE_COMMIT = CommitLine(sha="0" * 40, subject="subject", author="author", date="1970-01-01")


@dataclass(frozen=True, slots=True)
class ChangelogOptions:
    """Templates and ambient values for rendering.

    Attributes:
        line_format: Per-commit template; fields {sha} {short} {subject} {author} {date}
        section_header: Markdown header; field {tag}
        history_header: Markdown header used when no earlier tag exists
        rpm_header: rpm entry header; fields {date} {tag} {sha}
        date: Already formatted date for the rpm header
    """

    line_format: str = "* {subject}"
    section_header: str = "## Changes since {tag}"
    history_header: str = "## Changes since the beginning of history"
    rpm_header: str = "* {date} {tag} {sha}"
    date: str = ""


def format_line(commit: CommitLine, template: str) -> str:
    return template.format(
        sha=commit.sha,
        short=commit.short_sha,
        subject=commit.subject,
        author=commit.author,
        date=commit.date,
    )


def check_templates(options: ChangelogOptions) -> Result[None, ResolveError]:
    """Fail early on a template with unknown fields or broken braces."""
    checks = (
        ("line format", lambda: format_line(_SAMPLE_COMMIT, options.line_format)),
        ("section header", lambda: options.section_header.format(tag="v0")),
        ("history header", lambda: options.history_header.format()),
        ("rpm header", lambda: options.rpm_header.format(date="", tag="v0", sha="0" * 8)),
    )
    for label, render in checks:
        try:
            render()
        except (AttributeError, IndexError, KeyError, ValueError) as e:
            return Err(
                ResolveError(
                    kind="invalid_template",
                    message=f"invalid {label} template: {e}",
                    hint="fields are written as {name}; double braces for literal ones",
                )
            )
    return Ok(None)


def boundary_or_history(
    repo: RepositoryAccess,
    ref: str,
    mode: TagMatchMode,
) -> Result[Boundary, ResolveError]:
    """nearest_boundary, with "no earlier tag" meaning the whole history."""
    boundary = nearest_boundary(repo, ref, mode)
    if isinstance(boundary, Err) and boundary.error.kind == "no_prior_boundary":
        return Ok(Boundary(tag=None, ref=ref))
    return boundary


def _commit_lines(
    repo: RepositoryAccess,
    boundary: Boundary,
    template: str,
) -> Result[list[str], ResolveError]:
    return (
        repo.non_merge_commits(boundary.tag, boundary.ref)
        .map(lambda commits: [format_line(c, template) for c in commits])
        .map_err(repository_failure)
    )


def render_sections(
    repo: RepositoryAccess,
    ref: str,
    modes: Sequence[TagMatchMode],
    options: ChangelogOptions,
) -> Result[str, ResolveError]:
    """Render one section per mode, in the order given.

    Sections are separated by a single blank line; there is no trailing
    blank line.
    """
    sections: list[str] = []
    for mode in modes:
        boundary = boundary_or_history(repo, ref, mode)
        if isinstance(boundary, Err):
            return boundary

        lines = _commit_lines(repo, boundary.value, options.line_format)
        if isinstance(lines, Err):
            return lines

        tag = boundary.value.tag
        if tag is None:
            header = options.history_header.format()
        else:
            header = options.section_header.format(tag=tag)
        sections.append("\n".join([header, *lines.value]))

    return Ok("\n\n".join(sections))


def render_rpm_entry(
    repo: RepositoryAccess,
    ref: str,
    mode: TagMatchMode,
    options: ChangelogOptions,
) -> Result[str, ResolveError]:
    """Render a single rpm changelog entry for ``ref``.

    The header names the nearest tag at or before ``ref`` (or ``ref`` itself
    when there is none); the bullets cover the commits since the boundary.
    """
    boundary = boundary_or_history(repo, ref, mode)
    if isinstance(boundary, Err):
        return boundary

    nearest = repo.nearest_tag(ref, include_lightweight=mode.include_lightweight).map_err(
        repository_failure
    )
    if isinstance(nearest, Err):
        return nearest

    sha = repo.commit_hash(ref).map_err(repository_failure)
    if isinstance(sha, Err):
        return sha

    lines = _commit_lines(repo, boundary.value, options.line_format)
    if isinstance(lines, Err):
        return lines

    header = options.rpm_header.format(
        date=options.date,
        tag=nearest.value or ref,
        sha=sha.value[:8],
    )
    return Ok("\n".join([header, *(f"- {line}" for line in lines.value)]))
