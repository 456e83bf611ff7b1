"""Shared helpers for CLI commands."""

from __future__ import annotations

import typer

from gitver.core.errors import ErrorCode
from gitver.core.result import Err, Result
from gitver.output.console import ConsoleProtocol, Style
from gitver.resolve.errors import ResolveError, ResolveErrorKind


def resolve_error_code(kind: ResolveErrorKind) -> ErrorCode:
    if kind == "repository_failure":
        return ErrorCode.REPO_ERROR
    return ErrorCode.USER_ERROR


def unwrap_or_exit[T](result: Result[T, ResolveError], console: ConsoleProtocol) -> T:
    """Value of an Ok; for an Err, print message and hint to stderr and exit.

    The exit code follows the error kind: 3 for a failed git query, 1 for
    everything the user can fix.
    """
    if isinstance(result, Err):
        error = result.error
        console.error(error.message)
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(resolve_error_code(error.kind)))
    return result.value
