from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from gitver.core.config import CONFIG_FILENAME, Config, load_config, load_config_or_default
from gitver.core.errors import ErrorCode
from gitver.core.result import Err
from gitver.git.repository import Repository
from gitver.output.console import ConsoleProtocol, RichConsole, Style
from gitver.resolve.access import RepositoryAccess


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the command name."""

    repo_path: Path = Path(".")
    config_path: Path | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: RepositoryAccess
    config: Config
    console: ConsoleProtocol


def build_context(options: GlobalOptions | None) -> CLIContext:
    options = options or GlobalOptions()
    console = RichConsole()

    try:
        start = options.repo_path.expanduser().resolve()
    except OSError as e:
        console.error(f"invalid --repo: {e}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    toplevel = Repository(start).toplevel()
    if isinstance(toplevel, Err):
        console.error(f"not a git repository: {start}")
        console.print(toplevel.error.message, Style.DIM)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    root = toplevel.value

    if options.config_path is not None:
        config_result = load_config(options.config_path.expanduser())
    else:
        config_result = load_config_or_default(root / CONFIG_FILENAME)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        repo=Repository(root),
        config=config_result.value,
        console=console,
    )
