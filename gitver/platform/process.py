"""The one place gitver starts child processes.

``run`` never raises for a failed command: a non-zero exit, a timeout or an
executable that can't be started all come back as ``Err(ProcessError)``.
Callers that expect a particular exit status (``git symbolic-ref`` exits 1
on a detached HEAD) match on ``returncode``.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from gitver.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]

logger = logging.getLogger(__name__)

# returncode used when there is no real exit status
NOT_STARTED = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that did not exit with status 0.

    Attributes:
        command: argv as executed
        returncode: Exit status, or NOT_STARTED for timeouts and launch failures
        stdout: Captured standard output
        stderr: Captured standard error, or a description of why it never ran
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def started(self) -> bool:
        return self.returncode != NOT_STARTED

    def __str__(self) -> str:
        shown = " ".join(self.command[:4])
        if len(self.command) > 4:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    Args:
        cmd: argv
        cwd: Working directory
        env: Full environment for the child; None inherits ours
        timeout: Seconds before the child is killed; None waits forever
    """
    argv = tuple(cmd)
    logger.debug("exec: %s (cwd=%s)", " ".join(argv), cwd)
    try:
        proc = subprocess.run(
            argv,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(ProcessError(argv, NOT_STARTED, partial, f"Command timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(argv, NOT_STARTED, "", str(e)))

    if proc.returncode == 0:
        return Ok(proc.stdout)

    logger.debug("exit %d: %s", proc.returncode, proc.stderr.strip())
    return Err(ProcessError(argv, proc.returncode, proc.stdout, proc.stderr))
