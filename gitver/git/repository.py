"""Git repository access.

This module provides the Repository class: the read-only git queries the
version and changelog resolvers are built on. Every query returns a Result
so callers decide which failures are recoverable.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.nearest_tag("HEAD", include_lightweight=True):
        case Ok(None):
            print("no tag reachable from HEAD")
        case Ok(tag):
            print(f"HEAD descends from {tag}")
        case Err(e):
            print(f"describe failed: {e.message}")
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from gitver.core.result import Err, Ok, Result
from gitver.platform.process import ProcessError
from gitver.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

# git log record layout: fields split by US, records terminated by RS
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = "%H%x1f%s%x1f%an%x1f%as%x1e"

# describe failures that mean "nothing to describe with", not a broken repo
_NO_NAMES_RE = re.compile(r"No names found|No (?:annotated )?tags can describe")

_DESCRIBE_ALL_PREFIXES = ("heads/", "tags/", "remotes/")

__all__ = [
    "CommitLine",
    "GitError",
    "Repository",
    "commit_range",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code (-1 if git could not be run)
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class CommitLine:
    """A single non-merge commit as listed by ``git log``.

    Attributes:
        sha: Full commit hash
        subject: First line of the commit message
        author: Author name
        date: Author date (YYYY-MM-DD)
    """

    sha: str
    subject: str
    author: str = ""
    date: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:8]


def commit_range(start: str | None, end: str) -> str:
    """Git revision range for ``(start, end]``; the whole history when start is None."""
    if start is None:
        return end
    return f"{start}..{end}"


class Repository:
    """Read-only view of a git repository.

    Attributes:
        path: Path to the repository (any directory inside the work tree)
    """

    def __init__(self, path: Path) -> None:
        """Initialize repository.

        Args:
            path: Path to the repository root or a directory inside it
        """
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository root."""
        return (self.path / ".git").exists()

    def toplevel(self) -> Result[Path, GitError]:
        """Return the root of the work tree containing ``path``."""
        result = self._run(["rev-parse", "--show-toplevel"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse --show-toplevel", e))
            case Ok(stdout):
                return Ok(Path(stdout.strip()))

    def nearest_tag(self, ref: str, *, include_lightweight: bool) -> Result[str | None, GitError]:
        """Find the nearest tag at or before ``ref``.

        Args:
            ref: Revision to start from
            include_lightweight: Also consider lightweight (non-annotated) tags

        Returns:
            Ok(tag name), Ok(None) when no tag is reachable, Err on git failure
        """
        args = ["describe", "--abbrev=0"]
        if include_lightweight:
            args.append("--tags")
        args.append(ref)

        result = self._run(args)
        match result:
            case Err(e) if _NO_NAMES_RE.search(e.stderr):
                logger.debug("no tag reachable from %s", ref)
                return Ok(None)
            case Err(e):
                return Err(self._error("describe", e))
            case Ok(stdout):
                return Ok(stdout.strip() or None)

    def nearest_ref_name(self, ref: str) -> Result[str | None, GitError]:
        """Find the nearest tag or branch name reachable from ``ref``.

        Uses ``git describe --all`` and strips the ``heads/``, ``tags/`` or
        ``remotes/`` namespace from the answer.
        """
        result = self._run(["describe", "--all", "--abbrev=0", ref])
        match result:
            case Err(e) if _NO_NAMES_RE.search(e.stderr):
                return Ok(None)
            case Err(e):
                return Err(self._error("describe --all", e))
            case Ok(stdout):
                name = stdout.strip()
                for prefix in _DESCRIBE_ALL_PREFIXES:
                    if name.startswith(prefix):
                        name = name[len(prefix) :]
                        break
                return Ok(name or None)

    def current_branch(self) -> Result[str | None, GitError]:
        """Get the branch HEAD points to.

        Returns:
            Ok(branch name), Ok(None) when HEAD is detached, Err on git failure
        """
        result = self._run(["symbolic-ref", "--quiet", "--short", "HEAD"])
        match result:
            case Err(e) if e.returncode == 1:
                return Ok(None)
            case Err(e):
                return Err(self._error("symbolic-ref", e))
            case Ok(stdout):
                return Ok(stdout.strip() or None)

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        """Check whether a tag with exactly this name exists."""
        return self._ref_exists(f"refs/tags/{name}")

    def branch_exists(self, name: str) -> Result[bool, GitError]:
        """Check whether a local branch with exactly this name exists."""
        return self._ref_exists(f"refs/heads/{name}")

    def non_merge_count(self, start: str | None, end: str) -> Result[int, GitError]:
        """Count non-merge commits in ``(start, end]``.

        Args:
            start: Exclusive lower bound, or None for the whole history
            end: Inclusive upper bound
        """
        result = self._run(["rev-list", "--count", "--no-merges", commit_range(start, end)])
        match result:
            case Err(e):
                return Err(self._error("rev-list --count", e))
            case Ok(stdout):
                text = stdout.strip()
                if not text.isdigit():
                    return Err(
                        GitError(command="rev-list --count", message=f"unexpected output: {text!r}")
                    )
                return Ok(int(text))

    def commit_hash(self, ref: str) -> Result[str, GitError]:
        """Resolve ``ref`` to the full hash of the commit it points at."""
        result = self._run(["rev-parse", "--verify", f"{ref}^{{commit}}"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def parent_commit(self, ref: str) -> Result[str | None, GitError]:
        """Get the first parent of ``ref``.

        Returns:
            Ok(hash), Ok(None) for a root commit, Err on git failure
        """
        result = self._run(["rev-parse", "--verify", "--quiet", f"{ref}^"])
        match result:
            case Err(e) if e.returncode == 1:
                return Ok(None)
            case Err(e):
                return Err(self._error("rev-parse", e))
            case Ok(stdout):
                return Ok(stdout.strip() or None)

    def non_merge_commits(
        self, start: str | None, end: str
    ) -> Result[tuple[CommitLine, ...], GitError]:
        """List non-merge commits in ``(start, end]``, newest first."""
        result = self._run(
            ["log", "--no-merges", f"--format={_LOG_FORMAT}", commit_range(start, end)]
        )
        match result:
            case Err(e):
                return Err(self._error("log", e))
            case Ok(stdout):
                return Ok(self._parse_log(stdout))

    def count_tags_with_prefix(self, prefix: str) -> Result[int, GitError]:
        """Count tags whose name starts with ``prefix``."""
        result = self._run(["tag", "--list", f"{prefix}*"])
        match result:
            case Err(e):
                return Err(self._error("tag --list", e))
            case Ok(stdout):
                return Ok(sum(1 for ln in stdout.splitlines() if ln.strip()))

    def _ref_exists(self, full_ref: str) -> Result[bool, GitError]:
        result = self._run(["rev-parse", "--verify", "--quiet", full_ref])
        match result:
            case Err(e) if e.returncode == 1:
                return Ok(False)
            case Err(e):
                return Err(self._error("rev-parse --verify", e))
            case Ok(_):
                return Ok(True)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository.

        Messages are forced to the C locale so stderr can be matched.
        """
        env = {**os.environ, "LC_ALL": "C"}
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            env=env,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    def _error(self, command: str, e: ProcessError) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or f"git {command} failed",
            returncode=e.returncode,
        )

    def _parse_log(self, output: str) -> tuple[CommitLine, ...]:
        """Parse records produced by ``_LOG_FORMAT``."""
        commits: list[CommitLine] = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record.strip():
                continue
            fields = record.split(_FIELD_SEP)
            if len(fields) < 2:
                continue
            fields += [""] * (4 - len(fields))
            commits.append(
                CommitLine(sha=fields[0], subject=fields[1], author=fields[2], date=fields[3])
            )
        return tuple(commits)
