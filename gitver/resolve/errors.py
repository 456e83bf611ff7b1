"""Error types for reference resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from gitver.git.repository import GitError

ResolveErrorKind = Literal[
    "unresolved_reference",
    "no_prior_boundary",
    "repository_failure",
    "invalid_template",
]


@dataclass(frozen=True, slots=True)
class ResolveError:
    """Canonical resolution error payload.

    ``no_prior_boundary`` is recovered by the changelog renderer; the other
    kinds end the run.
    """

    kind: ResolveErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def repository_failure(error: GitError) -> ResolveError:
    """Wrap a failed git query."""
    return ResolveError(
        kind="repository_failure",
        message=error.message,
        hint=f"git {error.command} exited with {error.returncode}",
    )
