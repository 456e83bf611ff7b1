"""Repository capabilities the resolvers depend on.

Any history backend providing these queries can drive version synthesis and
changelog rendering; ``gitver.git.Repository`` is the production one.
"""

from __future__ import annotations

from typing import Protocol

from gitver.core.result import Result
from gitver.git.repository import CommitLine, GitError

__all__ = ["RepositoryAccess"]


class RepositoryAccess(Protocol):
    """Read-only repository queries."""

    def nearest_tag(self, ref: str, *, include_lightweight: bool) -> Result[str | None, GitError]:
        """Nearest tag at or before ``ref``; Ok(None) if there is none."""
        ...

    def nearest_ref_name(self, ref: str) -> Result[str | None, GitError]:
        """Nearest tag or branch name reachable from ``ref``."""
        ...

    def current_branch(self) -> Result[str | None, GitError]:
        """Branch HEAD points to; Ok(None) when detached."""
        ...

    def tag_exists(self, name: str) -> Result[bool, GitError]: ...

    def branch_exists(self, name: str) -> Result[bool, GitError]: ...

    def non_merge_count(self, start: str | None, end: str) -> Result[int, GitError]:
        """Non-merge commits in ``(start, end]``."""
        ...

    def commit_hash(self, ref: str) -> Result[str, GitError]: ...

    def parent_commit(self, ref: str) -> Result[str | None, GitError]:
        """First parent of ``ref``; Ok(None) for a root commit."""
        ...

    def non_merge_commits(
        self, start: str | None, end: str
    ) -> Result[tuple[CommitLine, ...], GitError]:
        """Non-merge commits in ``(start, end]``, newest first."""
        ...

    def count_tags_with_prefix(self, prefix: str) -> Result[int, GitError]: ...
