"""Git access layer.

Usage:
    from gitver.git import Repository

    repo = Repository(Path("."))
    count = repo.non_merge_count(None, "HEAD")
"""

from gitver.git.repository import (
    CommitLine,
    GitError,
    Repository,
    commit_range,
)

__all__ = [
    "CommitLine",
    "GitError",
    "Repository",
    "commit_range",
]
