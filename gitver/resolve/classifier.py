"""Reference classification.

Decides which tier a user-supplied reference belongs to:

- an explicit name is a tag if such a tag exists, else a branch if such a
  branch exists, else an error
- HEAD (or no reference at all) is a tag when it sits exactly on its nearest
  tag, a branch when checked out on one, and a bare commit otherwise
"""

from __future__ import annotations

import logging

from gitver.core.result import Err, Ok, Result
from gitver.resolve.access import RepositoryAccess
from gitver.resolve.errors import ResolveError, repository_failure
from gitver.resolve.model import HEAD, ClassifiedRef, RefKind, TagMatchMode

__all__ = ["HEAD_ALIASES", "classify"]

logger = logging.getLogger(__name__)

HEAD_ALIASES = frozenset({HEAD, "@"})


def classify(
    repo: RepositoryAccess,
    ref: str | None,
    mode: TagMatchMode,
) -> Result[ClassifiedRef, ResolveError]:
    """Resolve ``ref`` to a tag, a branch, or a bare commit.

    Args:
        repo: Repository to query
        ref: Tag or branch name; None or empty means HEAD
        mode: Tag mode used when checking whether HEAD sits on a tag

    Returns:
        Ok(ClassifiedRef), Err(unresolved_reference) for an unknown name,
        Err(repository_failure) when a query fails
    """
    name = (ref or "").strip() or HEAD
    if name in HEAD_ALIASES:
        return _classify_head(repo, mode)

    is_tag = repo.tag_exists(name)
    if isinstance(is_tag, Err):
        return Err(repository_failure(is_tag.error))
    if is_tag.value:
        return Ok(ClassifiedRef(ref=name, kind=RefKind.TAG))

    is_branch = repo.branch_exists(name)
    if isinstance(is_branch, Err):
        return Err(repository_failure(is_branch.error))
    if is_branch.value:
        return Ok(ClassifiedRef(ref=name, kind=RefKind.BRANCH))

    return Err(
        ResolveError(
            kind="unresolved_reference",
            message=f"no tag or branch named '{name}'",
            hint="pass an existing tag or local branch, or omit the reference to use HEAD",
        )
    )


def _classify_head(
    repo: RepositoryAccess, mode: TagMatchMode
) -> Result[ClassifiedRef, ResolveError]:
    nearest = repo.nearest_tag(HEAD, include_lightweight=mode.include_lightweight)
    if isinstance(nearest, Err):
        return Err(repository_failure(nearest.error))

    if nearest.value is not None:
        distance = repo.non_merge_count(nearest.value, HEAD)
        if isinstance(distance, Err):
            return Err(repository_failure(distance.error))
        if distance.value == 0:
            logger.debug("HEAD sits on tag %s", nearest.value)
            return Ok(ClassifiedRef(ref=nearest.value, kind=RefKind.TAG))

    branch = repo.current_branch()
    if isinstance(branch, Err):
        return Err(repository_failure(branch.error))
    if branch.value is not None:
        return Ok(ClassifiedRef(ref=branch.value, kind=RefKind.BRANCH))

    logger.debug("HEAD is detached and untagged")
    return Ok(ClassifiedRef(ref=HEAD, kind=RefKind.COMMIT))
