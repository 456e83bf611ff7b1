"""Nearest non-degenerate tag boundary.

The nearest tag at or before a reference is the natural start of "what
changed", except when the reference sits exactly on that tag: the range would
then be empty. In that case the search steps back past the tag and takes the
nearest tag before it.
"""

from __future__ import annotations

import logging

from gitver.core.result import Err, Ok, Result
from gitver.resolve.access import RepositoryAccess
from gitver.resolve.errors import ResolveError, repository_failure
from gitver.resolve.model import Boundary, TagMatchMode

__all__ = ["nearest_boundary"]

logger = logging.getLogger(__name__)


def nearest_boundary(
    repo: RepositoryAccess,
    ref: str,
    mode: TagMatchMode,
) -> Result[Boundary, ResolveError]:
    """Find the nearest tag strictly before ``ref``.

    Args:
        repo: Repository to query
        ref: End of the range (inclusive)
        mode: Whether lightweight tags are candidates

    Returns:
        Ok(Boundary) whose range holds at least one non-merge commit,
        Err(no_prior_boundary) when history runs out first,
        Err(repository_failure) when a query fails
    """
    include_lightweight = mode.include_lightweight
    found = repo.nearest_tag(ref, include_lightweight=include_lightweight).map_err(
        repository_failure
    )
    if isinstance(found, Err):
        return found

    candidate = found.value
    seen: set[str] = set()
    while candidate is not None and candidate not in seen:
        seen.add(candidate)

        distance = repo.non_merge_count(candidate, ref).map_err(repository_failure)
        if isinstance(distance, Err):
            return distance
        if distance.value > 0:
            logger.debug("boundary for %s (%s): %s", ref, mode, candidate)
            return Ok(Boundary(tag=candidate, ref=ref))

        logger.debug("%s sits on %s, looking before it", ref, candidate)
        parent = repo.parent_commit(candidate).map_err(repository_failure)
        if isinstance(parent, Err):
            return parent
        if parent.value is None:
            break

        found = repo.nearest_tag(parent.value, include_lightweight=include_lightweight).map_err(
            repository_failure
        )
        if isinstance(found, Err):
            return found
        candidate = found.value

    return Err(
        ResolveError(
            kind="no_prior_boundary",
            message=f"no {mode} tag before {ref}",
        )
    )
