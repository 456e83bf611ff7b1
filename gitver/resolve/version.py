"""Version synthesis.

Turns a classified reference into a VersionTriple. Tags shaped like
``v1.2.3`` carry their own version; everything else gets a synthesized
``SERIES.<non-merge commit count>`` version where the series encodes how much
the source is trusted:

    0.2.N   tag whose name doesn't parse
    0.1.N   branch
    0.0.N   bare commit / detached HEAD

Parsed tags dispatch on the text after the numeric part through an ordered
rule table (first match wins):

    v1.0.0-2_beta   release 2, metadata +beta
    v1.0.0-rc1      release 0, metadata +<tags sharing v1.0.0>.rc1
    v1.0.0.beta     release 1, metadata +beta
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from gitver.core.result import Err, Ok, Result
from gitver.resolve.access import RepositoryAccess
from gitver.resolve.errors import ResolveError, repository_failure
from gitver.resolve.model import (
    BRANCH_SERIES,
    COMMIT_SERIES,
    HEAD,
    UNPARSEABLE_TAG_SERIES,
    ClassifiedRef,
    RefKind,
    TagMatchMode,
    VersionTriple,
)

__all__ = ["normalize", "parse_tag", "synthesize"]

logger = logging.getLogger(__name__)

SHA_LENGTH = 8

_TAG_RE = re.compile(r"^v(\d+(?:\.\d+)*)(.*)$")
_SEPARATOR_RE = re.compile(r"[-_/]")
_LEADING_SEPARATORS = "-_./+"


@dataclass(frozen=True, slots=True)
class ParsedTag:
    """A tag split into its numeric version and the remainder.

    Attributes:
        name: Full tag name
        prefix: "v" plus the numeric version, as written in the tag
        version: The numeric version ("1.2.3")
        remainder: Everything after the numeric version
    """

    name: str
    prefix: str
    version: str
    remainder: str


type _RuleHandler = Callable[
    [RepositoryAccess, ParsedTag, re.Match[str]], Result[VersionTriple, ResolveError]
]


@dataclass(frozen=True, slots=True)
class _TagRule:
    name: str
    pattern: re.Pattern[str]
    handler: _RuleHandler


def normalize(text: str) -> str:
    """Replace ``-``, ``_`` and ``/`` with ``.``."""
    return _SEPARATOR_RE.sub(".", text)


def _qualifier(text: str) -> str:
    """Metadata for a free-text tail: "+" and the normalized text, or empty."""
    body = normalize(text.lstrip(_LEADING_SEPARATORS))
    return f"+{body}" if body else ""


def parse_tag(name: str) -> ParsedTag | None:
    """Split a ``v<digits>(.<digits>)*<anything>`` tag, or None if it doesn't match."""
    m = _TAG_RE.match(name)
    if m is None:
        return None
    version = m.group(1) or "0"
    return ParsedTag(
        name=name,
        prefix=f"v{m.group(1)}",
        version=version,
        remainder=m.group(2),
    )


def _numeric_release(
    repo: RepositoryAccess, tag: ParsedTag, m: re.Match[str]
) -> Result[VersionTriple, ResolveError]:
    return Ok(
        VersionTriple(
            version=tag.version,
            release=int(m.group(1)),
            metadata=_qualifier(m.group(2)),
        )
    )


def _release_candidate(
    repo: RepositoryAccess, tag: ParsedTag, m: re.Match[str]
) -> Result[VersionTriple, ResolveError]:
    # Prefix match also counts e.g. v1.2.05 for v1.2.0; kept as is.
    siblings = repo.count_tags_with_prefix(tag.prefix)
    if isinstance(siblings, Err):
        return Err(repository_failure(siblings.error))
    return Ok(
        VersionTriple(
            version=tag.version,
            release=0,
            metadata=f"+{siblings.value}{normalize(tag.remainder)}",
        )
    )


def _plain(
    repo: RepositoryAccess, tag: ParsedTag, m: re.Match[str]
) -> Result[VersionTriple, ResolveError]:
    return Ok(VersionTriple(version=tag.version, release=1, metadata=_qualifier(tag.remainder)))


TAG_RULES: tuple[_TagRule, ...] = (
    _TagRule("numeric-release", re.compile(r"^-(\d+)(.*)$"), _numeric_release),
    _TagRule("release-candidate", re.compile(r"^[-_./]*rc\d+"), _release_candidate),
    _TagRule("plain", re.compile(r""), _plain),
)


def synthesize(
    repo: RepositoryAccess,
    classified: ClassifiedRef,
    mode: TagMatchMode = TagMatchMode.ANNOTATED,
) -> Result[VersionTriple, ResolveError]:
    """Compute the version triple for a classified reference.

    Args:
        repo: Repository to query
        classified: Output of the reference classifier
        mode: Tag mode used to name the nearest tag of a bare commit

    Returns:
        Ok(VersionTriple), or Err(repository_failure)
    """
    match classified.kind:
        case RefKind.TAG:
            return _from_tag(repo, classified.ref)
        case RefKind.BRANCH:
            return _synthesized(repo, BRANCH_SERIES, classified.ref, name=classified.ref)
        case RefKind.COMMIT:
            return _from_commit(repo, classified.ref, mode)


def _from_tag(repo: RepositoryAccess, name: str) -> Result[VersionTriple, ResolveError]:
    parsed = parse_tag(name)
    if parsed is None:
        logger.debug("tag %s does not parse, using the %s series", name, UNPARSEABLE_TAG_SERIES)
        return _synthesized(repo, UNPARSEABLE_TAG_SERIES, HEAD, name=name)

    for rule in TAG_RULES:
        m = rule.pattern.match(parsed.remainder)
        if m is not None:
            logger.debug("tag %s matched rule %s", name, rule.name)
            return rule.handler(repo, parsed, m)

    raise AssertionError("the plain rule matches every remainder")


def _from_commit(
    repo: RepositoryAccess, ref: str, mode: TagMatchMode
) -> Result[VersionTriple, ResolveError]:
    nearest = repo.nearest_tag(ref, include_lightweight=mode.include_lightweight)
    if isinstance(nearest, Err):
        return Err(repository_failure(nearest.error))

    name = nearest.value
    if name is None:
        any_ref = repo.nearest_ref_name(ref)
        if isinstance(any_ref, Err):
            return Err(repository_failure(any_ref.error))
        name = any_ref.value

    return _synthesized(repo, COMMIT_SERIES, ref, name=name or "")


def _synthesized(
    repo: RepositoryAccess,
    series: str,
    ref: str,
    *,
    name: str,
) -> Result[VersionTriple, ResolveError]:
    """``series.<count>`` with ``+<name>.sha.<hash>`` metadata, both taken at ``ref``."""
    count = repo.non_merge_count(None, ref)
    if isinstance(count, Err):
        return Err(repository_failure(count.error))

    sha = repo.commit_hash(ref)
    if isinstance(sha, Err):
        return Err(repository_failure(sha.error))

    short = sha.value[:SHA_LENGTH]
    qualifier = f"{normalize(name)}.sha.{short}" if name else f"sha.{short}"
    return Ok(
        VersionTriple(version=f"{series}.{count.value}", release=1, metadata=f"+{qualifier}")
    )
