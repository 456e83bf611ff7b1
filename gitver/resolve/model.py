"""Value types produced by the resolvers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum, auto

from gitver.git.repository import commit_range

__all__ = [
    "BRANCH_SERIES",
    "COMMIT_SERIES",
    "HEAD",
    "UNPARSEABLE_TAG_SERIES",
    "Boundary",
    "ClassifiedRef",
    "RefKind",
    "TagMatchMode",
    "VersionTriple",
]

HEAD = "HEAD"

# MAJOR.MINOR of synthesized versions; tag > branch > commit must hold
UNPARSEABLE_TAG_SERIES = "0.2"
BRANCH_SERIES = "0.1"
COMMIT_SERIES = "0.0"


class RefKind(Enum):
    """Tier a reference resolves to."""

    TAG = auto()
    BRANCH = auto()
    COMMIT = auto()

    def __str__(self) -> str:
        return self.name.lower()


class TagMatchMode(StrEnum):
    """Which tags count when looking for the nearest one."""

    ANNOTATED = "annotated"
    LIGHTWEIGHT = "lightweight"

    @property
    def include_lightweight(self) -> bool:
        return self is TagMatchMode.LIGHTWEIGHT


@dataclass(frozen=True, slots=True)
class ClassifiedRef:
    """A reference together with the tier it resolved to.

    Attributes:
        ref: Tag name, branch name, or HEAD
        kind: The tier
    """

    ref: str
    kind: RefKind


@dataclass(frozen=True, slots=True)
class VersionTriple:
    """VERSION / RELEASE / METADATA for one build.

    Attributes:
        version: Dot-separated non-negative integers
        release: Package release number (1 unless the tag says otherwise)
        metadata: Empty, or a build qualifier starting with "+"
    """

    version: str
    release: int = 1
    metadata: str = ""

    def as_lines(self) -> list[str]:
        return [
            f"VERSION={self.version}",
            f"RELEASE={self.release}",
            f"METADATA={self.metadata}",
        ]


@dataclass(frozen=True, slots=True)
class Boundary:
    """The commit range ``(tag, ref]``.

    Attributes:
        tag: Exclusive start, or None for the beginning of history
        ref: Inclusive end
    """

    tag: str | None
    ref: str

    @property
    def from_beginning(self) -> bool:
        return self.tag is None

    def range_spec(self) -> str:
        return commit_range(self.tag, self.ref)
