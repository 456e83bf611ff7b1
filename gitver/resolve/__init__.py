"""Reference classification, boundary search, version synthesis and changelogs."""

from gitver.resolve.access import RepositoryAccess
from gitver.resolve.boundary import nearest_boundary
from gitver.resolve.changelog import (
    ChangelogOptions,
    check_templates,
    render_rpm_entry,
    render_sections,
)
from gitver.resolve.classifier import classify
from gitver.resolve.errors import ResolveError
from gitver.resolve.model import (
    Boundary,
    ClassifiedRef,
    RefKind,
    TagMatchMode,
    VersionTriple,
)
from gitver.resolve.version import synthesize

__all__ = [
    # access
    "RepositoryAccess",
    # model
    "Boundary",
    "ClassifiedRef",
    "RefKind",
    "TagMatchMode",
    "VersionTriple",
    # errors
    "ResolveError",
    # operations
    "ChangelogOptions",
    "check_templates",
    "classify",
    "nearest_boundary",
    "render_rpm_entry",
    "render_sections",
    "synthesize",
]
