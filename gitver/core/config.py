"""Loading of the optional ``.gitver.toml`` file.

Configuration lives in ```.gitver.toml``` at the repository root (or any path
given with ``--config``). Every key is optional; command-line options win over
file values.

    [version]
    tags = "annotated"

    [changelog]
    tags = ["annotated", "lightweight"]
    format = "markdown"
    line_format = "* {subject}"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table, get_template

__all__ = [
    "CONFIG_FILENAME",
    "TAG_MODES",
    "CHANGELOG_FORMATS",
    "ChangelogConfig",
    "Config",
    "ConfigError",
    "VersionConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = ".gitver.toml"

TAG_MODES = ("annotated", "lightweight")
CHANGELOG_FORMATS = ("markdown", "rpm")

DEFAULT_LINE_FORMAT = "* {subject}"
DEFAULT_RPM_LINE_FORMAT = "{subject}"
DEFAULT_SECTION_HEADER = "## Changes since {tag}"
DEFAULT_HISTORY_HEADER = "## Changes since the beginning of history"
DEFAULT_RPM_HEADER = "* {date} {tag} {sha}"
DEFAULT_DATE_FORMAT = "%a %b %d %Y"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Why a config file was rejected."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class VersionConfig:
    """Defaults for ``gitver version``."""

    tags: str = "annotated"


@dataclass(frozen=True, slots=True)
class ChangelogConfig:
    """Defaults for ``gitver changelog``.

    Attributes:
        tags: Boundary modes, in the order sections are rendered
        format: "markdown" (sections) or "rpm" (single dated entry)
        line_format: Per-commit template for markdown sections
        rpm_line_format: Per-commit template for rpm bullets (the "- " is added)
        section_header: Markdown section header, ``{tag}`` is the boundary
        history_header: Markdown header when no earlier tag exists
        rpm_header: rpm entry header with ``{date}``, ``{tag}`` and ``{sha}``
        date_format: strftime pattern for ``{date}``
    """

    tags: tuple[str, ...] = ("annotated",)
    format: str = "markdown"
    line_format: str = DEFAULT_LINE_FORMAT
    rpm_line_format: str = DEFAULT_RPM_LINE_FORMAT
    section_header: str = DEFAULT_SECTION_HEADER
    history_header: str = DEFAULT_HISTORY_HEADER
    rpm_header: str = DEFAULT_RPM_HEADER
    date_format: str = DEFAULT_DATE_FORMAT


@dataclass(frozen=True, slots=True)
class Config:
    """Settings from ``.gitver.toml``, defaults filled in."""

    version: VersionConfig = field(default_factory=VersionConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: On an unknown tag mode or changelog format.
        """
        version: StrDict = get_table(data, "version") or {}
        changelog: StrDict = get_table(data, "changelog") or {}

        version_tags = get_str(version, "tags") or "annotated"
        _check_choice("version.tags", version_tags, TAG_MODES)

        changelog_tags = tuple(get_str_list(changelog, "tags") or ["annotated"])
        for mode in changelog_tags:
            _check_choice("changelog.tags", mode, TAG_MODES)

        changelog_format = get_str(changelog, "format") or "markdown"
        _check_choice("changelog.format", changelog_format, CHANGELOG_FORMATS)

        return cls(
            version=VersionConfig(tags=version_tags),
            changelog=ChangelogConfig(
                tags=changelog_tags,
                format=changelog_format,
                line_format=get_template(changelog, "line_format") or DEFAULT_LINE_FORMAT,
                rpm_line_format=get_template(changelog, "rpm_line_format")
                or DEFAULT_RPM_LINE_FORMAT,
                section_header=get_template(changelog, "section_header")
                or DEFAULT_SECTION_HEADER,
                history_header=get_template(changelog, "history_header")
                or DEFAULT_HISTORY_HEADER,
                rpm_header=get_template(changelog, "rpm_header") or DEFAULT_RPM_HEADER,
                date_format=get_template(changelog, "date_format") or DEFAULT_DATE_FORMAT,
            ),
        )


def _check_choice(key: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise ValueError(f"{key} must be one of {', '.join(choices)} (got '{value}')")


def _read_table(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    def fail(message: str) -> Err[ConfigError]:
        return Err(ConfigError(message, path=path))

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return fail(f"Config file not found: {path}")
    except PermissionError:
        return fail(f"Cannot read config (permission denied): {path}")
    except (OSError, UnicodeDecodeError) as e:
        return fail(f"Cannot read config: {e}")

    try:
        parsed: object = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        return fail(f"Invalid TOML in {path.name}: {e}")

    table = as_str_dict(parsed)
    if table is None:
        return fail("Top level of the config must be a table")
    return Ok(table)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Read ``path`` and validate it into a Config.

    Unknown tables and keys are ignored; a known key with a bad value is an
    ``Invalid config`` error naming the key.
    """
    table = _read_table(path)
    if isinstance(table, Err):
        return table

    try:
        return Ok(Config.from_dict(table.value))
    except (TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Like load_config, but a missing file means the built-in defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
