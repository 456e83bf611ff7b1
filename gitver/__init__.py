"""gitver - version triples and changelogs derived from git history."""

__version__ = "0.3.0"
