"""Process exit status of ``gitver``.

Release pipelines branch on these numbers, so they never change meaning.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    # unknown reference, bad option value, bad template, invalid config
    USER_ERROR = 1
    # not inside a work tree, git not installed
    ENV_ERROR = 2
    # a git query ran and failed
    REPO_ERROR = 3

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self is ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return not self.is_success
