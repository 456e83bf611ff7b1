"""Logging setup for the CLI.

Library modules only call ``logging.getLogger(__name__)``; the handler is
installed once per invocation here.
"""

from __future__ import annotations

import logging

__all__ = ["setup_logging"]


def setup_logging(*, verbose: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: DEBUG level (git commands, resolution decisions) instead of WARNING
    """
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )
