"""Process-wide logging setup for the navpdf command line."""

from __future__ import annotations

import logging
import sys

_QUIET_LOGGERS = ("asyncio", "playwright")


def setup_logging(level: int | str = logging.INFO) -> None:
    """Send log records to stdout as ``[time] [LEVEL] [logger] message``.

    Calling this again replaces the root handlers instead of stacking them.
    """
    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["setup_logging"]
