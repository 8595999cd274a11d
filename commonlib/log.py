"""Console logging setup for the catalog entry points."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single console handler to the root logger.

    Calling it again only adjusts the level.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(handler, "_catalog_console", False) for handler in root.handlers):
        return root

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._catalog_console = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root
