"""Logging utilities for the fx_imf package."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger(name: str = "fx_imf") -> logging.Logger:
    """Return a module-level logger configured with a simple formatter."""
    global _LOGGER
    if _LOGGER is None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        _LOGGER = logging.getLogger("fx_imf")
    return logging.getLogger(name)


def set_verbose(enabled: bool = True) -> None:
    """Switch the package loggers to DEBUG so skipped feed lines become visible."""

    get_logger().setLevel(logging.DEBUG if enabled else logging.INFO)
