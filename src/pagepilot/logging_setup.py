"""
Console logging for PagePilot, rendered with Rich.

Created: 2026-09-28
Changes:
  - 2026-10-19: Configure the ``pagepilot`` logger instead of the root logger,
    so embedding applications keep their own handlers. Level defaults to
    ``Settings.log_level``. Calling setup_logging() again replaces the handler.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from pagepilot.config import Settings, get_settings

PACKAGE_LOGGER = "pagepilot"

# Chatty below WARNING and never useful when debugging page logic
_NOISY_LOGGERS = ("asyncio", "playwright")

_handler: logging.Handler | None = None


def _resolve_level(level: str | None, settings: Settings | None) -> int:
    name = level or (settings or get_settings()).log_level
    resolved = logging.getLevelName(name.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | None = None, settings: Settings | None = None) -> logging.Logger:
    """Attach a Rich handler on stderr to the ``pagepilot`` logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR. Unknown names fall back to INFO.
        settings: Source of ``log_level`` when no level is given.

    Returns:
        The configured package logger.
    """
    global _handler  # noqa: PLW0603

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
        log_time_format="[%X]",
    )
    _handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger.addHandler(_handler)
    logger.setLevel(_resolve_level(level, settings))
    logger.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
