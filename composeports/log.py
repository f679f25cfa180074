"""Logging setup with selectable levels (OFF, ERROR, WARNING, INFO, DEBUG, TRACE)."""
from __future__ import annotations

import logging

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def _trace(self, msg, *args, **kwargs):
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


logging.Logger.trace = _trace  # type: ignore[attr-defined]

LEVEL_MAP = {
    "OFF": logging.CRITICAL + 1,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": TRACE,
}
DEFAULT_LEVEL = "ERROR"


def level_for(name: str) -> int:
    return LEVEL_MAP.get(name.strip().upper(), LEVEL_MAP[DEFAULT_LEVEL])


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; importing this module registers ``Logger.trace``."""
    return logging.getLogger(name)


def configure_logging(level_str: str) -> None:
    # Diagnostics go to stderr so stdout carries only the report.
    lvl = level_for(level_str)
    logging.basicConfig(level=lvl, format="%(asctime)s %(levelname)s %(message)s")
    logging.getLogger().setLevel(lvl)
    get_logger(__name__).debug("Log level set to %s (%s)", level_str.upper(), lvl)
