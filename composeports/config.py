"""Runtime settings for composeports, read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass

from composeports.log import DEFAULT_LEVEL
from composeports.pipeline import FORMATS

ROOT_ENV = "COMPOSEPORTS_ROOT"
FORMAT_ENV = "COMPOSEPORTS_FORMAT"
LOG_LEVEL_ENV = "COMPOSEPORTS_LOG_LEVEL"


class ConfigError(ValueError):
    pass


@dataclass
class Config:
    root: str
    output_format: str
    log_level: str

    @staticmethod
    def parse_format(s: str) -> str:
        fmt = s.strip().lower()
        if fmt not in FORMATS:
            raise ConfigError(
                f"Invalid {FORMAT_ENV}: {s!r} (expected one of {', '.join(FORMATS)})"
            )
        return fmt


def load() -> Config:
    """Build a Config from COMPOSEPORTS_* variables, falling back to defaults."""
    return Config(
        root=os.getenv(ROOT_ENV) or ".",
        output_format=Config.parse_format(os.getenv(FORMAT_ENV) or "blocks"),
        log_level=(os.getenv(LOG_LEVEL_ENV) or DEFAULT_LEVEL).upper(),
    )
