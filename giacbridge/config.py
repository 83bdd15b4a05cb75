"""Environment driven settings for the GIAC bridge."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "giac"
DEFAULT_STARTUP_TIMEOUT = 30.0


def _read_seconds(var, default):
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", var, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", var, raw)
        return default
    return value


@dataclass(frozen=True)
class BridgeConfig:
    """Where to find GIAC and how long to wait for it.

    ``read_timeout`` of ``None`` means a request blocks until GIAC answers.
    """

    executable: str = DEFAULT_EXECUTABLE
    help_file: Optional[str] = None
    read_timeout: Optional[float] = None
    startup_timeout: float = DEFAULT_STARTUP_TIMEOUT

    @classmethod
    def from_env(cls):
        return cls(
            executable=os.environ.get("GIAC_EXECUTABLE") or DEFAULT_EXECUTABLE,
            help_file=os.environ.get("GIAC_HELP_FILE") or None,
            read_timeout=_read_seconds("GIAC_READ_TIMEOUT", None),
            startup_timeout=_read_seconds("GIAC_STARTUP_TIMEOUT", DEFAULT_STARTUP_TIMEOUT),
        )
