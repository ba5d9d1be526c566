"""
TGQL Engine Configuration.

Settings are plain dataclass fields. from_env() reads them from the
environment:

    TGQL_LOG_LEVEL               level of the "tgql" logger (default WARNING)
    TGQL_CONCURRENT_RESOLUTION   resolve sibling fields concurrently (default true)
    TGQL_MASK_ERRORS             hide unexpected resolver exception messages
                                 in responses (default false)

Usage:
    config = EngineConfig.from_env()
    configure_logging(config)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _env_flag(name: str, default: bool, environ) -> bool:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass
class EngineConfig:
    """
    Engine settings.

    Attributes:
        log_level: Level name applied by configure_logging()
        concurrent_resolution: Gather sibling fields concurrently
        mask_errors: Replace unexpected resolver exception messages with a
            generic message in responses
    """
    log_level: str = "WARNING"
    concurrent_resolution: bool = True
    mask_errors: bool = False

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "EngineConfig":
        """
        Build a config from TGQL_* environment variables.

        Raises:
            ValueError: If a flag or the log level is not recognised
        """
        environ = os.environ if environ is None else environ
        level = environ.get("TGQL_LOG_LEVEL", "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"TGQL_LOG_LEVEL is not a logging level: {level!r}")
        return cls(
            log_level=level,
            concurrent_resolution=_env_flag("TGQL_CONCURRENT_RESOLUTION", True, environ),
            mask_errors=_env_flag("TGQL_MASK_ERRORS", False, environ),
        )


def configure_logging(config: Optional[EngineConfig] = None) -> logging.Logger:
    """Apply the configured level to the "tgql" logger and return it."""
    config = config or EngineConfig.from_env()
    logger = logging.getLogger("tgql")
    logger.setLevel(config.log_level)
    return logger
