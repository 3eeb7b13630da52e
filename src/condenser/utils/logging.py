from __future__ import annotations

import logging
from typing import Optional, Union

from condenser.exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name not in LEVELS:
        raise ConfigurationError(f"Unknown log level '{level}'. Use one of: {', '.join(LEVELS)}.")
    return getattr(logging, name)


def configure_logging(level: Union[str, int] = "INFO") -> None:
    # force: the CLI may be invoked repeatedly in one process (tests)
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT, force=True)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(resolve_level(level))
    return logger
