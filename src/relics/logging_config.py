from __future__ import annotations

import logging
import os
from typing import Optional

from .exceptions import SettingsError

LOG_LEVEL_ENV = "RELICS_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def resolve_log_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant.

    Raises:
        SettingsError: the name is not one of the standard level names.
    """
    upper = str(name).strip().upper()
    if upper not in _LEVEL_NAMES:
        raise SettingsError(f"Invalid log_level {name!r}. Choose one of {', '.join(_LEVEL_NAMES)}.")
    return getattr(logging, upper)


def configure_logging(level_name: Optional[str] = None, default_level: int = logging.INFO) -> int:
    """Configure the root logger for the relics tools and return the level used.

    ``RELICS_LOG_LEVEL`` wins over ``level_name`` (normally the settings'
    ``log_level``). An unknown environment value is ignored with a warning
    so a typo in the shell never stops the CLI.
    """
    level = resolve_log_level(level_name) if level_name else default_level
    env_name = os.getenv(LOG_LEVEL_ENV)
    env_error = None
    if env_name:
        try:
            level = resolve_log_level(env_name)
        except SettingsError as e:
            env_error = e
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if env_error is not None:
        logging.getLogger(__name__).warning("Ignoring %s: %s", LOG_LEVEL_ENV, env_error)
    return level
