"""
Central logging configuration for ephemeris.

Installs a colorized console handler when the application has not set up
logging itself, and sets the level of the package's module loggers.
"""

import logging
import os
import sys
from typing import TYPE_CHECKING, Optional

from colorlog import ColoredFormatter

if TYPE_CHECKING:
    from .config_loader import Config

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

EPHEMERIS_MODULES = [
    "ephemeris",
    "ephemeris.expander",
    "ephemeris.reducer",
    "ephemeris.calendar_view",
    "ephemeris.config_loader",
]


def configure_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    level_name: Optional[str] = None,
    config: Optional["Config"] = None,
) -> None:
    """
    Configure logging for ephemeris.

    A stream handler with a colorlog formatter is added to the root logger only
    when no handlers exist, so applications that configure logging first keep
    their own setup.

    Args:
        debug_mode: Whether to enable debug logging for ephemeris modules
        force_debug: Override debug mode setting (None to use env var detection)
        level_name: Level name for root and ephemeris loggers; ignored in debug mode
        config: Loaded Config; supplies debug and log_level when not given explicitly

    Environment Variables:
        EPHEMERIS_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        EPHEMERIS_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    if config is not None:
        debug_mode = debug_mode or config.debug
        level_name = level_name or config.log_level

    env_debug = os.getenv("EPHEMERIS_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("EPHEMERIS_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if not final_debug and level_name and level_name.upper() in LEVEL_NAMES:
        root_level = getattr(logging, level_name.upper())
    if env_log_level in LEVEL_NAMES:
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))
        root_logger.addHandler(handler)

    module_level = logging.DEBUG if final_debug else root_level
    for module in EPHEMERIS_MODULES:
        logging.getLogger(module).setLevel(module_level)

    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(root_level)
    )


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in EPHEMERIS_MODULES:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
