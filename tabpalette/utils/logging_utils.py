"""Simple logging utilities for tabpalette.

Standard Logger Initialization Pattern
--------------------------------------
For most modules, use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

The TUI owns the terminal, so nothing here ever logs to stdout/stderr.
"""

import logging
from logging.handlers import RotatingFileHandler

from tabpalette.config.constants import get_config_dir

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_tui_logging(verbose: bool = False) -> logging.Logger:
    """
    Set up logging for a TUI session.

    The root logger is set to WARNING to avoid noise from third-party libs.
    tabpalette's own loggers (tabpalette.*) are set to INFO, or DEBUG when
    verbose.

    Returns:
        The package logger
    """
    log_dir = get_config_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    # Configure root logger - WARNING only, with rotation
    if not logging.getLogger().handlers:
        handler = RotatingFileHandler(
            log_dir / "tui_debug.log", maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
        )
        handler.setFormatter(logging.Formatter(_FORMAT))
        logging.basicConfig(level=logging.WARNING, handlers=[handler])

    package_logger = logging.getLogger("tabpalette")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return package_logger
