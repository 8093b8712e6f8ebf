# leaguetracker/helpers/_logger.py

# SECTION: MODULE DOCSTRING
"""Logging setup for LeagueTracker: Rich console output, optional rotating file log,
and a custom SUCCESS level (``log.success(...)``)."""

# SECTION: IMPORTS
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

# --- Constants ---
LOGGER_NAME = "LeagueTracker"
LOG_FILENAME = "leaguetracker.log"
LOG_FORMAT_FILE = "%(asctime)s - %(filename)s:%(lineno)d - %(levelname)s - %(message)s"
LOG_FORMAT_CONSOLE = "%(message)s"
SUCCESS_LEVEL_NUM = 25

# --- Custom Success Level ---
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")


def success(self, message, *args, **kws):
    if self.isEnabledFor(SUCCESS_LEVEL_NUM):
        self._log(SUCCESS_LEVEL_NUM, message, args, **kws)


logging.Logger.success = success


# FUNC: setup_logging
def setup_logging(
    log_level: int = logging.DEBUG,
    logger_name: str = LOGGER_NAME,
    log_dir: Path | None = None,
    console_level: int = logging.INFO,
) -> logging.Logger:
    """Configure the application logger.

    Args:
        log_level: Level of the logger itself.
        logger_name: Name of the logger to configure.
        log_dir: When given, a rotating file handler writes there as well.
        console_level: Minimum level shown by the Rich console handler.

    Returns:
        The configured logger.
    """
    log = logging.getLogger(logger_name)
    log.setLevel(log_level)

    # Clear existing handlers to prevent duplicates
    if log.hasHandlers():
        log.handlers.clear()

    console_handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT_CONSOLE, datefmt="[%X]"))
    log.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILENAME,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT_FILE))
        log.addHandler(file_handler)

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    log.propagate = False
    return log


_log_instance: logging.Logger | None = None


def get_logger() -> logging.Logger:
    global _log_instance
    if _log_instance is None:
        _log_instance = setup_logging()
    return _log_instance


log = get_logger()


def configure_third_party_loggers() -> None:
    """Keep chatty HTTP libraries at WARNING and above."""
    for logger_name in ("httpx", "httpcore", "urllib3"):
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False


configure_third_party_loggers()
