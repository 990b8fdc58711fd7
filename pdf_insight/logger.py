"""
Application-wide logging configuration.

Console output goes through rich; a rotating file under the log directory
keeps DEBUG detail (ladder rungs, provider fallbacks) for later inspection.
"""
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.logging import RichHandler

from .config import settings

LOGGER_NAME = "pdf_insight"
LOG_FILE_NAME = "pdf_insight.log"

# Third-party loggers that log every HTTP request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger with a rich console handler and a rotating file."""
    settings.ensure_directories()
    console_level = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO

    pkg_logger = logging.getLogger(LOGGER_NAME)
    pkg_logger.setLevel(logging.DEBUG)
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers = []
    pkg_logger.propagate = False

    console_handler = RichHandler(
        rich_tracebacks=True,
        show_time=True,
        show_path=False,
    )
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    file_handler = RotatingFileHandler(
        settings.logs_dir / LOG_FILE_NAME,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))

    pkg_logger.addHandler(console_handler)
    pkg_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return pkg_logger


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. ``get_logger(__name__)``."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


logger = setup_logging()
