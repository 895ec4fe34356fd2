"""Logging configuration for Handcrafted Haven.

Every module logs through a child of the ``handcrafted_haven`` logger
(``handcrafted_haven.products``, ``handcrafted_haven.auth`` ...), so a single
call to :func:`setup_logging` routes the whole application. When ``LOG_DIR``
is set, each launch also writes a timestamped file such as
``logs/run_20261017_153045.log``.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.config import settings

ROOT_LOGGER_NAME = "handcrafted_haven"

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Return a child of the application logger, e.g. ``get_logger("reviews")``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> Optional[Path]:
    """Initialise the ``handcrafted_haven`` logger.

    Args:
        level: Console level name; defaults to ``settings.log_level``.
        log_dir: Directory for a per-run DEBUG log file; defaults to
            ``settings.log_dir``. No file is written when empty.

    Returns:
        The path of the per-run log file, or ``None`` when file logging is off.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, reloads) keep the first set of handlers
    if root_logger.handlers:
        return None

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel((level or settings.log_level).upper())
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    log_file = None
    target_dir = log_dir if log_dir is not None else settings.log_dir
    if target_dir:
        logs_path = Path(target_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = logs_path / f"run_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT))
        root_logger.addHandler(file_handler)

    root_logger.info("Logging initialised (file: %s)", log_file or "disabled")
    return log_file
