# deepstoker/utils/logger.py
"""Process-wide logging setup for the CLI and API entry points."""

import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 10

logger = logging.getLogger("deepstoker")


def resolve_log_path(log_file: Optional[str] = None) -> str:
    """
    Work out where the shift log goes

    Args:
        log_file: A file path, a directory, or None for ``logs/``

    Returns:
        str: File path; a directory gets ``session_<timestamp>.log`` inside it
    """
    if log_file and not os.path.isdir(log_file):
        return log_file
    log_dir = log_file or DEFAULT_LOG_DIR
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(log_dir, f"session_{timestamp}.log")


def _is_console(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def _writes_to(handler: logging.Handler, path: str) -> bool:
    return isinstance(handler, RotatingFileHandler) and os.path.abspath(handler.baseFilename) == path


def setup_logging(log_file: Optional[str] = None, level: int = DEFAULT_LOG_LEVEL) -> str:
    """Attach a console handler and a rotating file handler to the root logger.

    Calling it again with the same target adds nothing.

    Returns:
        str: Path of the log file in use
    """
    path = resolve_log_path(log_file)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    root = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(_is_console(h) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    target = os.path.abspath(path)
    if not any(_writes_to(h, target) for h in root.handlers):
        file_handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.setLevel(level)
    logger.debug(f"Logging to {path}")
    return path
