"""Logging configuration for SynthSub."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from .exceptions import FileSystemError
from .utils import ensure_dir_exists

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# requests and whisper's numba kernels log every call at DEBUG
QUIET_LOGGERS = ("urllib3", "numba")

def level_from_name(name: str) -> int:
    """Maps a level name such as 'debug' to its logging constant (INFO if unknown)."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO

def _rotating_file_handler(log_dir: str, log_file: str) -> RotatingFileHandler:
    ensure_dir_exists(log_dir)
    return RotatingFileHandler(
        os.path.join(log_dir, log_file),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8'
    )

def setup_logging(log_level: int = logging.INFO, log_dir: str = "logs", log_file: str = "synthsub.log") -> Optional[str]:
    """
    Routes every record to stdout and to a rotating file under log_dir.

    Handlers installed by an earlier call are closed and replaced, so the CLI
    can configure logging before the config file is read and again after.

    Args:
        log_level: The minimum logging level.
        log_dir: Directory for the log file; created if missing.
        log_file: Name of the log file.

    Returns:
        The log file path, or None if only console logging could be set up.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    log_path = None
    try:
        file_handler = _rotating_file_handler(log_dir, log_file)
    except (FileSystemError, OSError, ValueError) as e:
        root.error(f"File logging disabled, could not open {log_dir}/{log_file}: {e}")
    else:
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        log_path = os.path.join(log_dir, log_file)
        root.info(f"Logging initialized. Log file: {log_path}")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return log_path
