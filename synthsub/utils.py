"""Utility functions for SynthSub."""

import os
import logging
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3600000
MS_PER_MINUTE = 60000
MS_PER_SECOND = 1000

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def format_time_srt(centiseconds: int) -> str:
    """
    Formats centiseconds into the subtitle time format HH:MM:SS,cc.

    The sub-second field carries two digits (hundredths), so a remainder of
    exactly 1000 ms always lands in the seconds field instead.

    Args:
        centiseconds: Wall-clock time in hundredths of a second.

    Returns:
        Formatted time string.

    Raises:
        ValueError: If the time is negative.
    """
    if centiseconds < 0:
        raise ValueError(f"Cannot format negative time: {centiseconds} cs")
    milliseconds = int(centiseconds) * 10
    hrs = milliseconds // MS_PER_HOUR
    milliseconds %= MS_PER_HOUR
    mins = milliseconds // MS_PER_MINUTE
    milliseconds %= MS_PER_MINUTE
    secs = milliseconds // MS_PER_SECOND
    milliseconds %= MS_PER_SECOND
    return f"{hrs:02d}:{mins:02d}:{secs:02d},{milliseconds // 10:02d}"
