"""
Log file access.

Reads IIS log files line by line and locates the default inputs in a
directory. Lines are returned raw; header handling and parsing belong to
the aggregation and parser layers.

Design:
- Iterator-based for memory efficiency with large files
- Line numbers are 1-based and count every physical line
- A missing or unreadable file is fatal (LogIngestionError)
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

logger = logging.getLogger(__name__)

LOG_FILE_GLOB = "u_ex*.log"
SERIES_FILE_GLOB = "u_ex*.json"


class LogIngestionError(Exception):
    """Raised when a log file cannot be read."""
    pass


def iter_log_lines(
    filepath: Union[str, Path],
    encoding: str = "utf-8",
) -> Iterator[Tuple[int, str]]:
    """
    Read a log file line by line.

    Args:
        filepath: Path to log file
        encoding: File encoding (default utf-8)

    Yields:
        (line_number, line) with the line ending removed

    Raises:
        LogIngestionError: If the file doesn't exist or can't be read
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise LogIngestionError(f"Log file not found: {filepath}")

    try:
        with open(filepath, "r", encoding=encoding, errors="replace") as f:
            for line_num, line in enumerate(f, start=1):
                yield line_num, line.rstrip("\r\n")
    except OSError as e:
        logger.error(f"Error reading log file {filepath}: {e}")
        raise LogIngestionError(f"Failed to read log: {e}") from e


def find_latest_log(directory: Union[str, Path] = ".") -> Optional[Path]:
    """
    Newest IIS log in a directory.

    IIS names daily logs u_exYYMMDD.log, so the last name sorts newest.

    Returns:
        Path, or None if the directory has no u_ex*.log file
    """
    candidates = sorted(Path(directory).glob(LOG_FILE_GLOB), key=lambda p: p.name, reverse=True)
    return candidates[0] if candidates else None


def find_latest_series(directory: Union[str, Path] = ".") -> Optional[Path]:
    """
    Most recently written series JSON in a directory.

    Returns:
        Path, or None if the directory has no u_ex*.json file
    """
    candidates = sorted(
        Path(directory).glob(SERIES_FILE_GLOB),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )
    return candidates[0] if candidates else None
