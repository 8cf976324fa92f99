"""
Time-window selection over an aggregated series.

A window is given as an optional start, end and duration. Times on another
calendar day are moved onto the day of the series (its base time), so users
can type clock times only.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from burnout.core.exceptions import ConfigurationError
from burnout.data.schema import DataPoint

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"^(?:(\d+)\.)?(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?$")


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration written as [d.]hh:mm[:ss].

    Examples:
    - "00:10:00" -> 10 minutes
    - "1:30" -> 1 hour 30 minutes
    - "1.02:00:00" -> 26 hours

    Raises:
        ConfigurationError: If the text is not a duration
    """
    match = _DURATION_PATTERN.match(value.strip())
    if not match:
        raise ConfigurationError(f"Invalid duration (expected hh:mm:ss): {value!r}")
    days, hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    if minutes > 59 or seconds > 59:
        raise ConfigurationError(f"Invalid duration (expected hh:mm:ss): {value!r}")
    return timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)


def _anchor(ts: datetime, base_time: datetime) -> datetime:
    if ts.tzinfo is None and base_time.tzinfo is not None:
        ts = ts.replace(tzinfo=base_time.tzinfo)
    if ts.date() != base_time.date():
        ts = ts.replace(year=base_time.year, month=base_time.month, day=base_time.day)
    return ts


def resolve_time_range(
    base_time: Optional[datetime],
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    duration: Optional[timedelta] = None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Turn user window options into concrete bounds.

    Steps:
    1. start on another day than base_time keeps its clock time on base_time's day
    2. no end but start and duration -> end = start + duration
    3. end on another day is moved onto base_time's day the same way

    Args:
        base_time: First timestamp of the series (None for an empty series)
        start_time: Window start, or None for unbounded
        end_time: Window end, or None for unbounded
        duration: Window length used when end_time is absent

    Returns:
        (start_time, end_time); either may be None

    Notes:
        - Naive values take base_time's zone
        - An end that crosses midnight is folded back onto the base day
        - Without a base time only step 2 applies
    """
    if base_time is None:
        if end_time is None and start_time is not None and duration is not None:
            end_time = start_time + duration
        return start_time, end_time

    if start_time is not None:
        start_time = _anchor(start_time, base_time)
    if end_time is None and start_time is not None and duration is not None:
        end_time = start_time + duration
    if end_time is not None:
        end_time = _anchor(end_time, base_time)

    logger.debug(f"Resolved time range: {start_time} - {end_time}")
    return start_time, end_time


def filter_by_time(
    series: Iterable[DataPoint],
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
) -> List[DataPoint]:
    """
    Keep points inside the window, both bounds inclusive.

    A None bound is unbounded on that side.
    """
    return [
        p for p in series
        if (start_time is None or p.time >= start_time)
        and (end_time is None or p.time <= end_time)
    ]
