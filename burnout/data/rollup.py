"""
Re-grouping of a per-second series into coarser buckets.

Used by the preview table. Keys are fixed-width strings, so sorting them
lexically also sorts them chronologically.
"""

from enum import Enum
from typing import Dict, Iterable

from burnout.data.schema import DataPoint


class TimeUnit(str, Enum):
    """Rollup granularity, valued by its CLI abbreviation."""
    HOUR = "h"
    MINUTE = "m"
    SECOND = "s"

    @property
    def key_format(self) -> str:
        return _KEY_FORMATS[self]


_KEY_FORMATS = {
    TimeUnit.HOUR: "%Y-%m-%d %H:00:00",
    TimeUnit.MINUTE: "%Y-%m-%d %H:%M:00",
    TimeUnit.SECOND: "%Y-%m-%d %H:%M:%S",
}


def bucket_key(point: DataPoint, unit: TimeUnit) -> str:
    """
    Key of the coarse bucket a point falls in.

    Example with TimeUnit.MINUTE:
    - 2023-04-12 10:32:45 -> "2023-04-12 10:32:00"
    """
    return point.time.strftime(unit.key_format)


def _truncate(point: DataPoint, unit: TimeUnit):
    if unit is TimeUnit.HOUR:
        return point.time.replace(minute=0, second=0, microsecond=0)
    if unit is TimeUnit.MINUTE:
        return point.time.replace(second=0, microsecond=0)
    return point.time.replace(microsecond=0)


def rollup(series: Iterable[DataPoint], unit: TimeUnit = TimeUnit.MINUTE) -> Dict[str, DataPoint]:
    """
    Group points into hour, minute or second buckets.

    Args:
        series: DataPoints (any order)
        unit: Bucket granularity

    Returns:
        Dict of bucket key -> summed DataPoint, ordered ascending by key.
        Empty input gives an empty dict.

    Notes:
        - Counters and total durations are summed
        - Error codes are summed per status code
        - Average duration is recomputed from the summed totals
        - Input points are not modified
    """
    unit = TimeUnit(unit)
    groups: Dict[str, DataPoint] = {}

    for point in series:
        key = bucket_key(point, unit)
        if key not in groups:
            groups[key] = DataPoint(time=_truncate(point, unit))
        groups[key].absorb(point)

    return dict(sorted(groups.items()))
