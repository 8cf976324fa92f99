"""
Per-second aggregation of access-log records.

Folds RawRecord objects into DataPoint buckets keyed by the truncated
timestamp. Each record is counted twice: as an arrival in the bucket of its
request time, and as a success or failure in the bucket of its response time.

Design:
- Bucket state belongs to one TimeSeriesAggregator instance
- Method filter "*" keeps every method, otherwise exact case-sensitive match
- Path filter is a case-insensitive regex searched in cs-uri-stem
- Malformed lines are skipped and reported, never fatal
- Partial aggregators can be merged (sums, error-code union, max)
"""

import logging
import re
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern, Tuple, Union

from burnout.core.exceptions import ConfigurationError
from burnout.data.ingestion import iter_log_lines
from burnout.data.parsers import (
    FIELDS_DIRECTIVE,
    FieldIndexMap,
    MalformedLineError,
    W3CLineParser,
)
from burnout.data.schema import (
    AggregationResult,
    DataPoint,
    LineWarning,
    RawRecord,
    StatusClass,
    truncate_to_second,
)

logger = logging.getLogger(__name__)

ANY_METHOD = "*"


def compile_path_pattern(pattern: str) -> Pattern[str]:
    """
    Compile the URL path filter.

    Raises:
        ConfigurationError: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise ConfigurationError(f"Invalid path pattern {pattern!r}: {e}") from e


class TimeSeriesAggregator:
    """
    Accumulates records into per-second DataPoints.

    Example:
        aggregator = TimeSeriesAggregator(method_filter="GET", path_pattern=r"^/api/")
        for record in records:
            aggregator.ingest(record)
        points = aggregator.finalize()
    """

    def __init__(self, method_filter: str = ANY_METHOD, path_pattern: str = ".+"):
        """
        Args:
            method_filter: HTTP method to keep, or "*" for all
            path_pattern: Regex the URL path must match (case-insensitive)

        Raises:
            ConfigurationError: If path_pattern does not compile
        """
        self.method_filter = method_filter
        self.path_pattern = path_pattern
        self._path_regex = compile_path_pattern(path_pattern)
        self._points: Dict[datetime, DataPoint] = {}

    def __len__(self) -> int:
        return len(self._points)

    def _bucket(self, ts: datetime) -> DataPoint:
        key = truncate_to_second(ts)
        point = self._points.get(key)
        if point is None:
            point = DataPoint(time=key)
            self._points[key] = point
        return point

    def accepts(self, record: RawRecord) -> bool:
        """True if the record passes the method and path filters."""
        if self.method_filter != ANY_METHOD and record.method != self.method_filter:
            return False
        return self._path_regex.search(record.uri_stem) is not None

    def ingest(self, record: RawRecord) -> bool:
        """
        Fold one record into the buckets.

        Returns:
            False if the record was discarded by a filter
        """
        if not self.accepts(record):
            return False

        self._bucket(record.request_time).req_count += 1

        resp_point = self._bucket(record.response_time)
        if record.status_class is StatusClass.SUCCESS:
            resp_point.record_success(record.time_taken_ms)
        else:
            resp_point.record_failure(record.status_code)
        return True

    def merge(self, other: "TimeSeriesAggregator") -> "TimeSeriesAggregator":
        """
        Add another aggregator's buckets into this one.

        Used to combine partitions aggregated separately. The other
        aggregator's DataPoints are copied, never shared.
        """
        for ts, point in other._points.items():
            self._bucket(ts).absorb(point)
        return self

    def finalize(self) -> List[DataPoint]:
        """DataPoints ordered ascending by time."""
        return sorted(self._points.values(), key=lambda p: p.time)


def merge_series(*series: Iterable[DataPoint]) -> List[DataPoint]:
    """
    Merge already-aggregated series into one.

    Points with the same timestamp are combined; inputs are not modified.
    The reduction is associative and commutative.
    """
    merged: Dict[datetime, DataPoint] = {}
    for points in series:
        for point in points:
            target = merged.get(point.time)
            if target is None:
                target = DataPoint(time=point.time)
                merged[point.time] = target
            target.absorb(point)
    return sorted(merged.values(), key=lambda p: p.time)


def aggregate_lines(
    lines: Iterable[Tuple[int, str]],
    method_filter: str = ANY_METHOD,
    path_pattern: str = ".+",
    tz: Optional[tzinfo] = None,
    progress_interval: Optional[int] = None,
) -> AggregationResult:
    """
    Aggregate numbered log lines.

    The "#Fields:" directive is honoured until the first data line; after
    that the column layout is fixed. Other "#" lines and blank lines are
    skipped.

    Args:
        lines: (line_number, line) pairs in file order
        method_filter: HTTP method to keep, or "*"
        path_pattern: Case-insensitive URL path regex
        tz: Zone for bucketing (None = system local)
        progress_interval: Log progress every N lines (None disables)

    Returns:
        AggregationResult with ordered points, counts and warnings

    Raises:
        ConfigurationError: If path_pattern is invalid (before reading any line)
    """
    aggregator = TimeSeriesAggregator(method_filter, path_pattern)
    parser = W3CLineParser(tz)
    result = AggregationResult()

    header_line: Optional[str] = None
    field_map: Optional[FieldIndexMap] = None

    for line_number, line in lines:
        result.line_count += 1
        if progress_interval and result.line_count % progress_interval == 0:
            logger.info(f"{result.line_count:,} lines parsed.")

        if not line.strip():
            continue

        if line.startswith("#"):
            if field_map is None and line.startswith(FIELDS_DIRECTIVE):
                header_line = line
            continue

        if field_map is None:
            field_map = FieldIndexMap.resolve(header_line)
            logger.debug(f"Field indexes: {field_map.as_dict()}")

        try:
            record = parser.parse(line, field_map)
        except MalformedLineError as e:
            logger.warning(f"Skipping malformed line {line_number}: {e}")
            result.warnings.append(LineWarning(line_number=line_number, message=str(e)))
            continue

        result.parsed_count += 1
        if not aggregator.ingest(record):
            result.skipped_count += 1

    result.points = aggregator.finalize()
    return result


def aggregate_file(
    filepath: Union[str, Path],
    method_filter: str = ANY_METHOD,
    path_pattern: str = ".+",
    tz: Optional[tzinfo] = None,
    progress_interval: Optional[int] = None,
) -> AggregationResult:
    """
    Aggregate a log file on disk.

    Raises:
        ConfigurationError: If path_pattern is invalid
        LogIngestionError: If the file can't be read
    """
    # Fail on a bad pattern before touching the file
    compile_path_pattern(path_pattern)

    logger.info(f"Parsing {filepath}...")
    result = aggregate_lines(
        iter_log_lines(filepath),
        method_filter=method_filter,
        path_pattern=path_pattern,
        tz=tz,
        progress_interval=progress_interval,
    )
    logger.info(
        f"{result.line_count:,} lines parsed, {len(result.points):,} data points, "
        f"{result.warning_count} malformed line(s) skipped."
    )
    return result
