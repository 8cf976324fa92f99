"""
Internal data model for the access-log time series.

This module defines the record extracted from one W3C log line, the
per-second bucket it is folded into, and the containers returned by the
aggregation and chart steps.

Design rationale:
- One log line touches two buckets: its request time and its response time
- Buckets are keyed by timestamps truncated to the whole second
- Success/failure is decided by one rule (StatusClass.of)
- JSON field names are stable aliases consumed by the preview and chart paths
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


def truncate_to_second(ts: datetime) -> datetime:
    """
    Drop sub-second precision, flooring to the start of the second.

    Example:
    - 10:30:01.900 -> 10:30:01
    - 10:30:01.000 -> 10:30:01
    """
    return ts.replace(microsecond=0)


class StatusClass(str, Enum):
    """
    Outcome of a response, decided by the first digit of sc-status.

    2xx and 3xx are successes; everything else counts as a failure.
    """
    SUCCESS = "success"
    FAILURE = "failure"

    @classmethod
    def of(cls, status_code: str) -> "StatusClass":
        """Classify a status code string."""
        if status_code[:1] in ("2", "3"):
            return cls.SUCCESS
        return cls.FAILURE


class RawRecord(BaseModel):
    """
    Structured fields of a single data line.

    Attributes:
        response_time: When the response was sent (second resolution, local zone)
        time_taken_ms: Server processing time in milliseconds
        method: HTTP method (cs-method)
        uri_stem: Request path (cs-uri-stem)
        status_code: HTTP status as written in the log (sc-status)
    """

    response_time: datetime
    time_taken_ms: int = Field(..., ge=0)
    method: str
    uri_stem: str
    status_code: str = Field(..., pattern=r"^\d+$")

    @property
    def request_time(self) -> datetime:
        """Response time minus time taken, floored to the whole second."""
        taken = timedelta(milliseconds=self.time_taken_ms)
        tz = self.response_time.tzinfo
        if tz is None:
            return truncate_to_second(self.response_time - taken)
        # Subtract on the UTC timeline so zone transitions don't shift the result
        utc = self.response_time.astimezone(timezone.utc) - taken
        return truncate_to_second(utc.astimezone(tz))

    @property
    def status_class(self) -> StatusClass:
        return StatusClass.of(self.status_code)


class DataPoint(BaseModel):
    """
    Aggregation bucket for one truncated timestamp.

    Attributes:
        time: Bucket timestamp (second resolution, or coarser after rollup)
        req_count: Requests that arrived in this bucket (by request time)
        succ_count: Successful responses sent in this bucket
        fail_count: Failed responses sent in this bucket
        total_succ_dura: Sum of time-taken (ms) over successful responses
        max_succ_dura: Largest time-taken (ms) of a successful response
        err_codes: Status code -> count, failures only

    Notes:
        - Counters only count up during aggregation
        - avg_succ_dura is derived and never stored
        - Serialized with camelCase aliases (reqCount, successCount, ...)
    """

    model_config = ConfigDict(populate_by_name=True)

    time: datetime = Field(..., description="Bucket timestamp")
    req_count: int = Field(0, ge=0, alias="reqCount")
    succ_count: int = Field(0, ge=0, alias="successCount")
    fail_count: int = Field(0, ge=0, alias="failCount")
    total_succ_dura: int = Field(0, ge=0, alias="totalSuccessDuration")
    max_succ_dura: int = Field(0, ge=0, alias="maxSuccessDuration")
    err_codes: Dict[str, int] = Field(default_factory=dict, alias="errorCodes")

    @computed_field(alias="averageSuccessDuration")
    @property
    def avg_succ_dura(self) -> Optional[int]:
        """Mean success duration in ms (truncating), None without successes."""
        if self.succ_count > 0:
            return self.total_succ_dura // self.succ_count
        return None

    @property
    def key(self) -> str:
        """Clock-time label of the bucket."""
        return self.time.strftime("%H:%M:%S")

    def record_success(self, time_taken_ms: int) -> None:
        self.succ_count += 1
        self.total_succ_dura += time_taken_ms
        self.max_succ_dura = max(self.max_succ_dura, time_taken_ms)

    def record_failure(self, status_code: str) -> None:
        self.fail_count += 1
        self.err_codes[status_code] = self.err_codes.get(status_code, 0) + 1

    def absorb(self, other: "DataPoint") -> None:
        """
        Add another bucket's counters into this one.

        Sums counters and durations, sums error codes per status and keeps the
        larger max duration. The other bucket is left untouched.
        """
        self.req_count += other.req_count
        self.succ_count += other.succ_count
        self.fail_count += other.fail_count
        self.total_succ_dura += other.total_succ_dura
        self.max_succ_dura = max(self.max_succ_dura, other.max_succ_dura)
        for code, count in other.err_codes.items():
            self.err_codes[code] = self.err_codes.get(code, 0) + count


class LineWarning(BaseModel):
    """A data line that was skipped because it could not be parsed."""

    line_number: int = Field(..., ge=1)
    message: str


class AggregationResult(BaseModel):
    """
    Outcome of aggregating one log file.

    Attributes:
        points: DataPoints ordered ascending by time
        line_count: Physical lines read, headers and comments included
        parsed_count: Data lines successfully parsed
        skipped_count: Parsed lines discarded by the method/path filters
        warnings: Malformed lines, in file order
    """

    points: List[DataPoint] = Field(default_factory=list)
    line_count: int = 0
    parsed_count: int = 0
    skipped_count: int = 0
    warnings: List[LineWarning] = Field(default_factory=list)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


class ChartSeries(BaseModel):
    """
    Parallel arrays ready for plotting, one entry per second.

    labels are "mm:ss" offsets from base_time.
    """

    base_time: Optional[datetime] = None
    labels: List[str] = Field(default_factory=list)
    req_series: List[int] = Field(default_factory=list)
    succ_series: List[int] = Field(default_factory=list)
    fail_series: List[int] = Field(default_factory=list)
    avg_dura_series: List[Optional[int]] = Field(default_factory=list)
