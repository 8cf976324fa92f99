"""
W3C extended log parsing.

Converts raw IIS log lines into RawRecord objects. Column positions come from
the "#Fields:" directive when the file has one, otherwise from the IIS
default layout.

Design:
- FieldIndexMap is resolved once per file and never changes afterwards
- The parser only sees data lines; comments and blanks are skipped upstream
- Log times are UTC and converted to the display zone before bucketing
- Any unparsable line raises MalformedLineError so the caller can skip it
"""

import logging
from datetime import datetime, timezone, tzinfo
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from burnout.core.exceptions import ConfigurationError
from burnout.data.schema import RawRecord, truncate_to_second

logger = logging.getLogger(__name__)

FIELDS_DIRECTIVE = "#Fields: "

# Recognized W3C field names and their IIS default columns
RECOGNIZED_FIELDS: Tuple[Tuple[str, int], ...] = (
    ("date", 0),
    ("time", 1),
    ("cs-method", 3),
    ("cs-uri-stem", 4),
    ("sc-status", 11),
    ("time-taken", 14),
)

TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
)


class ParsingError(Exception):
    """Raised when log parsing fails."""
    pass


class MalformedLineError(ParsingError):
    """Raised when a data line is missing fields or has unparsable values."""
    pass


class FieldIndexMap:
    """
    Column index of each recognized field.

    Built from the optional "#Fields:" header; names not in RECOGNIZED_FIELDS
    are ignored and fields the header leaves out keep their default column.
    """

    def __init__(self, indexes: Optional[Mapping[str, int]] = None):
        resolved = dict(RECOGNIZED_FIELDS)
        if indexes:
            for name, index in indexes.items():
                if name in resolved:
                    resolved[name] = index
        self._indexes = MappingProxyType(resolved)

    @classmethod
    def resolve(cls, header_line: Optional[str] = None) -> "FieldIndexMap":
        """
        Build the map from a header line.

        Args:
            header_line: Line that may hold the "#Fields: " directive

        Returns:
            FieldIndexMap; the defaults when the line is absent or not a
            Fields directive
        """
        if header_line is None or not header_line.startswith(FIELDS_DIRECTIVE):
            return cls()

        names = header_line[len(FIELDS_DIRECTIVE):].split(" ")
        indexes = {}
        for position, name in enumerate(names):
            indexes[name] = position
        return cls(indexes)

    def __getitem__(self, name: str) -> int:
        return self._indexes[name]

    def as_dict(self) -> dict:
        return dict(self._indexes)

    @property
    def required_width(self) -> int:
        """Minimum number of fields a data line needs."""
        return max(self._indexes.values()) + 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldIndexMap):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"FieldIndexMap({self.as_dict()!r})"


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """
    Look up the display zone.

    Args:
        name: IANA zone name, or None for the system local zone

    Returns:
        tzinfo, or None meaning "system local"

    Raises:
        ConfigurationError: If the zone name is unknown
    """
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone: {name}") from e


def parse_log_time(date_str: str, time_str: str, tz: Optional[tzinfo] = None) -> datetime:
    """
    Combine the date and time columns into a zone-aware timestamp.

    The log writes UTC; the result is converted to tz (system local when
    tz is None) and truncated to the second.

    Raises:
        MalformedLineError: If no known format matches, or the zone shift
            leaves the supported date range
    """
    stamp = f"{date_str} {time_str}"
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(stamp, fmt)
        except ValueError:
            continue
        try:
            local = parsed.replace(tzinfo=timezone.utc).astimezone(tz)
        except OverflowError as e:
            raise MalformedLineError(f"Date/time out of range: {stamp!r}") from e
        return truncate_to_second(local)

    raise MalformedLineError(f"Could not parse date/time: {stamp!r}")


def _is_digits(value: str) -> bool:
    return value.isascii() and value.isdigit()


class W3CLineParser:
    """
    Parses space-delimited W3C data lines:

        2023-04-12 00:00:01 10.0.0.1 GET /api/orders - 443 - 10.0.0.9 curl/8.0 - 200 0 0 125

    Only date, time, cs-method, cs-uri-stem, sc-status and time-taken are read.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        """
        Args:
            tz: Zone the UTC log times are converted to (None = system local)
        """
        self.tz = tz

    def parse(self, line: str, field_map: FieldIndexMap) -> RawRecord:
        """
        Parse one data line.

        Args:
            line: Raw data line without trailing newline
            field_map: Column positions for this file

        Returns:
            RawRecord for the line

        Raises:
            MalformedLineError: Too few fields, or bad date/time, status or time-taken
        """
        fields = line.split(" ")
        if len(fields) < field_map.required_width:
            raise MalformedLineError(
                f"Expected at least {field_map.required_width} fields, got {len(fields)}"
            )

        response_time = parse_log_time(
            fields[field_map["date"]], fields[field_map["time"]], self.tz
        )

        status_code = fields[field_map["sc-status"]]
        if not _is_digits(status_code):
            raise MalformedLineError(f"Invalid sc-status: {status_code!r}")

        time_taken = fields[field_map["time-taken"]]
        if not _is_digits(time_taken):
            raise MalformedLineError(f"Invalid time-taken: {time_taken!r}")

        record = RawRecord(
            response_time=response_time,
            time_taken_ms=int(time_taken),
            method=fields[field_map["cs-method"]],
            uri_stem=fields[field_map["cs-uri-stem"]],
            status_code=status_code,
        )
        # Request time is derived later; it must stay inside the datetime range
        try:
            record.request_time
        except OverflowError as e:
            raise MalformedLineError(f"time-taken out of range: {time_taken!r}") from e
        return record


def parse_line(
    line: str,
    field_map: Optional[FieldIndexMap] = None,
    tz: Optional[tzinfo] = None,
) -> RawRecord:
    """
    Convenience wrapper around W3CLineParser.

    Example:
        record = parse_line("2023-01-01 00:00:01 GET /a 200 500",
                            FieldIndexMap.resolve(header), tz=timezone.utc)
    """
    return W3CLineParser(tz).parse(line, field_map or FieldIndexMap())
