"""
Unit tests for time-window selection.
"""

import pytest
from datetime import datetime, timedelta, timezone

from burnout.core.exceptions import ConfigurationError
from burnout.data.ranges import filter_by_time, parse_duration, resolve_time_range
from burnout.data.schema import DataPoint


BASE = datetime(2023, 4, 12, 9, 0, 0, tzinfo=timezone.utc)


class TestResolveTimeRange:
    """Test window resolution against the series base time."""

    def test_nothing_given(self):
        """Test that no options mean an unbounded window."""
        assert resolve_time_range(BASE) == (None, None)

    def test_start_reanchored_to_base_day(self):
        """Test that a start on another day keeps its clock time."""
        start = datetime(2024, 1, 1, 10, 30, 15, tzinfo=timezone.utc)

        resolved_start, resolved_end = resolve_time_range(BASE, start_time=start)

        assert resolved_start == datetime(2023, 4, 12, 10, 30, 15, tzinfo=timezone.utc)
        assert resolved_end is None

    def test_start_same_day_unchanged(self):
        """Test that a start on the base day is kept as is."""
        start = datetime(2023, 4, 12, 10, 0, 0, tzinfo=timezone.utc)

        assert resolve_time_range(BASE, start_time=start) == (start, None)

    def test_end_from_duration(self):
        """Test that end is start plus duration."""
        start = datetime(2023, 4, 12, 10, 0, 0, tzinfo=timezone.utc)

        _, end = resolve_time_range(BASE, start_time=start, duration=timedelta(minutes=5))

        assert end == datetime(2023, 4, 12, 10, 5, 0, tzinfo=timezone.utc)

    def test_explicit_end_wins_over_duration(self):
        """Test that an explicit end ignores the duration."""
        start = datetime(2023, 4, 12, 10, 0, 0, tzinfo=timezone.utc)
        end = datetime(2023, 4, 12, 11, 0, 0, tzinfo=timezone.utc)

        _, resolved_end = resolve_time_range(BASE, start, end, timedelta(minutes=5))

        assert resolved_end == end

    def test_duration_without_start_ignored(self):
        """Test that a duration alone sets no bounds."""
        assert resolve_time_range(BASE, duration=timedelta(minutes=5)) == (None, None)

    def test_end_reanchored(self):
        """Test that an end on another day moves to the base day."""
        end = datetime(2020, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

        _, resolved_end = resolve_time_range(BASE, end_time=end)

        assert resolved_end == datetime(2023, 4, 12, 12, 0, 0, tzinfo=timezone.utc)

    def test_duration_past_midnight_folds_back(self):
        """Test that an end crossing midnight is moved back onto the base day."""
        start = datetime(2023, 4, 12, 23, 50, 0, tzinfo=timezone.utc)

        _, end = resolve_time_range(BASE, start_time=start, duration=timedelta(minutes=20))

        assert end == datetime(2023, 4, 12, 0, 10, 0, tzinfo=timezone.utc)

    def test_naive_values_take_base_zone(self):
        """Test that naive times take the series zone."""
        base = datetime(2023, 4, 12, 9, 0, 0, tzinfo=timezone(timedelta(hours=8)))

        start, _ = resolve_time_range(base, start_time=datetime(2023, 4, 12, 10, 0, 0))

        assert start.utcoffset() == timedelta(hours=8)
        assert start.hour == 10

    def test_empty_series_no_anchoring(self):
        """Test that a missing base time leaves values as given."""
        start = datetime(2024, 1, 1, 10, 0, 0)

        resolved = resolve_time_range(None, start_time=start, duration=timedelta(hours=1))

        assert resolved == (start, datetime(2024, 1, 1, 11, 0, 0))


class TestFilterByTime:
    """Test inclusive window filtering."""

    def setup_method(self):
        self.points = [
            DataPoint(time=BASE + timedelta(seconds=i), req_count=1) for i in range(5)
        ]

    def test_inclusive_bounds(self):
        """Test that both bounds are kept."""
        start = BASE + timedelta(seconds=1)
        end = BASE + timedelta(seconds=3)

        result = filter_by_time(self.points, start, end)

        assert [p.time for p in result] == [start, BASE + timedelta(seconds=2), end]

    def test_open_start(self):
        """Test a window with only an end."""
        result = filter_by_time(self.points, end_time=BASE + timedelta(seconds=1))

        assert len(result) == 2

    def test_open_end(self):
        """Test a window with only a start."""
        result = filter_by_time(self.points, start_time=BASE + timedelta(seconds=4))

        assert len(result) == 1

    def test_unbounded(self):
        """Test that no bounds keep every point."""
        assert filter_by_time(self.points) == self.points

    def test_empty(self):
        """Test filtering an empty series."""
        assert filter_by_time([], BASE, BASE) == []


class TestParseDuration:
    """Test hh:mm:ss duration parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("00:10:00", timedelta(minutes=10)),
        ("01:30", timedelta(hours=1, minutes=30)),
        ("0:00:45", timedelta(seconds=45)),
        ("1.02:00:00", timedelta(days=1, hours=2)),
    ])
    def test_valid(self, text, expected):
        """Test accepted duration forms."""
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["10", "abc", "00:61:00", "1:2:3:4"])
    def test_invalid(self, text):
        """Test that malformed durations are configuration errors."""
        with pytest.raises(ConfigurationError):
            parse_duration(text)
