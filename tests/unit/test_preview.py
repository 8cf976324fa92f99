"""
Unit tests for the console preview table.
"""

from datetime import datetime, timezone

from burnout.data.preview import (
    NO_DATA_MESSAGE,
    PREVIEW_COLUMNS,
    build_preview_frame,
    render_preview,
)
from burnout.data.rollup import TimeUnit, rollup


BASE = datetime(2023, 4, 12, 10, 0, 0, tzinfo=timezone.utc)


class TestPreview:
    """Test preview rendering."""

    def _buckets(self, make_point):
        return rollup([
            make_point(BASE, req=1200, succ=1000, total_dura=50_000, fail=3,
                       err_codes={"500": 2, "404": 1}),
            make_point(BASE.replace(minute=1), req=2, fail=2, err_codes={"503": 2}),
        ], TimeUnit.MINUTE)

    def test_frame_columns_and_rows(self, make_point):
        """Test one row per bucket with the preview columns."""
        frame = build_preview_frame(self._buckets(make_point))

        assert list(frame.columns) == PREVIEW_COLUMNS
        assert list(frame["Time"]) == ["2023-04-12 10:00:00", "2023-04-12 10:01:00"]
        assert list(frame["Req (rps)"]) == [1200, 2]
        assert frame["AvgDura(ms)"].iloc[0] == 50
        assert frame["AvgDura(ms)"].isna().iloc[1]
        assert frame["Errors"].iloc[0] == "404:1, 500:2"

    def test_render_table(self, make_point):
        """Test the rendered text table."""
        text = render_preview(self._buckets(make_point))

        assert "Req (rps)" in text
        assert "2023-04-12 10:01:00" in text
        assert "1,200" in text
        assert "503:2" in text

    def test_render_empty(self):
        """Test the message shown for no buckets."""
        assert render_preview({}) == NO_DATA_MESSAGE
