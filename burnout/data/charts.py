"""
Burnout chart series and page output.

Densifies a filtered per-second series (one point per second, gaps filled
with zero buckets), projects it into parallel arrays and writes a Chart.js
page showing arrivals, successes, failures and average duration.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from burnout.data.schema import ChartSeries, DataPoint

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "chart.html"
SCRIPT_PLACEHOLDER = "<script></script>"


def densify(series: Iterable[DataPoint]) -> List[DataPoint]:
    """
    Fill every second between the first and last point.

    Args:
        series: Filtered DataPoints (any order)

    Returns:
        One DataPoint per second from first to last inclusive; seconds with
        no data get a zero DataPoint. Empty input gives an empty list.
    """
    points = sorted(series, key=lambda p: p.time)
    if not points:
        return []

    by_time = {p.time: p for p in points}
    start, end = points[0].time, points[-1].time
    zone = start.tzinfo
    if zone is not None:
        # Offsets may differ across a DST change; step on the UTC timeline
        start, end = start.astimezone(timezone.utc), end.astimezone(timezone.utc)

    dense = []
    for ts in pd.date_range(start=start, end=end, freq="s").to_pydatetime():
        if zone is not None:
            ts = ts.astimezone(zone)
        point = by_time.get(ts)
        dense.append(point if point is not None else DataPoint(time=ts))
    return dense


def format_offset(delta: timedelta) -> str:
    """
    Format an elapsed time as "mm:ss".

    Minutes wrap at the hour, so 1:02:03 is shown as "02:03".
    """
    total = int(delta.total_seconds())
    return f"{(total // 60) % 60:02d}:{total % 60:02d}"


def project(dense: List[DataPoint]) -> ChartSeries:
    """
    Split a dense series into parallel plotting arrays.

    Labels are offsets from the first point.
    """
    if not dense:
        return ChartSeries()

    base_time = dense[0].time
    return ChartSeries(
        base_time=base_time,
        labels=[format_offset(p.time - base_time) for p in dense],
        req_series=[p.req_count for p in dense],
        succ_series=[p.succ_count for p in dense],
        fail_series=[p.fail_count for p in dense],
        avg_dura_series=[p.avg_succ_dura for p in dense],
    )


def _dataset(
    label: str,
    data: List[Optional[int]],
    color: str,
    y_axis_id: str = "y1",
    fill: bool = False,
    background_color: str = "rgba(0,0,0,0.1)",
) -> Dict[str, Any]:
    return {
        "label": label,
        "data": data,
        "backgroundColor": background_color,
        "borderColor": color,
        "borderWidth": 1,
        "fill": fill,
        "yAxisID": y_axis_id,
        "pointRadius": 0,
    }


def build_chart_options(chart: ChartSeries) -> Dict[str, Any]:
    """Chart.js data object: labels plus one dataset per series."""
    return {
        "labels": chart.labels,
        "datasets": [
            _dataset("Arrival (rps)", chart.req_series, "orange"),
            _dataset("Succ (rps)", chart.succ_series, "green"),
            _dataset("Fail (rps)", chart.fail_series, "red"),
            _dataset("Avg Dura (ms)", chart.avg_dura_series, "blue", y_axis_id="y2"),
        ],
    }


def _script_json(value: Any) -> str:
    # Keep "</script>" inside strings from closing the tag
    return json.dumps(value).replace("</", "<\\/")


def default_chart_title(chart: ChartSeries) -> str:
    if chart.base_time is None:
        return "Burnout Chart"
    return f"Burnout Chart - {chart.base_time:%H:%M:%S}"


def default_chart_path(output_dir: Union[str, Path], now: Optional[datetime] = None) -> Path:
    """Timestamped page path, e.g. htmls/20230412103000.html."""
    now = now or datetime.now()
    return Path(output_dir) / f"{now:%Y%m%d%H%M%S}.html"


def render_chart_html(title: str, chart: ChartSeries) -> str:
    """
    Fill the page template with the chart data.

    Returns:
        Complete HTML document
    """
    template = resources.files("burnout").joinpath("templates").joinpath(TEMPLATE_NAME)
    template = template.read_text(encoding="utf-8")
    base_label = f"{chart.base_time:%Y-%m-%d %H:%M:%S}" if chart.base_time else ""
    script = (
        "<script>\n"
        f"setChartTitle({_script_json(title)}, {_script_json(base_label)});\n"
        f"let data={_script_json(build_chart_options(chart))};drawChart(data);\n"
        "</script>"
    )
    return template.replace(SCRIPT_PLACEHOLDER, script, 1)


def write_chart(title: str, chart: ChartSeries, html_path: Union[str, Path]) -> Path:
    """
    Write the chart page, creating parent directories.

    Returns:
        Path of the written file
    """
    html_path = Path(html_path)
    html_path.parent.mkdir(parents=True, exist_ok=True)
    html_path.write_text(render_chart_html(title, chart), encoding="utf-8")
    logger.info(f"Chart saved to {html_path}")
    return html_path
