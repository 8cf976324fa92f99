"""
Data module: Log reading, parsing, aggregation, windowing, rollup and charting.

Converts a W3C access log into a per-second request/response series and
derives the preview and chart views from it. Pipeline:

    Raw log lines
        ↓
    Ingestion (burnout/data/ingestion.py)
        ↓
    Parsing (burnout/data/parsers.py) → RawRecord
        ↓
    Aggregation (burnout/data/aggregation.py) → DataPoint per second
        ↓
    Store (burnout/data/store.py) → JSON series
        ↓
    Time window (burnout/data/ranges.py)
        ↓
    Rollup + preview table (burnout/data/rollup.py, burnout/data/preview.py)
    or densify + chart page (burnout/data/charts.py)
"""

from burnout.data.aggregation import (
    TimeSeriesAggregator,
    aggregate_file,
    aggregate_lines,
    compile_path_pattern,
    merge_series,
)
from burnout.data.charts import (
    densify,
    project,
    render_chart_html,
    write_chart,
)
from burnout.data.ingestion import (
    LogIngestionError,
    find_latest_log,
    find_latest_series,
    iter_log_lines,
)
from burnout.data.parsers import (
    FieldIndexMap,
    MalformedLineError,
    ParsingError,
    W3CLineParser,
    parse_line,
)
from burnout.data.preview import render_preview
from burnout.data.ranges import (
    filter_by_time,
    parse_duration,
    resolve_time_range,
)
from burnout.data.rollup import TimeUnit, rollup
from burnout.data.schema import (
    AggregationResult,
    ChartSeries,
    DataPoint,
    LineWarning,
    RawRecord,
    StatusClass,
)
from burnout.data.store import load_series, save_series

__all__ = [
    # Schema
    "DataPoint",
    "RawRecord",
    "StatusClass",
    "LineWarning",
    "AggregationResult",
    "ChartSeries",
    
    # Ingestion
    "iter_log_lines",
    "find_latest_log",
    "find_latest_series",
    "LogIngestionError",
    
    # Parsing
    "FieldIndexMap",
    "W3CLineParser",
    "parse_line",
    "ParsingError",
    "MalformedLineError",
    
    # Aggregation
    "TimeSeriesAggregator",
    "aggregate_lines",
    "aggregate_file",
    "compile_path_pattern",
    "merge_series",
    
    # Store
    "save_series",
    "load_series",
    
    # Windowing and views
    "resolve_time_range",
    "filter_by_time",
    "parse_duration",
    "TimeUnit",
    "rollup",
    "render_preview",
    "densify",
    "project",
    "render_chart_html",
    "write_chart",
]
