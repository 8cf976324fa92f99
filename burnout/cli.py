"""
Command-line entry point for the burnout chart tool.

Subcommands:
    parse    Parse an IIS log file and save the per-second series as JSON
    preview  Print a rollup table of a saved series
    chart    Write a burnout chart page for a saved series
"""

from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Sequence

from burnout import __version__
from burnout.core.config import config
from burnout.core.exceptions import ConfigurationError, DataValidationError
from burnout.core.logging_config import setup_logging
from burnout.data.aggregation import aggregate_file
from burnout.data.charts import (
    default_chart_path,
    default_chart_title,
    densify,
    project,
    write_chart,
)
from burnout.data.ingestion import LogIngestionError, find_latest_log, find_latest_series
from burnout.data.parsers import resolve_timezone
from burnout.data.preview import NO_DATA_MESSAGE, render_preview
from burnout.data.ranges import filter_by_time, parse_duration, resolve_time_range
from burnout.data.rollup import TimeUnit, rollup
from burnout.data.schema import DataPoint
from burnout.data.store import default_output_path, load_series, save_series

logger = logging.getLogger("burnout.cli")

METHOD_CHOICES = ["*", "GET", "POST"]
UNIT_CHOICES = [unit.value for unit in TimeUnit]


def _parse_datetime(value: str) -> datetime:
    """Accept a full ISO date-time or a bare clock time (today's date)."""
    value = value.strip()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            clock = datetime.strptime(value, fmt).time()
        except ValueError:
            continue
        return datetime.combine(date.today(), clock)
    raise argparse.ArgumentTypeError(f"invalid date/time: {value!r}")


def _parse_duration_arg(value: str):
    try:
        return parse_duration(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _add_range_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-s", "--startTime", dest="start_time", type=_parse_datetime,
                        help="The start time of target period.")
    parser.add_argument("-e", "--endTime", dest="end_time", type=_parse_datetime,
                        help="The end time of target period.")
    parser.add_argument("-d", "--dura", dest="duration", type=_parse_duration_arg,
                        help="The duration (format 'hh:mm:ss') of target period.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iis-burnout",
        description=f"IIS burnout chart tool ver {__version__}",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Show progress (-v) or debug (-vv) messages on the console.")
    subparsers = parser.add_subparsers(dest="command")

    parse_cmd = subparsers.add_parser("parse", help="Parse IIS log file and save result as json.")
    parse_cmd.add_argument("log_path", nargs="?", type=Path,
                           help="The IIS log file to parse. Default is the newest u_ex*.log file in current directory.")
    parse_cmd.add_argument("-m", "--method", choices=METHOD_CHOICES,
                           default=config.parsing.default_method, help="HTTP method to filter.")
    parse_cmd.add_argument("-p", "--urlPath", dest="url_path", default=config.parsing.default_path_pattern,
                           help="Regular expression pattern to filter URL path.")
    parse_cmd.add_argument("-o", "--output", type=Path, help="The output file path to save parsed data JSON.")

    preview_cmd = subparsers.add_parser("preview", help="Preview IIS load data json file.")
    preview_cmd.add_argument("json_path", nargs="?", type=Path,
                             help="The IIS load data json file. Default is the newest u_ex*.json file in current directory.")
    preview_cmd.add_argument("-u", "--unit", choices=UNIT_CHOICES, default=TimeUnit.MINUTE.value,
                             help="Time unit (hour/minute/second)")
    _add_range_options(preview_cmd)

    chart_cmd = subparsers.add_parser("chart", help="Generate burnout chart from IIS load data json file.")
    chart_cmd.add_argument("json_path", nargs="?", type=Path,
                           help="The IIS load data json file. Default is the newest u_ex*.json file in current directory.")
    _add_range_options(chart_cmd)
    chart_cmd.add_argument("-t", "--title", help="The title of burnout chart.")
    chart_cmd.add_argument("-o", "--output", type=Path, help="The output file path to save burnout chart html.")
    chart_cmd.add_argument("--no-browser", dest="open_browser", action="store_false",
                           default=config.chart.open_browser, help="Don't open the chart in a browser.")

    return parser


def _select_window(points: List[DataPoint], args: argparse.Namespace) -> List[DataPoint]:
    base_time = points[0].time if points else None
    start_time, end_time = resolve_time_range(base_time, args.start_time, args.end_time, args.duration)
    return filter_by_time(points, start_time, end_time)


def run_parse(args: argparse.Namespace) -> int:
    log_path = args.log_path or find_latest_log(Path.cwd())
    if log_path is None:
        print("No u_ex*.log file found in current directory.", file=sys.stderr)
        return 1

    result = aggregate_file(
        log_path,
        method_filter=args.method,
        path_pattern=args.url_path,
        tz=resolve_timezone(config.timezone),
        progress_interval=config.parsing.progress_interval,
    )
    print(f"{result.line_count:,} lines parsed.")
    if result.warnings:
        print(f"{result.warning_count:,} malformed line(s) skipped (first at line {result.warnings[0].line_number}).")

    json_path = args.output or default_output_path(log_path)
    save_series(result.points, json_path)
    print(f"Save parsed data to {Path(json_path).resolve()}.")
    return 0


def _load_points(args: argparse.Namespace) -> Optional[List[DataPoint]]:
    json_path = args.json_path or find_latest_series(Path.cwd())
    if json_path is None:
        print("No u_ex*.json file found in current directory.", file=sys.stderr)
        return None
    return load_series(json_path)


def run_preview(args: argparse.Namespace) -> int:
    points = _load_points(args)
    if points is None:
        return 1
    buckets = rollup(_select_window(points, args), TimeUnit(args.unit))
    print(render_preview(buckets))
    return 0


def run_chart(args: argparse.Namespace) -> int:
    points = _load_points(args)
    if points is None:
        return 1
    selected = _select_window(points, args)
    if not selected:
        print(NO_DATA_MESSAGE)
        return 0

    chart = project(densify(selected))
    html_path = args.output or default_chart_path(config.chart.output_dir)
    write_chart(args.title or default_chart_title(chart), chart, html_path)
    print(f"Chart saved to {Path(html_path).resolve()}.")
    if args.open_browser:
        webbrowser.open(Path(html_path).resolve().as_uri())
    return 0


COMMANDS = {
    "parse": run_parse,
    "preview": run_preview,
    "chart": run_chart,
}


def _console_level(verbose: int) -> Optional[str]:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    try:
        setup_logging(console_level=_console_level(args.verbose))
        return COMMANDS[args.command](args)
    except (ConfigurationError, DataValidationError, LogIngestionError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
