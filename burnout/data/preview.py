"""
Console preview of a rolled-up series.
"""

from typing import Dict

import pandas as pd

from burnout.data.schema import DataPoint

NO_DATA_MESSAGE = "No data matched."

PREVIEW_COLUMNS = ["Time", "Req (rps)", "Succ (rps)", "Fail (rps)", "AvgDura(ms)", "Errors"]


def _format_errors(err_codes: Dict[str, int]) -> str:
    return ", ".join(f"{code}:{count}" for code, count in sorted(err_codes.items()))


def build_preview_frame(buckets: Dict[str, DataPoint]) -> pd.DataFrame:
    """
    One row per rollup bucket, in key order.

    AvgDura(ms) is empty for buckets without successes.
    """
    rows = [
        {
            "Time": key,
            "Req (rps)": point.req_count,
            "Succ (rps)": point.succ_count,
            "Fail (rps)": point.fail_count,
            "AvgDura(ms)": point.avg_succ_dura,
            "Errors": _format_errors(point.err_codes),
        }
        for key, point in buckets.items()
    ]
    frame = pd.DataFrame(rows, columns=PREVIEW_COLUMNS)
    frame["AvgDura(ms)"] = frame["AvgDura(ms)"].astype("Int64")
    return frame


def render_preview(buckets: Dict[str, DataPoint]) -> str:
    """Text table for the console."""
    if not buckets:
        return NO_DATA_MESSAGE
    frame = build_preview_frame(buckets)
    return frame.to_string(
        index=False,
        na_rep="",
        formatters={
            col: "{:,}".format for col in ("Req (rps)", "Succ (rps)", "Fail (rps)")
        },
    )
