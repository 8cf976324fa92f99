"""
Pytest configuration and shared fixtures.

Provides sample W3C log content, a helper to build DataPoints and a
temporary log file for unit and integration tests.
"""

import pytest
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from burnout.data.schema import DataPoint


SCENARIO_HEADER = "#Fields: date time cs-method cs-uri-stem sc-status time-taken"

# IIS default layout: date time s-ip cs-method cs-uri-stem cs-uri-query s-port
# cs-username c-ip cs(User-Agent) cs(Referer) sc-status sc-substatus
# sc-win32-status time-taken
IIS_HEADER = (
    "#Fields: date time s-ip cs-method cs-uri-stem cs-uri-query s-port cs-username "
    "c-ip cs(User-Agent) cs(Referer) sc-status sc-substatus sc-win32-status time-taken"
)


def _iis_line(
    stamp: str,
    method: str = "GET",
    path: str = "/api/orders",
    status: str = "200",
    time_taken: int = 100,
) -> str:
    """Build a data line in the IIS default column layout."""
    date_part, time_part = stamp.split(" ")
    return (
        f"{date_part} {time_part} 10.0.0.1 {method} {path} - 443 - 10.0.0.9 "
        f"Mozilla/5.0 - {status} 0 0 {time_taken}"
    )


def _make_point(
    ts: datetime,
    req: int = 0,
    succ: int = 0,
    fail: int = 0,
    total_dura: int = 0,
    err_codes: Optional[Dict[str, int]] = None,
    max_dura: int = 0,
) -> DataPoint:
    """Build a DataPoint with the given counters."""
    return DataPoint(
        time=ts,
        req_count=req,
        succ_count=succ,
        fail_count=fail,
        total_succ_dura=total_dura,
        max_succ_dura=max_dura,
        err_codes=dict(err_codes or {}),
    )


@pytest.fixture
def iis_line():
    """Factory for data lines in the IIS default layout."""
    return _iis_line


@pytest.fixture
def make_point():
    """Factory for DataPoints with given counters."""
    return _make_point


@pytest.fixture
def utc():
    """Display zone used by tests so local time equals log time."""
    return timezone.utc


@pytest.fixture
def scenario_lines() -> List[str]:
    """The two-line reference scenario with its Fields header."""
    return [
        SCENARIO_HEADER,
        "2023-01-01 00:00:01 GET /a 200 500",
        "2023-01-01 00:00:02 GET /b 404 100",
    ]


@pytest.fixture
def sample_iis_lines(iis_line) -> List[str]:
    """
    A small IIS log with a full header block, a comment, a bad line and
    mixed methods, paths and statuses.
    """
    return [
        "#Software: Microsoft Internet Information Services 10.0",
        "#Version: 1.0",
        "#Date: 2023-04-12 00:00:00",
        IIS_HEADER,
        iis_line("2023-04-12 10:00:00", time_taken=250),
        iis_line("2023-04-12 10:00:01", status="500", time_taken=1200),
        iis_line("2023-04-12 10:00:01", method="POST", path="/api/login", status="302", time_taken=80),
        "2023-04-12 10:00:02 garbage",
        iis_line("2023-04-12 10:00:03", path="/static/site.css", status="304", time_taken=3),
        "",
        iis_line("2023-04-12 10:01:10", status="404", time_taken=15),
    ]


@pytest.fixture
def sample_log_file(tmp_path, sample_iis_lines) -> Path:
    """sample_iis_lines written to tmp_path/u_ex230412.log."""
    path = tmp_path / "u_ex230412.log"
    path.write_text("\n".join(sample_iis_lines) + "\n", encoding="utf-8")
    return path


def pytest_configure(config):
    """
    Pytest hook for custom configuration.
    
    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
