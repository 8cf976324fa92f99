"""
JSON persistence for aggregated series.

The parse step saves the per-second series next to the log file; the preview
and chart steps load it back. Field names follow the DataPoint aliases
(reqCount, successCount, ...).
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from pydantic import TypeAdapter, ValidationError

from burnout.core.exceptions import DataValidationError
from burnout.data.schema import DataPoint

logger = logging.getLogger(__name__)

_SERIES_ADAPTER = TypeAdapter(List[DataPoint])


def default_output_path(log_path: Union[str, Path]) -> Path:
    """u_ex230412.log -> u_ex230412.json"""
    return Path(log_path).with_suffix(".json")


def save_series(points: Iterable[DataPoint], json_path: Union[str, Path]) -> Path:
    """
    Write a series as an indented JSON array.

    Returns:
        Path of the written file
    """
    json_path = Path(json_path)
    json_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.write_bytes(_SERIES_ADAPTER.dump_json(list(points), by_alias=True, indent=2))
    logger.info(f"Saved series to {json_path}")
    return json_path


def load_series(json_path: Union[str, Path]) -> List[DataPoint]:
    """
    Read a series saved by save_series.

    Returns:
        DataPoints ordered ascending by time (possibly empty)

    Raises:
        DataValidationError: If the file is missing or not a valid series
    """
    json_path = Path(json_path)
    try:
        raw = json_path.read_bytes()
    except OSError as e:
        raise DataValidationError(f"Cannot read series file {json_path}: {e}") from e

    try:
        points = _SERIES_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise DataValidationError(f"Invalid series file {json_path}: {e}") from e

    return sorted(points, key=lambda p: p.time)
