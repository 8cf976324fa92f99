"""
Core module: Configuration, logging, and exception handling.
"""

from .config import Config, config
from .exceptions import (
    ConfigurationError,
    DataValidationError,
)

__all__ = [
    "Config",
    "config",
    "ConfigurationError",
    "DataValidationError",
]
