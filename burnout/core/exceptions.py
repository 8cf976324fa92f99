"""
Custom exceptions for the burnout chart tool.

Use them to distinguish between bad input data and bad configuration.
Layer-specific errors (parsing, ingestion) live beside the code that raises them.
"""


class DataValidationError(Exception):
    """Raised when a stored series fails validation or cannot be loaded."""
    pass


class ConfigurationError(Exception):
    """Raised when configuration or user-supplied options are invalid."""
    pass
