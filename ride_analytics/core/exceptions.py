"""
Custom exception classes.

Scoring, aggregation and training load analysis never raise during normal
operation; degenerate inputs fall back to documented values. These
exceptions are raised only at construction and parsing seams.
"""
from typing import Optional


class AnalyticsError(Exception):
    """Base analytics exception with consistent structure."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code


class ConfigurationError(AnalyticsError):
    """Invalid configuration (e.g., a comfort weight table that doesn't sum to 1)."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = f"CONFIGURATION_ERROR_{field.upper()}" if field else "CONFIGURATION_ERROR"
        super().__init__(detail=detail, error_code=error_code)
        self.field = field


class InvalidInputError(AnalyticsError):
    """Input outside the documented domain of a parsing/accumulation helper."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = f"INVALID_INPUT_{field.upper()}" if field else "INVALID_INPUT"
        super().__init__(detail=detail, error_code=error_code)
        self.field = field
