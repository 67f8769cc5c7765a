"""Custom exceptions for the ingestion and KPI pipeline."""

from typing import Any


class AdSpendError(Exception):
    """Base exception for the ad spend pipeline."""

    pass


class IngestionError(AdSpendError):
    """Base exception for ingestion errors."""

    pass


class EmptyInputError(IngestionError):
    """Raw text is missing or contains no data lines."""

    pass


class SchemaLoadError(IngestionError):
    """Failed to load schema configuration."""

    pass


class DataValidationError(IngestionError):
    """Data validation failed against Pydantic model."""

    def __init__(self, errors: list[dict[str, Any]], row_count: int):
        self.errors = errors
        self.row_count = row_count
        super().__init__(
            f"Validation failed for {len(errors)} of {row_count} rows. "
            f"First error: {errors[0] if errors else 'N/A'}"
        )


class InvalidWindowError(AdSpendError, ValueError):
    """Comparison window length is not a positive number of days."""

    def __init__(self, window_days: Any):
        self.window_days = window_days
        super().__init__(
            f"Window length must be a positive integer of days, got {window_days!r}"
        )
