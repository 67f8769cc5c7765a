"""Validation utilities for the ingestion pipeline."""

from typing import Any

import polars as pl
from pydantic import ValidationError

from ..exceptions import DataValidationError
from ..models.ad_spend import AdSpendRecord


def to_records(df: pl.DataFrame) -> list[AdSpendRecord]:
    """Validate each row against the Pydantic model and return the records.

    Collects all errors before raising, for better debugging.

    Args:
        df: Coerced DataFrame from the parser

    Raises:
        DataValidationError: If any rows fail validation
    """
    errors: list[dict[str, Any]] = []
    records: list[AdSpendRecord] = []
    rows = df.to_dicts()

    for i, row in enumerate(rows):
        try:
            records.append(AdSpendRecord.model_validate(row))
        except ValidationError as e:
            errors.append({"row": row.get("line_no", i), "errors": e.errors()})

    if errors:
        raise DataValidationError(errors, len(rows))
    return records
