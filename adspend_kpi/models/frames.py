"""Conversion between record models and Polars DataFrames."""

from collections.abc import Sequence

import polars as pl

from .ad_spend import EnrichedRecord

ENRICHED_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "date": pl.Utf8,
    "platform": pl.Utf8,
    "account": pl.Utf8,
    "campaign": pl.Utf8,
    "country": pl.Utf8,
    "device": pl.Utf8,
    "spend": pl.Float64,
    "clicks": pl.Int64,
    "impressions": pl.Int64,
    "conversions": pl.Int64,
    "ctr": pl.Float64,
    "conversion_rate": pl.Float64,
    "cpc": pl.Float64,
    "cost_per_conversion": pl.Float64,
    "impression_share": pl.Int64,
    "revenue_estimate": pl.Float64,
    "profit_estimate": pl.Float64,
    "load_date": pl.Date,
    "source_file_name": pl.Utf8,
}


def records_to_frame(records: Sequence[EnrichedRecord]) -> pl.DataFrame:
    """Build a DataFrame with one row per record (empty input keeps the schema)."""
    return pl.DataFrame(
        [r.model_dump() for r in records], schema=ENRICHED_FRAME_SCHEMA
    )


def frame_to_records(df: pl.DataFrame) -> list[EnrichedRecord]:
    """Rebuild record models from a DataFrame produced by records_to_frame()."""
    return [EnrichedRecord.model_validate(row) for row in df.to_dicts()]
