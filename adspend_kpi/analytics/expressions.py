"""Reusable Polars expressions for KPI calculations."""

from datetime import date

import polars as pl

DATE_FORMAT = "%Y-%m-%d"


def row_date_expr(dtype: pl.DataType, col_name: str = "date") -> pl.Expr:
    """Row date as pl.Date.

    Source dates are kept as text; anything not in ISO form becomes null and
    therefore falls outside every window.
    """
    col = pl.col(col_name)

    if dtype == pl.Date:
        return col
    elif dtype.base_type() == pl.Datetime:
        return col.dt.date()
    else:
        return (
            col.cast(pl.Utf8)
            .str.strip_chars()
            .str.to_date(DATE_FORMAT, strict=False)
        )


def in_window_expr(
    start: date, end: date, dtype: pl.DataType, col_name: str = "date"
) -> pl.Expr:
    """True for rows whose date falls in [start, end]."""
    return (
        row_date_expr(dtype, col_name)
        .is_between(start, end, closed="both")
        .fill_null(False)
    )


def period_totals_expr(revenue_per_conversion: float) -> list[pl.Expr]:
    """Expressions for per-window aggregates.

    total_revenue = sum(conversions) * revenue_per_conversion
    """
    return [
        pl.col("spend").sum().cast(pl.Float64).alias("total_spend"),
        pl.col("conversions").sum().cast(pl.Int64).alias("total_conversions"),
        (pl.col("conversions").sum() * revenue_per_conversion)
        .cast(pl.Float64)
        .alias("total_revenue"),
        pl.len().alias("row_count"),
    ]
