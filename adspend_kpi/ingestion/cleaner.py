"""Numeric coercion and string cleaning using Polars expressions.

Every numeric cell ends up a number: anything that does not parse as a
finite, non-negative value in range becomes 0.
"""

import polars as pl

# Float strings at or above this cannot be represented as Int64
INT64_LIMIT = 2.0**63


def _text_expr(col_name: str) -> pl.Expr:
    return pl.col(col_name).cast(pl.Utf8).str.strip_chars()


def parsed_number_expr(col_name: str) -> pl.Expr:
    """Parse a text column as Float64, null where it is not a number."""
    return _text_expr(col_name).cast(pl.Float64, strict=False)


def parsed_integer_expr(col_name: str) -> pl.Expr:
    """Parse a text column as Int64, null where it is not a usable integer.

    Plain integer strings are parsed exactly; float strings like '3.0' or
    '1e3' fall back to Float64 and are truncated when in Int64 range.
    """
    as_float = parsed_number_expr(col_name)
    from_float = (
        pl.when(as_float.is_finite() & (as_float.abs() < INT64_LIMIT))
        .then(as_float)
        .otherwise(None)
        .cast(pl.Int64, strict=False)
    )
    return _text_expr(col_name).cast(pl.Int64, strict=False).fill_null(from_float)


def valid_number_expr(col_name: str) -> pl.Expr:
    """True where the cell holds a finite, non-negative number."""
    parsed = parsed_number_expr(col_name)
    return (parsed.is_finite() & (parsed >= 0)).fill_null(False)


def valid_integer_expr(col_name: str) -> pl.Expr:
    """True where the cell holds a non-negative integer in Int64 range."""
    return (parsed_integer_expr(col_name) >= 0).fill_null(False)


def coerce_decimal_column(col_name: str) -> pl.Expr:
    """Convert to non-negative float, defaulting bad values to 0.0."""
    return (
        pl.when(valid_number_expr(col_name))
        .then(parsed_number_expr(col_name))
        .otherwise(0.0)
        .alias(col_name)
    )


def coerce_integer_column(col_name: str) -> pl.Expr:
    """Convert to non-negative integer, defaulting bad values to 0."""
    return (
        pl.when(valid_integer_expr(col_name))
        .then(parsed_integer_expr(col_name))
        .otherwise(0)
        .cast(pl.Int64)
        .alias(col_name)
    )


def clean_string_column(col_name: str) -> pl.Expr:
    """Strip whitespace; missing values become empty strings."""
    return (
        pl.col(col_name)
        .cast(pl.Utf8)
        .str.strip_chars()
        .fill_null("")
        .alias(col_name)
    )


def count_defaulted(
    df: pl.DataFrame, decimal_cols: list[str], integer_cols: list[str]
) -> int:
    """Count numeric cells that will fall back to 0 during coercion."""
    exprs = [
        (~valid_number_expr(c)).sum().alias(c)
        for c in decimal_cols
        if c in df.columns
    ] + [
        (~valid_integer_expr(c)).sum().alias(c)
        for c in integer_cols
        if c in df.columns
    ]
    if not exprs or df.is_empty():
        return 0
    counts = df.select(exprs).row(0)
    return int(sum(counts))


def apply_coercion(
    df: pl.DataFrame,
    string_cols: list[str],
    decimal_cols: list[str],
    integer_cols: list[str],
) -> pl.DataFrame:
    """Apply all cleaning transformations to DataFrame.

    Columns absent from the DataFrame are added as nulls first, so every
    listed column exists in the output with its target type.
    """
    missing = [
        c
        for c in [*string_cols, *decimal_cols, *integer_cols]
        if c not in df.columns
    ]
    if missing:
        df = df.with_columns([pl.lit(None, dtype=pl.Utf8).alias(c) for c in missing])

    exprs: list[pl.Expr] = []
    exprs.extend(clean_string_column(c) for c in string_cols)
    exprs.extend(coerce_decimal_column(c) for c in decimal_cols)
    exprs.extend(coerce_integer_column(c) for c in integer_cols)

    if exprs:
        return df.with_columns(exprs)
    return df
