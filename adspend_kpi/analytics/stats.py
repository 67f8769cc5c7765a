"""Numeric helpers: null-safe ratios and half-up rounding.

Values are carried as Decimal so that rounding happens once, on the exact
result, instead of on a binary float approximation.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

Number = int | float | Decimal


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal via the shortest float repr (25.1 -> Decimal('25.1'))."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _finite(*values: Number) -> bool:
    return all(to_decimal(v).is_finite() for v in values)


def safe_ratio(
    numerator: Number, denominator: Number, scale: Number = 1
) -> Decimal | None:
    """numerator / denominator * scale.

    None when the denominator is 0 or any operand is infinite/NaN (e.g. a
    float sum that overflowed).
    """
    if denominator == 0 or not _finite(numerator, denominator, scale):
        return None
    return to_decimal(numerator) * to_decimal(scale) / to_decimal(denominator)


def round_half_up(value: Number | None, places: int = 2) -> float | None:
    """Round half away from zero (0.625 -> 0.63).

    None and non-finite values come back as None.
    """
    if value is None or not _finite(value):
        return None
    d = to_decimal(value)
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the decimals
        ctx.prec = max(ctx.prec, d.adjusted() + places + 2)
        # + 0.0 folds -0.0 into 0.0
        return float(d.quantize(quantum, rounding=ROUND_HALF_UP)) + 0.0


def delta(current: Number | None, prior: Number | None) -> Decimal | None:
    """current - prior, or None if either side is undefined."""
    if current is None or prior is None or not _finite(current, prior):
        return None
    return to_decimal(current) - to_decimal(prior)


def pct_change(current: Number | None, prior: Number | None) -> Decimal | None:
    """Relative change in percent: (current - prior) / prior * 100.

    Returns None when either side is undefined or prior is 0.
    """
    change = delta(current, prior)
    if change is None:
        return None
    return safe_ratio(change, prior, scale=100)


def format_pct(value: Number | None, places: int = 2) -> str | None:
    """Format as a percent string with fixed decimals ('7.96%')."""
    rounded = round_half_up(value, places)
    if rounded is None:
        return None
    return f"{rounded:.{places}f}%"
