"""KPI Aggregator - period-over-period CAC and ROAS comparison."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

import polars as pl

from ..exceptions import InvalidWindowError
from ..models.ad_spend import REVENUE_PER_CONVERSION, EnrichedRecord
from ..models.frames import records_to_frame
from .expressions import in_window_expr, period_totals_expr
from .models import MetricName, PeriodComparison, PeriodTotals, PeriodWindow
from .stats import delta, format_pct, pct_change, round_half_up

REQUIRED_COLUMNS = {"date", "spend", "conversions"}


def validate_window_days(window_days: object) -> int:
    """Return window_days if it is a positive int, else raise InvalidWindowError."""
    if isinstance(window_days, bool) or not isinstance(window_days, int):
        raise InvalidWindowError(window_days)
    if window_days <= 0:
        raise InvalidWindowError(window_days)
    return window_days


def comparison_windows(
    end_date: date, window_days: int
) -> tuple[PeriodWindow, PeriodWindow]:
    """Current and prior windows ending at end_date.

    current: [end - days, end]
    prior:   [end - 2 * days, end - days - 1]

    The prior window ends the day before the current one starts, and the two
    start dates are exactly window_days apart.

    Returns:
        Tuple of (current, prior)
    """
    window_days = validate_window_days(window_days)
    if isinstance(end_date, datetime):
        end_date = end_date.date()

    current = PeriodWindow(
        start=end_date - timedelta(days=window_days),
        end=end_date,
    )
    prior = PeriodWindow(
        start=end_date - timedelta(days=2 * window_days),
        end=end_date - timedelta(days=window_days + 1),
    )
    return current, prior


def build_comparison(
    metric: MetricName,
    current: Decimal | None,
    prior: Decimal | None,
) -> PeriodComparison:
    """Compute deltas at full precision, then round every value once."""
    return PeriodComparison(
        metric=metric,
        current_value=round_half_up(current),
        prior_value=round_half_up(prior),
        delta_absolute=round_half_up(delta(current, prior)),
        delta_percentage=format_pct(pct_change(current, prior)),
    )


@dataclass
class KPIAggregator:
    """CAC/ROAS calculator over enriched ad spend rows.

    All methods are pure functions - they do not mutate the input DataFrame.

    Attributes:
        df: Enriched rows (at least date, spend and conversions columns)
        revenue_per_conversion: Revenue attributed to one conversion (default 50)
    """

    df: pl.DataFrame
    revenue_per_conversion: float = REVENUE_PER_CONVERSION

    def __post_init__(self) -> None:
        """Validate input DataFrame has required columns."""
        missing = REQUIRED_COLUMNS - set(self.df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

    @classmethod
    def from_records(
        cls,
        records: Sequence[EnrichedRecord],
        revenue_per_conversion: float = REVENUE_PER_CONVERSION,
    ) -> "KPIAggregator":
        return cls(records_to_frame(records), revenue_per_conversion)

    def get_period_totals(self, window: PeriodWindow) -> PeriodTotals:
        """Sum spend and conversions for rows dated inside the window.

        An empty window yields zero totals, so its CAC and ROAS are None.
        """
        dtype = self.df.schema["date"]
        totals = (
            self.df.filter(in_window_expr(window.start, window.end, dtype))
            .select(period_totals_expr(self.revenue_per_conversion))
            .to_dicts()[0]
        )

        return PeriodTotals(
            window=window,
            total_spend=totals["total_spend"] or 0.0,
            total_conversions=totals["total_conversions"] or 0,
            total_revenue=totals["total_revenue"] or 0.0,
            row_count=totals["row_count"],
        )

    def compare(self, end_date: date, window_days: int) -> list[PeriodComparison]:
        """Compare CAC and ROAS between the current and prior windows.

        Returns:
            [CAC comparison, ROAS comparison]

        Raises:
            InvalidWindowError: If window_days is not a positive integer
        """
        current_window, prior_window = comparison_windows(end_date, window_days)
        current = self.get_period_totals(current_window)
        prior = self.get_period_totals(prior_window)

        return [
            build_comparison("CAC", current.cac, prior.cac),
            build_comparison("ROAS", current.roas, prior.roas),
        ]


def compare_kpis(
    records: Sequence[EnrichedRecord] | pl.DataFrame,
    end_date: date,
    window_days: int,
    revenue_per_conversion: float = REVENUE_PER_CONVERSION,
) -> list[PeriodComparison]:
    """Period-over-period CAC and ROAS for enriched records.

    Accepts record models or a DataFrame with the enriched columns.
    """
    validate_window_days(window_days)
    if isinstance(records, pl.DataFrame):
        aggregator = KPIAggregator(records, revenue_per_conversion)
    else:
        aggregator = KPIAggregator.from_records(records, revenue_per_conversion)
    return aggregator.compare(end_date, window_days)
