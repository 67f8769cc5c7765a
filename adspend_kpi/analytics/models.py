"""Output models for KPI calculations."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from .stats import safe_ratio

MetricName = Literal["CAC", "ROAS"]


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive date range."""

    start: date
    end: date

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class PeriodTotals:
    """Summed spend and conversions for one window.

    Revenue is recomputed from total conversions, not summed per row.
    """

    window: PeriodWindow
    total_spend: float
    total_conversions: int
    total_revenue: float
    row_count: int

    @property
    def cac(self) -> Decimal | None:
        """Spend per conversion; None when there were no conversions."""
        return safe_ratio(self.total_spend, self.total_conversions)

    @property
    def roas(self) -> Decimal | None:
        """Revenue per unit of spend; None when nothing was spent."""
        return safe_ratio(self.total_revenue, self.total_spend)


@dataclass(frozen=True)
class PeriodComparison:
    """Current vs prior value of one KPI, rounded for presentation."""

    metric: MetricName
    current_value: float | None
    prior_value: float | None
    delta_absolute: float | None
    delta_percentage: str | None  # e.g. "7.96%"
