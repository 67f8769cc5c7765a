"""Analytics module for ad spend KPI comparison."""

from .calculator import KPIAggregator, compare_kpis, comparison_windows
from .models import PeriodComparison, PeriodTotals, PeriodWindow

__all__ = [
    "KPIAggregator",
    "PeriodComparison",
    "PeriodTotals",
    "PeriodWindow",
    "compare_kpis",
    "comparison_windows",
]
