"""Data enrichment functions - add derived per-row metrics."""

from collections.abc import Iterable
from datetime import date

from ..analytics.stats import round_half_up, safe_ratio
from ..models.ad_spend import REVENUE_PER_CONVERSION, AdSpendRecord, EnrichedRecord


def _rate(numerator: float, denominator: float, scale: int = 1) -> float:
    """Rounded ratio; 0 when the denominator is 0."""
    ratio = safe_ratio(numerator, denominator, scale)
    if ratio is None:
        return 0.0
    return round_half_up(ratio)


def enrich(
    record: AdSpendRecord,
    load_date: date,
    source_file_name: str,
    revenue_per_conversion: float = REVENUE_PER_CONVERSION,
) -> EnrichedRecord:
    """Add derived metrics to a single record.

    Zero-activity rows get 0 for every ratio rather than an error.
    """
    revenue = float(record.conversions * revenue_per_conversion)
    return EnrichedRecord(
        **record.model_dump(),
        ctr=_rate(record.clicks, record.impressions, 100),
        conversion_rate=_rate(record.conversions, record.clicks, 100),
        cpc=_rate(record.spend, record.clicks),
        cost_per_conversion=_rate(record.spend, record.conversions),
        impression_share=1 if record.impressions > 0 else 0,
        revenue_estimate=revenue,
        profit_estimate=revenue - record.spend,
        load_date=load_date,
        source_file_name=source_file_name,
    )


def enrich_all(
    records: Iterable[AdSpendRecord],
    load_date: date,
    source_file_name: str,
    revenue_per_conversion: float = REVENUE_PER_CONVERSION,
) -> list[EnrichedRecord]:
    """Apply enrichment to every record, preserving order."""
    return [
        enrich(r, load_date, source_file_name, revenue_per_conversion)
        for r in records
    ]
