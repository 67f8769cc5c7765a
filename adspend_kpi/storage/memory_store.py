"""In-memory, Polars-backed store for enriched ad spend rows."""

import logging
import threading
from collections.abc import Sequence
from datetime import date

import polars as pl

from ..analytics.expressions import in_window_expr, period_totals_expr
from ..analytics.models import PeriodTotals, PeriodWindow
from ..models.ad_spend import REVENUE_PER_CONVERSION, EnrichedRecord
from ..models.frames import ENRICHED_FRAME_SCHEMA, frame_to_records, records_to_frame

logger = logging.getLogger(__name__)

TABLE_NAME = "ad_spend"

PERIOD_TOTALS_SQL = """
SELECT
    COALESCE(SUM(spend), 0.0) AS total_spend,
    COALESCE(SUM(conversions), 0) AS total_conversions,
    COALESCE(SUM(conversions), 0) * {revenue_per_conversion} AS total_revenue,
    COUNT(*) AS row_count
FROM {table}
WHERE "date" >= '{start}' AND "date" <= '{end}'
"""


class AdSpendStore:
    """Queryable table of enriched rows.

    Bulk inserts build a new snapshot and swap it in under a lock, so
    readers only ever see fully inserted batches.

    Usage:
        store = AdSpendStore()
        store.insert_many(result.records)
        rows = store.query(start=date(2025, 6, 1), end=date(2025, 7, 1))
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._df = pl.DataFrame(schema=ENRICHED_FRAME_SCHEMA)

    def __len__(self) -> int:
        return len(self._df)

    def insert_many(self, records: Sequence[EnrichedRecord]) -> int:
        """Append records; returns the number of rows inserted."""
        batch = records_to_frame(records)
        with self._lock:
            self._df = pl.concat([self._df, batch], how="vertical")
        logger.info(
            "Inserted %s rows into %s (%s total)", len(batch), TABLE_NAME, len(self._df)
        )
        return len(batch)

    def clear(self) -> None:
        with self._lock:
            self._df = pl.DataFrame(schema=ENRICHED_FRAME_SCHEMA)

    def frame(
        self, start: date | None = None, end: date | None = None
    ) -> pl.DataFrame:
        """Rows whose date lies in [start, end]; open-ended when a bound is None.

        Rows with a date that is not ISO formatted only match an unbounded query.
        """
        df = self._df
        if start is None and end is None:
            return df
        dtype = df.schema["date"]
        return df.filter(in_window_expr(start or date.min, end or date.max, dtype))

    def query(
        self, start: date | None = None, end: date | None = None
    ) -> list[EnrichedRecord]:
        """Range query returning record models."""
        return frame_to_records(self.frame(start, end))

    def sql(self, query: str) -> pl.DataFrame:
        """Run a SQL query against the ``ad_spend`` table."""
        ctx = pl.SQLContext({TABLE_NAME: self._df}, eager=True)
        return ctx.execute(query)

    def period_totals_sql(
        self,
        window: PeriodWindow,
        revenue_per_conversion: float = REVENUE_PER_CONVERSION,
    ) -> PeriodTotals:
        """Window aggregates computed with SQL instead of expressions.

        Diagnostic helper for cross-checking KPIAggregator against the
        stored snapshot; the service and API always aggregate through
        KPIAggregator. Dates are compared as ISO strings, so only
        YYYY-MM-DD rows can match.
        """
        totals = self.sql(
            PERIOD_TOTALS_SQL.format(
                table=TABLE_NAME,
                start=window.start.isoformat(),
                end=window.end.isoformat(),
                revenue_per_conversion=revenue_per_conversion,
            )
        ).to_dicts()[0]
        return PeriodTotals(
            window=window,
            total_spend=float(totals["total_spend"]),
            total_conversions=int(totals["total_conversions"]),
            total_revenue=float(totals["total_revenue"]),
            row_count=int(totals["row_count"]),
        )
