"""KPI service - orchestrates ingestion, storage and period comparison."""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Any

from ..analytics import KPIAggregator, PeriodComparison, comparison_windows
from ..ingestion import DataIngestionPipeline, ParseStats
from ..storage import AdSpendStore

logger = logging.getLogger(__name__)

SCHEMA_PATH_ENV = "ADSPEND_SCHEMA_PATH"


class KPIService:
    """Service for loading ad spend text and comparing CAC/ROAS windows.

    Orchestrates:
    1. Parsing and enrichment of raw delimited text
    2. Bulk insert into the record store
    3. Range query of the two comparison windows
    4. Serialization of the comparison rows

    Usage:
        service = KPIService()
        service.ingest(raw_csv, source_file_name="ad_spend.csv")
        rows = service.to_response(service.compare(date(2025, 7, 1), days=30))
    """

    def __init__(
        self,
        store: AdSpendStore | None = None,
        schema_path: Path | None = None,
    ):
        """Initialize service with schema configuration.

        Args:
            store: Record store. Defaults to a new in-memory store.
            schema_path: Path to schema_registry.yaml. Defaults to
                $ADSPEND_SCHEMA_PATH, then the bundled config.
        """
        env_path = os.getenv(SCHEMA_PATH_ENV)
        self.schema_path = schema_path or (Path(env_path) if env_path else None)
        self.pipeline = DataIngestionPipeline(self.schema_path)
        self.store = store if store is not None else AdSpendStore()

    @property
    def default_window_days(self) -> int:
        return self.pipeline.schema.default_window_days

    def ingest(
        self,
        raw_text: str,
        source_file_name: str,
        load_date: date | None = None,
    ) -> ParseStats:
        """Parse, enrich and store one file's worth of text.

        Raises:
            EmptyInputError: If raw_text has no data lines (nothing is stored)
        """
        result = self.pipeline.ingest(raw_text, source_file_name, load_date)
        self.store.insert_many(result.records)
        return result.stats

    def compare(
        self,
        end_date: date | None = None,
        days: int | None = None,
    ) -> list[PeriodComparison]:
        """Compare CAC and ROAS for the window ending at end_date.

        Args:
            end_date: Last day of the current window (default: today)
            days: Window length (default: registry default, 30)

        Raises:
            InvalidWindowError: If days is not a positive integer
        """
        end_date = end_date or date.today()
        days = self.default_window_days if days is None else days

        current, prior = comparison_windows(end_date, days)
        df = self.store.frame(prior.start, current.end)
        logger.info(
            "Comparing %s-day windows ending %s over %s rows",
            days,
            end_date.isoformat(),
            len(df),
        )

        engine = KPIAggregator(
            df=df,
            revenue_per_conversion=self.pipeline.schema.revenue_per_conversion,
        )
        return engine.compare(end_date, days)

    def to_response(
        self, comparisons: list[PeriodComparison]
    ) -> list[dict[str, Any]]:
        """Convert comparisons to JSON-serializable rows.

        Key names are fixed for compatibility with existing consumers,
        whatever the window length.
        """
        return [
            {
                "metric": c.metric,
                "last_30_days": c.current_value,
                "prior_30_days": c.prior_value,
                "delta_absolute": c.delta_absolute,
                "delta_percentage": c.delta_percentage,
            }
            for c in comparisons
        ]
