"""Main data ingestion pipeline."""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from ..models.ad_spend import EnrichedRecord
from .enricher import enrich_all
from .parser import ParseStats, parse
from .schema import load_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionResult:
    """Enriched records from one ingestion call, with parse accounting."""

    records: list[EnrichedRecord]
    stats: ParseStats
    source_file_name: str
    load_date: date


class DataIngestionPipeline:
    """Pipeline for parsing, coercing and enriching ad spend text.

    Usage:
        pipeline = DataIngestionPipeline()
        result = pipeline.ingest(raw_csv, source_file_name="ad_spend.csv")
    """

    def __init__(self, schema_path: Path | None = None):
        self.schema = load_schema(schema_path)

    def ingest(
        self,
        raw_text: str,
        source_file_name: str,
        load_date: date | None = None,
    ) -> IngestionResult:
        """Full pipeline: Parse -> Coerce -> Validate -> Enrich.

        Args:
            raw_text: Delimited text, already fetched by the caller
            source_file_name: Name recorded on every enriched row
            load_date: Load date recorded on every row (default: today)

        Returns:
            IngestionResult with enriched records and ParseStats

        Raises:
            EmptyInputError: If raw_text has no data lines
        """
        load_date = load_date or date.today()

        records, stats = parse(raw_text, self.schema)

        if stats.skipped:
            logger.warning(
                "%s: skipped %s of %s rows with a mismatched field count",
                source_file_name,
                stats.skipped,
                stats.data_lines,
            )
        if stats.defaulted_values:
            logger.warning(
                "%s: %s numeric values could not be parsed and were set to 0",
                source_file_name,
                stats.defaulted_values,
            )

        enriched = enrich_all(
            records,
            load_date=load_date,
            source_file_name=source_file_name,
            revenue_per_conversion=self.schema.revenue_per_conversion,
        )
        logger.info(
            "Ingested %s rows from %s (load date %s)",
            len(enriched),
            source_file_name,
            load_date.isoformat(),
        )

        return IngestionResult(
            records=enriched,
            stats=stats,
            source_file_name=source_file_name,
            load_date=load_date,
        )
