from .enricher import enrich, enrich_all
from .loader import DataIngestionPipeline, IngestionResult
from .parser import ParseStats, parse
from .schema import AdSpendSchema, load_schema

__all__ = [
    "AdSpendSchema",
    "DataIngestionPipeline",
    "IngestionResult",
    "ParseStats",
    "enrich",
    "enrich_all",
    "load_schema",
    "parse",
]
