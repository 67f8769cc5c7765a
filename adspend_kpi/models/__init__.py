from .ad_spend import REVENUE_PER_CONVERSION, AdSpendRecord, EnrichedRecord
from .frames import ENRICHED_FRAME_SCHEMA, frame_to_records, records_to_frame

__all__ = [
    "ENRICHED_FRAME_SCHEMA",
    "REVENUE_PER_CONVERSION",
    "AdSpendRecord",
    "EnrichedRecord",
    "frame_to_records",
    "records_to_frame",
]
