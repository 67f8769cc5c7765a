"""Pydantic models for ad spend rows."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

# Assumed revenue attributed to each conversion
REVENUE_PER_CONVERSION = 50


class AdSpendRecord(BaseModel):
    """Single ad spend row after parsing and numeric coercion.

    The date is kept in its source string form. Numeric fields are never
    text: anything unparseable has already been coerced to 0.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    # Dimensions
    date: str
    platform: str = ""
    account: str = ""
    campaign: str = ""
    country: str = ""
    device: str = ""

    # Raw performance numbers
    spend: float = Field(default=0.0, ge=0)
    clicks: int = Field(default=0, ge=0)
    impressions: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)


class EnrichedRecord(AdSpendRecord):
    """Ad spend row with derived per-row metrics and load metadata.

    Ratio metrics are percentages or currency rounded to 2 decimals.
    """

    ctr: float  # clicks / impressions * 100
    conversion_rate: float  # conversions / clicks * 100
    cpc: float  # spend / clicks
    cost_per_conversion: float  # spend / conversions
    impression_share: int  # 1 if any impressions, else 0
    revenue_estimate: float  # conversions * revenue_per_conversion
    profit_estimate: float  # revenue_estimate - spend

    # Ingestion metadata
    load_date: date
    source_file_name: str
