"""CleanAds Proxy — Report Output Models.

Python attributes are snake_case; the JSON aliases keep the field names
already detected by downstream sync connectors.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class NormalizedRecord(BaseModel):
    """One report row with consistent types, a dedup key and a cursor."""

    # Required fields, never null
    short_date: str = Field(alias="ShortDate")
    campaign_name: str = Field(alias="CampaignName")
    adset_name: str = Field(alias="AdsetName")

    # Original stat fields
    stat_impressions: int = Field(alias="statImpressions")
    stat_clicks: int = Field(alias="statClicks")
    stat_cost: float = Field(alias="statCost")
    stat_conversions: int = Field(alias="statConversions")

    # Normalized fields
    normalized_date: Optional[str] = Field(description="YYYY-MM-DD or null")
    impressions: int
    clicks: int
    cost: float
    conversions: int

    record_id: str = Field(description="Stable dedup key")
    cursor_timestamp: str = Field(description="{date}T23:59:59Z")

    model_config = {"frozen": True, "populate_by_name": True}


class DateRange(BaseModel):
    """Window the caller asked for."""

    start: Optional[str] = None
    end: str
    requested_days: int


class ReportMetadata(BaseModel):
    """Summary of a single proxy run."""

    advertiser_id: Optional[str] = None
    range_days: int
    fetched_at: str
    total_records: int
    filtered_records: int
    upstream_covers_window: bool = True
    date_range: DateRange


class ReportResponse(BaseModel):
    """Successful proxy response."""

    success: bool = True
    metadata: ReportMetadata
    records: List[NormalizedRecord] = []


class ErrorResponse(BaseModel):
    """Failure body returned by the proxy."""

    error: str
    details: Optional[str] = None
    stack: Optional[str] = None


class HealthTestParams(BaseModel):
    advertiser_id: str = "not provided"
    range_days: str = "not provided"


class HealthResponse(BaseModel):
    """Health probe body, also reports whether the caller's key matches."""

    status: str = "ok"
    timestamp: str
    env_key_set: bool
    auth_valid: bool
    api_key_provided: bool
    test_params: HealthTestParams = HealthTestParams()
