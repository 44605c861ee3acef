"""CleanAds Proxy — Raw → Normalized Transformer.

Converts loosely typed CleanAds report rows into NormalizedRecord values.
Every per-field parse failure collapses to a default; nothing here raises.
"""

import math
import re
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from app.core.date_window import split_short_date
from app.models.report_models import NormalizedRecord

UNKNOWN = "Unknown"
END_OF_DAY = "T23:59:59Z"

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def _safe_int(value: Any) -> int:
    """Leading integer of value, or 0 ("12.9" -> 12)."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if match:
            try:
                return int(match.group(1))
            except ValueError:
                # more digits than int() will convert
                return 0
    return 0


def _safe_float(value: Any) -> float:
    """Leading decimal literal of value, or 0.0."""
    if isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, (int, float)):
            parsed = float(value)
        elif isinstance(value, str):
            match = _FLOAT_PREFIX.match(value)
            if not match:
                return 0.0
            parsed = float(match.group(1))
        else:
            return 0.0
    except OverflowError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def _text(value: Any, default: str) -> str:
    """Falsy values (None, "", 0, False, empty containers) count as absent."""
    if not value:
        return default
    return value if isinstance(value, str) else str(value)


def normalize_date(value: Optional[str]) -> Optional[str]:
    """Convert MM/DD/YYYY to YYYY-MM-DD.

    Month and day are range-checked ([1, 12] and [1, 31]) but not checked
    against month length, so "2/30/2024" yields "2024-02-30".
    """
    parts = split_short_date(value)
    if parts is None:
        return None
    month, day, year = parts
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return f"{year}-{month:02d}-{day:02d}"


def make_record_id(date_key: str, campaign_name: str, adset_name: str) -> str:
    return _UNSAFE_ID_CHARS.sub("_", f"{date_key}_{campaign_name}_{adset_name}")


def transform_record(raw: Mapping[str, Any]) -> NormalizedRecord:
    """Map one raw CleanAds row to a fully populated NormalizedRecord."""
    short_date = _text(raw.get("ShortDate"), "")
    campaign_name = _text(raw.get("CampaignName"), UNKNOWN)
    adset_name = _text(raw.get("AdsetName"), UNKNOWN)

    impressions = _safe_int(raw.get("statImpressions"))
    clicks = _safe_int(raw.get("statClicks"))
    cost = _safe_float(raw.get("statCost"))
    conversions = _safe_int(raw.get("statConversions"))

    normalized_date = normalize_date(short_date)
    date_key = normalized_date or short_date

    return NormalizedRecord(
        short_date=short_date,
        campaign_name=campaign_name,
        adset_name=adset_name,
        stat_impressions=impressions,
        stat_clicks=clicks,
        stat_cost=cost,
        stat_conversions=conversions,
        normalized_date=normalized_date,
        impressions=impressions,
        clicks=clicks,
        cost=cost,
        conversions=conversions,
        record_id=make_record_id(date_key, campaign_name, adset_name),
        cursor_timestamp=f"{date_key}{END_OF_DAY}",
    )


def transform_records(raw_data: Iterable[Mapping[str, Any]]) -> List[NormalizedRecord]:
    return [transform_record(row) for row in raw_data]


def _calendar_date(iso_date: Optional[str]) -> Optional[date]:
    if not iso_date:
        return None
    try:
        return date.fromisoformat(iso_date)
    except ValueError:
        return None


def sort_records(records: Iterable[NormalizedRecord]) -> List[NormalizedRecord]:
    """Sort ascending by normalized_date.

    Records without a real calendar date go last, keeping their input order.
    """

    def _key(record: NormalizedRecord):
        parsed = _calendar_date(record.normalized_date)
        return (0, parsed) if parsed is not None else (1, date.min)

    return sorted(records, key=_key)
