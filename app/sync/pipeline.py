"""CleanAds Proxy — Sync Pipeline.

Runs the full data flow for one request:
  resolve range → fetch → filter to window → transform → sort → metadata

Everything after the fetch is pure, so build_report can be exercised
directly with a captured payload.
"""

from datetime import date, datetime
from typing import Any, List, Mapping, Optional

from app.connectors.cleanads.client import CleanAdsAPIError, CleanAdsClient
from app.connectors.cleanads.transformer import sort_records, transform_records
from app.core.date_window import (
    filter_by_window,
    iso_utc,
    resolve_range_days,
    utc_now,
    window_covered,
)
from app.models.report_models import DateRange, ReportMetadata, ReportResponse
from app.core.logging import get_logger

logger = get_logger("sync.pipeline")


def build_report(
    raw_payload: Any,
    advertiser_id: Optional[str],
    range_days: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> ReportResponse:
    """Turn a decoded CleanAds payload into the proxy response."""
    now = utc_now(now)

    if not isinstance(raw_payload, list):
        raise CleanAdsAPIError(
            f"Expected a JSON array of records, got {type(raw_payload).__name__}"
        )

    rows: List[Mapping[str, Any]] = [r for r in raw_payload if isinstance(r, Mapping)]
    if len(rows) != len(raw_payload):
        logger.warning(f"Dropped {len(raw_payload) - len(rows)} non-object records")

    filtered = filter_by_window(rows, start_date, end_date, now)
    if start_date is not None:
        logger.info(
            f"Filtered {len(raw_payload)} records to {len(filtered)} based on date range",
            extra={"advertiser_id": advertiser_id, "record_count": len(filtered)},
        )

    covered = window_covered(range_days, start_date, now)
    if not covered:
        logger.warning(
            f"Upstream window of {range_days} days does not reach start_date "
            f"{start_date.isoformat()}; older records may be missing",
            extra={"advertiser_id": advertiser_id},
        )

    records = sort_records(transform_records(filtered))

    metadata = ReportMetadata(
        advertiser_id=advertiser_id,
        range_days=range_days,
        fetched_at=iso_utc(now),
        total_records=len(raw_payload),
        filtered_records=len(records),
        upstream_covers_window=covered,
        date_range=DateRange(
            start=start_date.isoformat() if start_date else None,
            end=end_date.isoformat() if end_date else now.date().isoformat(),
            requested_days=range_days,
        ),
    )
    return ReportResponse(success=True, metadata=metadata, records=records)


async def run_sync(
    client: CleanAdsClient,
    advertiser_id: Optional[str],
    range_days: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> ReportResponse:
    """Fetch the report for the resolved window and normalize it."""
    now = utc_now(now)
    range_days = resolve_range_days(range_days, start_date, end_date, now)
    if start_date is not None:
        logger.info(
            f"Calculated range days: {range_days} from {start_date.isoformat()} "
            f"to {(end_date.isoformat() if end_date else iso_utc(now))}"
        )

    raw_payload = await client.fetch_report(advertiser_id, range_days)
    return build_report(raw_payload, advertiser_id, range_days, start_date, end_date, now)
