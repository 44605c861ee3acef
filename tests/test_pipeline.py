import asyncio
from datetime import date, datetime, timezone

import httpx
import pytest

from app.config import Settings
from app.connectors.cleanads.client import CleanAdsAPIError, CleanAdsClient
from app.sync.pipeline import build_report, run_sync

NOW = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


def test_build_report_without_window(january_rows):
    report = build_report(january_rows, "123", 7, now=NOW)
    meta = report.metadata
    assert report.success is True
    assert meta.advertiser_id == "123"
    assert meta.range_days == 7
    assert meta.total_records == 10
    assert meta.filtered_records == 10
    assert meta.fetched_at == "2024-01-20T12:00:00.000Z"
    assert meta.upstream_covers_window is True
    assert meta.date_range.start is None
    assert meta.date_range.end == "2024-01-20"
    assert meta.date_range.requested_days == 7

    dates = [r.normalized_date for r in report.records]
    assert dates == sorted(dates)
    assert dates[0] == "2024-01-01"


def test_build_report_with_window(january_rows):
    report = build_report(
        january_rows, "123", 18, date(2024, 1, 3), date(2024, 1, 5), now=NOW
    )
    assert report.metadata.total_records == 10
    assert report.metadata.filtered_records == 3
    assert [r.normalized_date for r in report.records] == [
        "2024-01-03",
        "2024-01-04",
        "2024-01-05",
    ]
    assert report.metadata.date_range.start == "2024-01-03"
    assert report.metadata.date_range.end == "2024-01-05"


def test_build_report_flags_uncovered_window(january_rows):
    report = build_report(
        january_rows, "123", 3, date(2024, 1, 3), date(2024, 1, 5), now=NOW
    )
    assert report.metadata.upstream_covers_window is False


def test_build_report_drops_non_object_rows(row_factory):
    payload = [row_factory("01/02/2024"), "junk", 7, None]
    report = build_report(payload, "1", 7, now=NOW)
    assert report.metadata.total_records == 4
    assert report.metadata.filtered_records == 1


def test_build_report_rejects_non_array_payload():
    with pytest.raises(CleanAdsAPIError):
        build_report({"error": "bad advertiser"}, "1", 7, now=NOW)


def test_run_sync_requests_resolved_range(upstream, january_rows):
    upstream.json_body = january_rows
    settings = Settings(_env_file=None, cleanads_base_url="https://cleanads.test")
    client = CleanAdsClient(settings, transport=httpx.MockTransport(upstream.handler))

    async def _run():
        try:
            return await run_sync(
                client, "42", 7, date(2024, 1, 1), date(2024, 1, 10), now=NOW
            )
        finally:
            await client.close()

    report = asyncio.run(_run())
    assert report.metadata.range_days == 10
    assert report.metadata.filtered_records == 10

    sent = upstream.requests[0]
    assert sent.url.path == "/crm/customreports/api/AdvertiserAdSetSummaryRange/"
    assert sent.url.params["AdvertiserID"] == "42"
    assert sent.url.params["rptFormat"] == "json"
    assert sent.url.params["rangedays"] == "10"
    assert sent.headers["Cache-Control"] == "no-cache"
    assert "Mozilla" in sent.headers["User-Agent"]


def test_one_hostile_row_does_not_abort_the_batch(row_factory):
    payload = [
        row_factory("01/02/2024", statClicks="1" * 5000),
        row_factory("1" * 5000 + "/1/2024"),
        row_factory("01/03/2024", campaign=0),
    ]
    report = build_report(payload, "1", 7, now=NOW)
    assert report.metadata.filtered_records == 3
    first, second, undated = report.records
    assert first.clicks == 0
    assert second.campaign_name == "Unknown"
    assert undated.normalized_date is None
