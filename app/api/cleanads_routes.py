"""CleanAds Proxy — Report Proxy Routes."""

import traceback
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from app.api.dependencies import get_cleanads_client, require_api_key
from app.api.errors import error_response
from app.config import Settings, get_settings
from app.connectors.cleanads.client import CleanAdsAPIError, CleanAdsClient
from app.models.report_models import ErrorResponse, ReportResponse
from app.sync.pipeline import run_sync
from app.core.logging import get_logger

logger = get_logger("api.cleanads")

router = APIRouter(prefix="/api", tags=["CleanAds"])


def _failure(exc: Exception, settings: Settings):
    """500 body; the traceback is only exposed in development."""
    return error_response(
        500,
        "Failed to fetch data",
        str(exc),
        stack=traceback.format_exc() if settings.is_development else None,
    )


@router.api_route(
    "/cleanads",
    methods=["GET", "POST"],
    response_model=ReportResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    dependencies=[Depends(require_api_key)],
)
async def proxy_cleanads(
    response: Response,
    advertiser_id: Optional[str] = Query(None, description="CleanAds AdvertiserID"),
    range_days: Optional[int] = Query(
        None, ge=1, description="Days to request when no start_date is given"
    ),
    start_date: Optional[date] = Query(
        None, description="Incremental sync window start (YYYY-MM-DD)"
    ),
    end_date: Optional[date] = Query(
        None, description="Incremental sync window end (YYYY-MM-DD), defaults to today"
    ),
    settings: Settings = Depends(get_settings),
    client: CleanAdsClient = Depends(get_cleanads_client),
):
    """Fetch the advertiser's ad-set summary and return normalized records.

    With start_date the upstream day count is derived from the window and the
    records are filtered to it, sorted by date for cursor-based consumers.
    """
    if range_days is None:
        range_days = settings.default_range_days

    try:
        report = await run_sync(
            client,
            advertiser_id=advertiser_id,
            range_days=range_days,
            start_date=start_date,
            end_date=end_date,
        )
    except CleanAdsAPIError as e:
        logger.error(f"Proxy error: {e}", extra={"advertiser_id": advertiser_id})
        return _failure(e, settings)
    except Exception as e:
        logger.exception(f"Proxy error: {e}", extra={"advertiser_id": advertiser_id})
        return _failure(e, settings)

    response.headers["Cache-Control"] = "no-cache"
    return report
