"""CleanAds Proxy — Health Routes."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from app.api.dependencies import api_key_matches
from app.config import Settings, get_settings
from app.core.date_window import iso_utc
from app.models.report_models import HealthResponse, HealthTestParams

router = APIRouter(prefix="/api", tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health(
    advertiser_id: Optional[str] = Query(None),
    range_days: Optional[str] = Query(None),
    x_api_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
):
    """Report liveness and whether the caller's X-API-Key would be accepted.

    Never rejects, so connector setups can debug their credentials.
    """
    return HealthResponse(
        status="ok",
        timestamp=iso_utc(datetime.now(timezone.utc)),
        env_key_set=bool(settings.proxy_api_key),
        auth_valid=api_key_matches(settings, x_api_key),
        api_key_provided=bool(x_api_key),
        test_params=HealthTestParams(
            advertiser_id=advertiser_id or "not provided",
            range_days=range_days or "not provided",
        ),
    )
