"""CleanAds Proxy — Shared Route Dependencies."""

import secrets
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, HTTPException

from app.config import Settings, get_settings
from app.connectors.cleanads.client import CleanAdsClient


def api_key_matches(settings: Settings, provided: Optional[str]) -> bool:
    """True when no proxy key is configured or the provided key equals it."""
    if not settings.proxy_api_key:
        return True
    if provided is None:
        return False
    return secrets.compare_digest(
        provided.encode("utf-8"), settings.proxy_api_key.encode("utf-8")
    )


async def require_api_key(
    x_api_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request unless X-API-Key matches the configured secret."""
    if not api_key_matches(settings, x_api_key):
        raise HTTPException(status_code=401, detail="Unauthorized")


async def get_cleanads_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[CleanAdsClient]:
    """Dependency — yields a CleanAds client and closes it afterwards."""
    client = CleanAdsClient(settings)
    try:
        yield client
    finally:
        await client.close()
