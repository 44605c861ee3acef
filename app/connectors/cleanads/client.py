"""CleanAds Proxy — CleanAds API Client.

Fetches the advertiser ad-set summary report. Failures are surfaced to
the caller as CleanAdsAPIError; there is no retry.
"""

import time
from typing import Any, Dict, Optional

import httpx

from app.config import Settings, settings as default_settings
from app.core.logging import get_logger

logger = get_logger("client")

REPORT_PATH = "/crm/customreports/api/AdvertiserAdSetSummaryRange/"

# CleanAds rejects requests that don't look like they come from a browser
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class CleanAdsAPIError(Exception):
    """Raised when CleanAds returns an error or an unusable body."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class CleanAdsClient:
    """Async HTTP client for the CleanAds custom reports API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self.base_url = self.settings.cleanads_base_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                headers=DEFAULT_HEADERS,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def report_url(self) -> str:
        return f"{self.base_url}{REPORT_PATH}"

    async def fetch_report(
        self, advertiser_id: Optional[str], range_days: int
    ) -> Any:
        """Fetch the raw report and return the decoded JSON body."""
        url = self.report_url()
        params: Dict[str, Any] = {
            "AdvertiserID": advertiser_id or "",
            "rptFormat": "json",
            "rangedays": range_days,
        }
        client = await self._get_client()

        logger.info(
            f"Fetching from: {url} (rangedays={range_days})",
            extra={"endpoint": url, "advertiser_id": advertiser_id},
        )
        started = time.perf_counter()
        try:
            resp = await client.get(url, params=params)
        except httpx.RequestError as e:
            raise CleanAdsAPIError(f"Connection to CleanAds failed: {e}") from e

        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        logger.info(
            f"Response status: {resp.status_code}",
            extra={"status_code": resp.status_code, "duration_ms": duration_ms},
        )

        if not resp.is_success:
            logger.error(f"API Error Response: {resp.text}")
            raise CleanAdsAPIError(
                f"CleanAds API returned {resp.status_code}: {resp.text}",
                resp.status_code,
            )

        logger.info(f"Raw response length: {len(resp.text)}")
        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"JSON Parse Error: {e}")
            raise CleanAdsAPIError(
                "Failed to parse response as JSON", resp.status_code
            ) from e
