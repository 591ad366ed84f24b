import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import Settings

logger = logging.getLogger(__name__)


class OuraAPIError(Exception):
    """Network failure, timeout, non-2xx status or unreadable body from Oura."""


class MissingCredentialsError(RuntimeError):
    pass


class OuraClient:
    """
    Thin wrapper over the Oura v2 usercollection endpoints.

    Every collection endpoint answers {"data": [...]} and takes
    start_date / end_date (inclusive, YYYY-MM-DD).
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.ouraring.com",
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "OuraClient":
        if not settings.OURA_TOKEN:
            raise MissingCredentialsError("OURA_TOKEN is not set")
        return cls(
            settings.OURA_TOKEN,
            base_url=settings.OURA_API_BASE,
            timeout=settings.OURA_TIMEOUT_SECONDS,
            **kwargs,
        )

    def fetch(self, endpoint: str, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        path = f"/v2/usercollection/{endpoint}"
        try:
            resp = self._client.get(
                path,
                params={"start_date": start_date, "end_date": end_date},
            )
        except httpx.HTTPError as e:
            raise OuraAPIError(f"Oura API request to {endpoint} failed: {e}") from e

        if not resp.is_success:
            raise OuraAPIError(
                f"Oura API error: {resp.status_code} {resp.reason_phrase} ({endpoint})"
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise OuraAPIError(f"Oura API returned invalid JSON for {endpoint}") from e

        records = body.get("data") if isinstance(body, dict) else None
        if records is None:
            return []
        if not isinstance(records, list):
            raise OuraAPIError(f"Oura API returned unexpected payload for {endpoint}")

        logger.debug("Fetched %d %s records (%s..%s)", len(records), endpoint, start_date, end_date)
        return records

    def daily_readiness(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        return self.fetch("daily_readiness", start_date, end_date)

    def daily_sleep(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        return self.fetch("daily_sleep", start_date, end_date)

    def daily_activity(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        return self.fetch("daily_activity", start_date, end_date)

    def workouts(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        return self.fetch("workout", start_date, end_date)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "OuraClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
