from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Tuple

import aiohttp

from config import LUNARCRUSH_CATEGORY_URL, LUNARCRUSH_FINGERPRINT_HEADERS
from core.exceptions import UpstreamError
from data_ingestion.auth.token_provider import TokenProvider
from data_ingestion.models import RawTokenEnvelope
from utils.time_utils import start_of_day_utc, utc_now

from .base_client import BaseAPIClient

LOGGER = logging.getLogger("lunar_snapshot.lunarcrush_client")


class LunarCrushClient(BaseAPIClient):
    """Client for the LunarCrush cryptocurrency category snapshot.

    Every call obtains a token from the :class:`TokenProvider` first; if that
    fails, no HTTP request is made.
    """

    URL = LUNARCRUSH_CATEGORY_URL

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token_provider: TokenProvider,
        *,
        timeout_seconds: float = 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(session, timeout_seconds=timeout_seconds)
        self._token_provider = token_provider
        self._clock = clock

    async def fetch_all(self) -> RawTokenEnvelope:
        """Fetch the full cryptocurrency category snapshot."""
        LOGGER.info("Requesting LunarCrush category snapshot")
        envelope = await self.fetch_data()
        LOGGER.info(
            "Fetched %d token(s) for category '%s'",
            len(envelope.data),
            envelope.category,
        )
        return envelope

    async def _build_request(self, **kwargs: Any) -> Tuple[str, Dict[str, str]]:
        token = await self._token_provider.get_token()
        headers = {"authorization": f"Bearer {token}"}
        headers.update(LUNARCRUSH_FINGERPRINT_HEADERS)
        return self.URL, headers

    def _parse_response(self, status: int, body: str, url: str) -> RawTokenEnvelope:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise UpstreamError(
                status, body, url=url, message="Upstream body is not valid JSON"
            ) from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise UpstreamError(
                status,
                body,
                url=url,
                message="Upstream payload has no 'data' list",
            )

        now = self._clock()
        fetched_at = start_of_day_utc(now)
        data = [
            {**token, "fetchedAt": fetched_at, "updateTimestamp": now}
            for token in payload["data"]
            if isinstance(token, dict)
        ]
        return RawTokenEnvelope(category=payload.get("category", ""), data=data)
