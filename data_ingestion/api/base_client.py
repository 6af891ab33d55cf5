from __future__ import annotations

import abc
import asyncio
import logging
from typing import Any, Dict, Tuple

import aiohttp

from core.exceptions import NetworkError, UpstreamError

LOGGER = logging.getLogger("lunar_snapshot.api")


class BaseAPIClient(abc.ABC):
    """Abstract base class for snapshot API clients.

    Subclasses implement request construction, sending, and response parsing.
    A single shared aiohttp.ClientSession must be supplied by the caller.
    Failures are never retried here: transport failures surface as
    :class:`NetworkError`, non-success statuses as :class:`UpstreamError`.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        timeout_seconds: float = 60,
    ) -> None:
        self.session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch_data(self, **kwargs: Any) -> Any:
        """Orchestrate request/send/parse for a single call."""
        url, headers = await self._build_request(**kwargs)
        try:
            status, body = await self._send_request(url, headers)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            LOGGER.warning("No response from %s: %r", url, exc)
            raise NetworkError(
                f"No response from {url}: {exc!r}", url=url
            ) from exc

        if not 200 <= status < 300:
            LOGGER.warning("%s responded with HTTP %s", url, status)
            raise UpstreamError(status, body, url=url)

        return self._parse_response(status, body, url)

    async def _send_request(
        self, url: str, headers: Dict[str, str]
    ) -> Tuple[int, str]:
        """Perform the GET with the shared session; return (status, body)."""
        async with self.session.get(
            url, headers=headers, timeout=self.timeout
        ) as resp:
            return resp.status, await resp.text()

    @abc.abstractmethod
    async def _build_request(self, **kwargs: Any) -> Tuple[str, Dict[str, str]]:
        """Return (url, headers) for the API call."""

    @abc.abstractmethod
    def _parse_response(self, status: int, body: str, url: str) -> Any:
        """Parse the raw response body into the client's result type."""
