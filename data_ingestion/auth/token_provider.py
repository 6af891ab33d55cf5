from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from data_ingestion.auth.credential_cache import Credential, CredentialCache

LOGGER = logging.getLogger("lunar_snapshot.token_provider")


class TokenAcquirer(Protocol):
    async def acquire(self) -> Credential: ...


class TokenProvider:
    """Hands out a bearer token, acquiring a new one only on cache miss.

    The check-then-acquire sequence runs under a lock so overlapping
    pipeline runs trigger at most one browser session.
    """

    def __init__(
        self,
        cache: CredentialCache,
        acquirer: TokenAcquirer,
        *,
        static_token: Optional[str] = None,
    ) -> None:
        self._cache = cache
        self._acquirer = acquirer
        self._static_token = static_token
        self._lock = asyncio.Lock()

    async def get_token(self) -> str:
        """Return a valid token, propagating any acquisition failure."""
        if self._static_token:
            return self._static_token

        async with self._lock:
            cached = self._cache.get()
            if cached is not None:
                LOGGER.debug("Using cached bearer token")
                return cached.value

            LOGGER.info("No valid cached token; acquiring a new one")
            credential = await self._acquirer.acquire()
            self._cache.put(credential)
            return credential.value
