from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from utils.time_utils import utc_now


@dataclass(frozen=True)
class Credential:
    """A bearer token and the instant after which it must not be used."""

    value: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return self.expires_at > now


class CredentialCache:
    """Holds at most one credential and hands it out until it expires.

    Instances are owned by a :class:`TokenProvider`; there is no
    module-level cache.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._credential: Optional[Credential] = None

    def get(self) -> Optional[Credential]:
        """Return the cached credential, or None if unset or expired."""
        credential = self._credential
        if credential is None or not credential.is_valid(self._clock()):
            return None
        return credential

    def set(self, value: str, ttl_hours: float) -> Credential:
        credential = Credential(
            value=value, expires_at=self._clock() + timedelta(hours=ttl_hours)
        )
        self.put(credential)
        return credential

    def put(self, credential: Credential) -> None:
        # Replaced wholesale, never mutated
        self._credential = credential

    def clear(self) -> None:
        self._credential = None
