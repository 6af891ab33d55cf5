from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List


class PayloadShape(str, Enum):
    """Field-naming convention of the upstream token payload.

    A deployment is configured for exactly one shape; it is never inferred
    from the records themselves.
    """

    VERBOSE = "verbose"
    COMPACT = "compact"


@dataclass
class RawTokenEnvelope:
    """Payload as fetched, with every token stamped with fetch metadata."""

    category: str
    data: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class CanonicalRecord:
    """One token's metrics for one UTC calendar day.

    ``metrics`` only holds fields that were present upstream; absent fields
    are omitted so an upsert never blanks previously stored values.
    """

    symbol: str
    fetched_at: datetime
    update_timestamp: datetime
    metrics: Dict[str, Any] = field(default_factory=dict)

    def key(self) -> Dict[str, Any]:
        """Natural key used as the upsert filter."""
        return {"symbol": self.symbol, "fetchedAt": self.fetched_at}

    def to_document(self) -> Dict[str, Any]:
        """Flatten into the persisted document layout."""
        doc: Dict[str, Any] = dict(self.metrics)
        doc["symbol"] = self.symbol
        doc["fetchedAt"] = self.fetched_at
        doc["updateTimestamp"] = self.update_timestamp
        return doc
