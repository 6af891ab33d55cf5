from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING, UpdateOne
from pymongo.errors import BulkWriteError, PyMongoError

from config import MONGO_COLLECTION_NAME, MONGO_DATABASE, MONGO_URL
from core.exceptions import StoreError
from data_ingestion.models import CanonicalRecord
from utils.time_utils import day_bounds_utc, utc_now

LOGGER = logging.getLogger("lunar_snapshot.document_store")

KEY_INDEX = [("symbol", ASCENDING), ("fetchedAt", ASCENDING)]


class TokenSnapshotStore:
    """MongoDB persistence for daily token snapshots.

    Designed for dependency injection: callers may provide a client factory
    (defaults to Motor's ``AsyncIOMotorClient``). The client is created on
    first use and reused for every call until :meth:`close`. Closing is the
    owner's responsibility; the store also works as an async context
    manager.
    """

    def __init__(
        self,
        mongo_url: str = MONGO_URL,
        collection_name: str = MONGO_COLLECTION_NAME,
        *,
        database_name: str = MONGO_DATABASE,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ) -> None:
        self.mongo_url = mongo_url
        self.collection_name = collection_name
        self.database_name = database_name
        self._client_factory = client_factory
        self._client: Optional[Any] = None

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> "TokenSnapshotStore":
        kwargs: Dict[str, Any] = dict(
            mongo_url=settings.mongo_url,
            collection_name=settings.collection_name,
            database_name=settings.mongo_database,
        )
        kwargs.update(overrides)
        return cls(**kwargs)

    async def __aenter__(self) -> "TokenSnapshotStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _database(self) -> Any:
        if self._client is None:
            self._client = self._client_factory(self.mongo_url, tz_aware=True)
        # A database named in the URL wins over the configured default
        return self._client.get_default_database(default=self.database_name)

    def _collection(self) -> Any:
        return self._database()[self.collection_name]

    async def ensure_ready(self) -> None:
        """Create the collection and its unique (symbol, fetchedAt) index if absent."""
        try:
            db = self._database()
            existing = await db.list_collection_names()
            if self.collection_name in existing:
                return
            await db.create_collection(self.collection_name)
            LOGGER.info("Created collection: %s", self.collection_name)
            await db[self.collection_name].create_index(KEY_INDEX, unique=True)
            LOGGER.info("Created unique index for: %s", self.collection_name)
        except PyMongoError as exc:
            raise StoreError(
                f"Failed to prepare collection '{self.collection_name}': {exc}"
            ) from exc

    async def upsert_batch(self, records: Iterable[CanonicalRecord]) -> int:
        """Upsert one document per record, incrementing ``updateCount``.

        Returns the number of operations submitted. An empty batch issues no
        store round-trip.
        """
        operations: List[UpdateOne] = [
            UpdateOne(
                record.key(),
                {"$set": record.to_document(), "$inc": {"updateCount": 1}},
                upsert=True,
            )
            for record in records
        ]
        if not operations:
            return 0

        try:
            result = await self._collection().bulk_write(operations)
        except BulkWriteError as exc:
            details = exc.details or {}
            LOGGER.error(
                "Bulk write partially failed: %d write error(s)",
                len(details.get("writeErrors", [])),
            )
            raise StoreError(
                f"Bulk upsert into '{self.collection_name}' partially failed",
                details=details,
            ) from exc
        except PyMongoError as exc:
            raise StoreError(
                f"Bulk upsert into '{self.collection_name}' failed: {exc}"
            ) from exc

        LOGGER.info(
            "Processed %d new tokens, modified %d existing tokens",
            result.upserted_count,
            result.modified_count,
        )
        return len(operations)

    async def latest_for(self, symbol: str) -> Optional[Dict[str, Any]]:
        """Return the most recent snapshot for ``symbol``, if any."""
        try:
            return await self._collection().find_one(
                {"symbol": symbol}, sort=[("fetchedAt", DESCENDING)]
            )
        except PyMongoError as exc:
            raise StoreError(f"Failed to read latest '{symbol}': {exc}") from exc

    async def for_day(
        self, symbol: str, day: Any = None
    ) -> Optional[Dict[str, Any]]:
        """Return the snapshot for ``symbol`` whose ``fetchedAt`` falls on ``day`` (UTC).

        ``day`` defaults to the current UTC day.
        """
        start, end = day_bounds_utc(utc_now() if day is None else day)
        try:
            return await self._collection().find_one(
                {"symbol": symbol, "fetchedAt": {"$gte": start, "$lt": end}}
            )
        except PyMongoError as exc:
            raise StoreError(
                f"Failed to read '{symbol}' for {start.date().isoformat()}: {exc}"
            ) from exc

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
