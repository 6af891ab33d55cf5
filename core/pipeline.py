from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict

import aiohttp

from core.config_loader import Settings
from data_ingestion.api.lunarcrush_client import LunarCrushClient
from data_ingestion.auth.credential_cache import CredentialCache
from data_ingestion.auth.token_acquirer import BrowserTokenAcquirer
from data_ingestion.auth.token_provider import TokenProvider
from data_ingestion.models import PayloadShape
from data_ingestion.normalizer import normalize
from database.document_store import TokenSnapshotStore

LOGGER = logging.getLogger("lunar_snapshot.pipeline")


@dataclass(frozen=True)
class PipelineRunSummary:
    category: str
    fetched: int
    normalized: int
    dropped: int
    attempted: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SnapshotPipeline:
    """Fetch → normalize → persist, once per call.

    Any component failure propagates unchanged; a failed fetch leaves the
    store untouched.
    """

    def __init__(
        self,
        client: LunarCrushClient,
        store: TokenSnapshotStore,
        shape: PayloadShape = PayloadShape.VERBOSE,
    ) -> None:
        self.client = client
        self.store = store
        self.shape = PayloadShape(shape)

    async def run_once(self) -> PipelineRunSummary:
        await self.store.ensure_ready()

        envelope = await self.client.fetch_all()
        records = normalize(envelope, self.shape)
        attempted = await self.store.upsert_batch(records)

        summary = PipelineRunSummary(
            category=envelope.category,
            fetched=len(envelope.data),
            normalized=len(records),
            dropped=len(envelope.data) - len(records),
            attempted=attempted,
        )
        LOGGER.info("Snapshot run complete: %s", summary.to_dict())
        return summary


def build_pipeline(
    settings: Settings, session: aiohttp.ClientSession
) -> SnapshotPipeline:
    """Wire a pipeline from settings around a caller-owned HTTP session."""
    token_provider = TokenProvider(
        CredentialCache(),
        BrowserTokenAcquirer.from_settings(settings),
        static_token=settings.lunarcrush_api_token,
    )
    client = LunarCrushClient(
        session, token_provider, timeout_seconds=settings.http_timeout_seconds
    )
    store = TokenSnapshotStore.from_settings(settings)
    return SnapshotPipeline(client, store, settings.payload_shape)
