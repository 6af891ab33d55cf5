"""Projection of raw LunarCrush token payloads into canonical records.

Each :class:`PayloadShape` owns one projection table mapping canonical field
name to upstream key. Values are copied through untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from data_ingestion.models import CanonicalRecord, PayloadShape, RawTokenEnvelope
from utils.time_utils import start_of_day_utc, utc_now

LOGGER = logging.getLogger("lunar_snapshot.normalizer")

# Canonical field -> upstream key, verbose feed
VERBOSE_FIELDS: Dict[str, str] = {
    name: name
    for name in (
        "id",
        "name",
        "price",
        "price_btc",
        "volume_24h",
        "volatility",
        "circulating_supply",
        "max_supply",
        "percent_change_1h",
        "percent_change_24h",
        "percent_change_7d",
        "percent_change_30d",
        "market_cap",
        "market_cap_rank",
        "interactions_24h",
        "interactions_24h_prev",
        "social_dominance",
        "market_dominance",
        "market_dominance_prev",
        "galaxy_score",
        "galaxy_score_previous",
        "alt_rank",
        "alt_rank_previous",
        "sentiment",
        "social_volume",
        "social_volume_24h_rank",
        "volume_24h_rank",
        "categories",
        "contributors_active_prev",
    )
}

# Canonical field -> upstream key, compact feed
COMPACT_FIELDS: Dict[str, str] = {
    "id": "id",
    "name": "n",
    "price": "p",
    "price_btc": "p_btc",
    "volume_24h": "v",
    "volatility": "vt",
    "circulating_supply": "cs",
    "max_supply": "ms",
    "percent_change_1h": "pch",
    "percent_change_24h": "pc",
    "percent_change_7d": "pc7d",
    "percent_change_30d": "pc30d",
    "market_cap": "mc",
    "market_cap_rank": "mcr",
    "social_dominance": "sd",
    "market_dominance": "d",
    "galaxy_score": "gs",
    "galaxy_score_previous": "gs_p",
    "alt_rank": "acr",
    "alt_rank_previous": "acr_p",
    "categories": "categories",
}

# Abbreviated metrics with no verbose counterpart; stored under their own key
PASSTHROUGH_FIELDS = (
    "tp",
    "tc",
    "tr",
    "tr_p_1h",
    "tr_p_24h",
    "e1h",
    "e24h",
    "ags",
    "cc",
    "ca",
    "psc",
    "psa",
)

IDENTIFYING_FIELD: Dict[PayloadShape, str] = {
    PayloadShape.VERBOSE: "symbol",
    PayloadShape.COMPACT: "s",
}

_PROJECTIONS: Dict[PayloadShape, Dict[str, str]] = {
    PayloadShape.VERBOSE: VERBOSE_FIELDS,
    PayloadShape.COMPACT: COMPACT_FIELDS,
}


def project_token(
    token: Mapping[str, Any],
    shape: PayloadShape,
    now: Optional[datetime] = None,
) -> Optional[CanonicalRecord]:
    """Project a single raw token, or return None if it has no symbol.

    Tokens stamped by the fetcher keep their ``fetchedAt`` and
    ``updateTimestamp``; unstamped tokens are stamped from ``now``.
    """
    symbol = token.get(IDENTIFYING_FIELD[shape])
    if not symbol:
        return None

    metrics: Dict[str, Any] = {}
    for canonical, upstream in _PROJECTIONS[shape].items():
        if upstream in token:
            metrics[canonical] = token[upstream]
    for key in PASSTHROUGH_FIELDS:
        if key in token:
            metrics[key] = token[key]

    if now is None:
        now = utc_now()
    fetched_at = token.get("fetchedAt")
    update_timestamp = token.get("updateTimestamp")

    return CanonicalRecord(
        symbol=str(symbol),
        fetched_at=fetched_at if fetched_at is not None else start_of_day_utc(now),
        update_timestamp=update_timestamp if update_timestamp is not None else now,
        metrics=metrics,
    )


def normalize(
    envelope: RawTokenEnvelope,
    shape: PayloadShape,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> List[CanonicalRecord]:
    """Normalize every token in ``envelope`` using the configured ``shape``.

    Tokens missing the shape's identifying field are dropped silently; the
    output preserves input order otherwise.
    """
    shape = PayloadShape(shape)
    now = clock()
    records: List[CanonicalRecord] = []
    for token in envelope.data:
        record = project_token(token, shape, now)
        if record is not None:
            records.append(record)

    dropped = len(envelope.data) - len(records)
    if dropped:
        LOGGER.debug(
            "Dropped %d token(s) without '%s' from category '%s'",
            dropped,
            IDENTIFYING_FIELD[shape],
            envelope.category,
        )
    return records
