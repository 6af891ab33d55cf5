from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, List, Optional

import aiohttp
import typer

from core.config_loader import load_settings
from core.exceptions import SnapshotIngestError
from core.pipeline import build_pipeline
from database.document_store import TokenSnapshotStore
from utils.logger import setup_logger
from utils.time_utils import parse_to_utc

app = typer.Typer(help="LunarCrush daily snapshot ingestion.")


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


async def _run_async(show: List[str]) -> None:
    settings = load_settings()
    log = setup_logger(settings)

    async with aiohttp.ClientSession() as session:
        pipeline = build_pipeline(settings, session)
        try:
            summary = await pipeline.run_once()
            _echo_json(summary.to_dict())
            for symbol in show:
                _echo_json(await pipeline.store.latest_for(symbol))
        finally:
            await pipeline.store.close()
            log.debug("Store connection closed")


async def _show_async(symbol: str, day: Optional[str]) -> None:
    settings = load_settings()
    setup_logger(settings)

    async with TokenSnapshotStore.from_settings(settings) as store:
        if day is None:
            document = await store.latest_for(symbol)
        else:
            document = await store.for_day(symbol, day)
    _echo_json(document)


def _exit_with(exc: SnapshotIngestError) -> None:
    logging.getLogger("lunar_snapshot.cli").error("Run failed: %s", exc.to_dict())
    typer.echo(json.dumps(exc.to_dict(), default=str), err=True)
    raise typer.Exit(code=1)


@app.command("run")
def run(
    show: List[str] = typer.Option(
        [], "--show", help="Print the latest stored snapshot for SYMBOL afterwards."
    ),
) -> None:
    """Fetch one snapshot and upsert it into the document store."""
    try:
        asyncio.run(_run_async(show))
    except SnapshotIngestError as exc:
        _exit_with(exc)


@app.command("show")
def show(
    symbol: str,
    day: Optional[str] = typer.Option(
        None, "--day", help="UTC day (YYYY-MM-DD); defaults to the latest snapshot."
    ),
) -> None:
    """Print a stored snapshot for SYMBOL."""
    if day is not None:
        try:
            parse_to_utc(day)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--day") from exc
    try:
        asyncio.run(_show_async(symbol, day))
    except SnapshotIngestError as exc:
        _exit_with(exc)


if __name__ == "__main__":
    app()
