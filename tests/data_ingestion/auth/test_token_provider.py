import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from core.exceptions import AcquisitionError
from data_ingestion.auth.credential_cache import Credential, CredentialCache
from data_ingestion.auth.token_provider import TokenProvider

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class StubAcquirer:
    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    async def acquire(self) -> Credential:
        self.calls += 1
        await asyncio.sleep(0)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def clock():
    state = {"now": NOW}

    def _now():
        return state["now"]

    _now.state = state
    return _now


@pytest.mark.asyncio
async def test_cached_token_skips_acquisition(clock):
    cache = CredentialCache(clock=clock)
    cache.set("cached", ttl_hours=12)
    acquirer = StubAcquirer()

    provider = TokenProvider(cache, acquirer)

    assert await provider.get_token() == "cached"
    assert acquirer.calls == 0


@pytest.mark.asyncio
async def test_cache_miss_acquires_and_stores(clock):
    cache = CredentialCache(clock=clock)
    acquirer = StubAcquirer(Credential("fresh", NOW + timedelta(hours=12)))
    provider = TokenProvider(cache, acquirer)

    assert await provider.get_token() == "fresh"
    assert await provider.get_token() == "fresh"
    assert acquirer.calls == 1
    assert cache.get().value == "fresh"


@pytest.mark.asyncio
async def test_expired_token_is_reacquired(clock):
    cache = CredentialCache(clock=clock)
    cache.set("stale", ttl_hours=1)
    clock.state["now"] = NOW + timedelta(hours=1)
    acquirer = StubAcquirer(Credential("renewed", NOW + timedelta(hours=13)))

    provider = TokenProvider(cache, acquirer)

    assert await provider.get_token() == "renewed"
    assert acquirer.calls == 1


@pytest.mark.asyncio
async def test_acquisition_failure_propagates_and_leaves_cache_empty(clock):
    cache = CredentialCache(clock=clock)
    error = AcquisitionError("no token", stage="await_response")
    provider = TokenProvider(cache, StubAcquirer(error))

    with pytest.raises(AcquisitionError) as excinfo:
        await provider.get_token()

    assert excinfo.value is error
    assert cache.get() is None


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_acquisition(clock):
    cache = CredentialCache(clock=clock)
    acquirer = StubAcquirer(Credential("shared", NOW + timedelta(hours=12)))
    provider = TokenProvider(cache, acquirer)

    tokens = await asyncio.gather(*(provider.get_token() for _ in range(5)))

    assert tokens == ["shared"] * 5
    assert acquirer.calls == 1


@pytest.mark.asyncio
async def test_supplied_token_never_launches_browser(clock):
    acquirer = StubAcquirer()
    provider = TokenProvider(
        CredentialCache(clock=clock), acquirer, static_token="configured"
    )

    assert await provider.get_token() == "configured"
    assert acquirer.calls == 0
