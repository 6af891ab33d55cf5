from typing import Any, Dict, Tuple

import aiohttp
import pytest

from core.exceptions import NetworkError, UpstreamError
from data_ingestion.api.base_client import BaseAPIClient


class _TestClient(BaseAPIClient):
    async def _build_request(self, **kwargs: Any) -> Tuple[str, Dict[str, str]]:
        return "test://endpoint", {"x-test": "1"}

    def _parse_response(self, status: int, body: str, url: str) -> Any:
        return {"status": status, "body": body, "url": url}


@pytest.mark.asyncio
async def test_success_is_parsed(mocker):
    client = _TestClient(session=mocker.MagicMock())
    mocked_send = mocker.patch.object(
        client, "_send_request", return_value=(204, ""), autospec=True
    )

    result = await client.fetch_data()

    assert result == {"status": 204, "body": "", "url": "test://endpoint"}
    mocked_send.assert_awaited_once_with("test://endpoint", {"x-test": "1"})


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [301, 401, 429, 500])
async def test_non_success_status_raises_without_retry(mocker, status):
    client = _TestClient(session=mocker.MagicMock())
    mocked_send = mocker.patch.object(
        client, "_send_request", return_value=(status, "nope"), autospec=True
    )

    with pytest.raises(UpstreamError) as excinfo:
        await client.fetch_data()

    assert excinfo.value.status == status
    assert excinfo.value.body == "nope"
    assert mocked_send.call_count == 1


@pytest.mark.asyncio
async def test_transport_failure_raises_network_error_without_retry(mocker):
    client = _TestClient(session=mocker.MagicMock())
    mocked_send = mocker.patch.object(
        client,
        "_send_request",
        side_effect=aiohttp.ServerDisconnectedError(),
        autospec=True,
    )

    with pytest.raises(NetworkError) as excinfo:
        await client.fetch_data()

    assert excinfo.value.url == "test://endpoint"
    assert mocked_send.call_count == 1


def test_timeout_is_configured(mocker):
    client = _TestClient(session=mocker.MagicMock(), timeout_seconds=7)
    assert client.timeout.total == 7
