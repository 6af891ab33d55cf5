import pytest

from core.exceptions import (
    AcquisitionError,
    NetworkError,
    SnapshotIngestError,
    StoreError,
    UpstreamError,
)


def test_exception_hierarchy():
    assert issubclass(AcquisitionError, SnapshotIngestError)
    assert issubclass(NetworkError, SnapshotIngestError)
    assert issubclass(UpstreamError, SnapshotIngestError)
    assert issubclass(StoreError, SnapshotIngestError)


def test_exceptions_can_be_raised():
    with pytest.raises(AcquisitionError):
        raise AcquisitionError("This is a test acquisition error", stage="navigate")

    with pytest.raises(NetworkError):
        raise NetworkError("This is a test network error")

    with pytest.raises(UpstreamError):
        raise UpstreamError(503, "unavailable")

    with pytest.raises(StoreError):
        raise StoreError("This is a test store error")


def test_structured_details():
    upstream = UpstreamError(429, "slow down", url="https://example.test")
    assert str(upstream) == "Upstream responded with HTTP 429"
    assert upstream.to_dict() == {
        "error_type": "UpstreamError",
        "message": "Upstream responded with HTTP 429",
        "status": 429,
        "body": "slow down",
        "url": "https://example.test",
    }

    acquisition = AcquisitionError("timed out", stage="await_response")
    assert acquisition.to_dict()["stage"] == "await_response"

    store = StoreError("partial", details={"nUpserted": 3})
    assert store.to_dict()["details"] == {"nUpserted": 3}
    assert StoreError("plain").details == {}
