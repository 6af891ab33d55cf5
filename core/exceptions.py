"""Custom exception hierarchy for the snapshot ingestion pipeline.

Every component failure is surfaced to the caller as one of these types so
that a failed run can be diagnosed from the exception alone.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SnapshotIngestError(Exception):
    """Base exception for all ingestion-specific errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Return a structured view suitable for JSON logging."""
        return {"error_type": self.__class__.__name__, "message": self.message}


class AcquisitionError(SnapshotIngestError):
    """The browser session could not produce a bearer credential."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["stage"] = self.stage
        return data


class NetworkError(SnapshotIngestError):
    """No response reached the client (connection failure or timeout)."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["url"] = self.url
        return data


class UpstreamError(SnapshotIngestError):
    """The provider answered with a non-success status or an unusable body."""

    def __init__(
        self,
        status: int,
        body: str,
        url: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(message or f"Upstream responded with HTTP {status}")
        self.status = status
        self.body = body
        self.url = url

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"status": self.status, "body": self.body, "url": self.url})
        return data


class StoreError(SnapshotIngestError):
    """Document store connection or write failure.

    ``details`` carries the driver's partial-batch report when a bulk write
    was only partially applied.
    """

    def __init__(
        self, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["details"] = self.details
        return data
