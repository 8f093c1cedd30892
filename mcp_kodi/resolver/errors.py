"""Error taxonomy for request resolution."""

from __future__ import annotations


class KodiRemoteError(Exception):
    """Base class for failures that end a single request."""

    kind = "error"


class InvalidInput(KodiRemoteError):
    """Missing or malformed request parameters; no device call was made."""

    kind = "invalid_input"


class NoResults(KodiRemoteError):
    """The snapshot was empty or no candidate matched the query."""

    kind = "no_results"


class DeviceCallFailed(KodiRemoteError):
    """The Kodi JSON-RPC call failed at the transport or protocol level."""

    kind = "device_call_failed"

    def __init__(self, message: str, *, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method


__all__ = ["KodiRemoteError", "InvalidInput", "NoResults", "DeviceCallFailed"]
