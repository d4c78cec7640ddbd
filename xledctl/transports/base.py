"""Transport interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class HttpTransport(Protocol):
    def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Call a device API endpoint and return the decoded JSON object."""


class FrameChannel(Protocol):
    def init(self, address: str) -> None:
        """Resolve and connect the device's streaming endpoint."""

    def send_frame(self, payload: bytes, token_binary: bytes) -> int:
        """Send one frame as chunked datagrams and return the datagram count."""

    def close(self) -> None:
        """Release the streaming socket."""
