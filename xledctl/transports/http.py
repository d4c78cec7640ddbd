"""HTTP transport for the device session API using requests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import requests

from xledctl.core.errors import DeviceResponseError, TransportConnectError, TransportError

API_PREFIX = "xled/v1"
AUTH_HEADER = "X-Auth-Token"


def base_url(address: str) -> str:
    """Build the API root for a bare host name, IPv4 or IPv6 address.

    Ports are not accepted; the device API always listens on port 80.
    IPv6 zone IDs (``fe80::1%eth0``) are percent-encoded for the URL.
    """
    host = address.strip()
    if host.startswith("["):
        if not host.endswith("]"):
            raise TransportConnectError(f"Address {address!r} must not include a port")
        host = host[1:-1]
    elif host.count(":") == 1:
        raise TransportConnectError(f"Address {address!r} must not include a port")

    if ":" in host:
        if "%" in host and "%25" not in host:
            host = host.replace("%", "%25", 1)
        host = f"[{host}]"
    return f"http://{host}/{API_PREFIX}"


class RequestsTransport:
    # Each call goes through a fresh requests.request so the streaming thread
    # and the detached mode-set threads never share a Session.
    def __init__(
        self,
        address: str,
        *,
        timeout_s: float | None = None,
        requester: Callable[..., requests.Response] = requests.request,
    ) -> None:
        self.address = address
        self.base_url = base_url(address)
        self.timeout_s = timeout_s
        self._request = requester

    def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}/{path}"
        headers = {AUTH_HEADER: token} if token is not None else None
        try:
            response = self._request(
                method,
                url,
                headers=headers,
                json=json_body,
                timeout=self.timeout_s,
            )
        except requests.ConnectionError as exc:
            raise TransportConnectError(f"Could not reach {url}: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(f"HTTP {response.status_code} for {method} {url}: {response.text}")

        try:
            data = response.json()
        except ValueError as exc:
            raise DeviceResponseError(f"{method} {url} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise DeviceResponseError(f"{method} {url} returned {type(data).__name__}, expected an object")
        return data
