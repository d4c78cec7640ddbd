"""Real-time frame channel over UDP."""

from __future__ import annotations

import socket

from xledctl.core.errors import ChannelSendError, ChannelUninitialized, TransportConnectError
from xledctl.core.locks import RWLock

DEFAULT_PORT = 7777
DEFAULT_CHUNK_SIZE = 900
PACKET_TYPE = 0x03
_RESERVED = b"\x00\x00"


def build_packets(payload: bytes, token_binary: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[bytes]:
    """Split a frame payload into datagrams in ascending chunk order.

    The chunk index is a single byte and wraps after 256 chunks; the device
    does not support frames that large.
    """
    header = bytes([PACKET_TYPE]) + token_binary + _RESERVED
    return [
        header + bytes([index & 0xFF]) + payload[offset : offset + chunk_size]
        for index, offset in enumerate(range(0, len(payload), chunk_size))
    ]


class DatagramChannel:
    def __init__(self, *, port: int = DEFAULT_PORT, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.port = port
        self.chunk_size = chunk_size
        self._lock = RWLock()
        self._socket: socket.socket | None = None

    @property
    def initialized(self) -> bool:
        with self._lock.read():
            return self._socket is not None

    def init(self, address: str) -> None:
        host = address.strip().strip("[]")
        try:
            family, _, _, _, remote = socket.getaddrinfo(host, self.port, type=socket.SOCK_DGRAM)[0]
        except OSError as exc:
            raise TransportConnectError(f"Could not resolve {host}:{self.port}: {exc}") from exc

        local = ("::", 0) if family == socket.AF_INET6 else ("0.0.0.0", 0)
        try:
            udp_socket = socket.socket(family, socket.SOCK_DGRAM)
        except OSError as exc:
            raise TransportConnectError(f"Could not create UDP socket: {exc}") from exc
        try:
            udp_socket.bind(local)
            udp_socket.connect(remote)
        except OSError as exc:
            udp_socket.close()
            raise TransportConnectError(f"UDP connect failed for {host}:{self.port}: {exc}") from exc

        with self._lock.write():
            previous, self._socket = self._socket, udp_socket
        if previous is not None:
            previous.close()

    def send_frame(self, payload: bytes, token_binary: bytes) -> int:
        packets = build_packets(payload, token_binary, self.chunk_size)
        with self._lock.read():
            if self._socket is None:
                raise ChannelUninitialized("Tried to send a frame without an initialized UDP socket")
            for index, packet in enumerate(packets):
                try:
                    self._socket.send(packet)
                except OSError as exc:
                    raise ChannelSendError(
                        f"UDP send failed on chunk {index} of {len(packets)}: {exc}"
                    ) from exc
        return len(packets)

    def close(self) -> None:
        with self._lock.write():
            udp_socket, self._socket = self._socket, None
        if udp_socket is not None:
            udp_socket.close()
