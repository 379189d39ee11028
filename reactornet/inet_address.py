"""IPv4 and IPv6 endpoints: an address together with a TCP port."""

from __future__ import annotations

import socket
import sys

_PRIVATE_V4_RANGES = (
    (0x0A000000, 0x0AFFFFFF),
    (0xAC100000, 0xAC1FFFFF),
    (0xC0A80000, 0xC0A8FFFF),
)
_LOOPBACK_V4 = 0x7F000001
_IPV4_MAPPED_MARKER = 0xFFFF


def _is_private_v4(value: int) -> bool:
    return value == _LOOPBACK_V4 or any(lo <= value <= hi for lo, hi in _PRIVATE_V4_RANGES)


def _check_port(port: int) -> int:
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    return port


def _native(data: bytes) -> int:
    """Read bytes the way the host reads an integer stored in that memory."""
    return int.from_bytes(data, sys.byteorder)


class InetAddress:
    """An endpoint: address family, IP address and port."""

    __slots__ = ("_family", "_packed", "_port", "_flowinfo", "_scope_id", "_ipv6", "_unspecified")

    def __init__(self, port: int = 0, loopback_only: bool = False, ipv6: bool = False) -> None:
        self._port = _check_port(port)
        self._flowinfo = 0
        self._scope_id = 0
        self._ipv6 = ipv6
        if ipv6:
            self._family = socket.AF_INET6
            self._packed = bytes(15) + (b"\x01" if loopback_only else b"\x00")
        else:
            self._family = socket.AF_INET
            value = _LOOPBACK_V4 if loopback_only else 0
            self._packed = value.to_bytes(4, "big")
        self._unspecified = False

    @classmethod
    def from_ip(cls, ip: str, port: int, ipv6: bool = False) -> InetAddress:
        """Build an endpoint from a textual IP; an unparsable IP leaves it unspecified."""
        addr = cls(port, False, ipv6)
        try:
            addr._packed = socket.inet_pton(addr._family, ip)
        except (OSError, ValueError):
            addr._unspecified = True
        return addr

    @classmethod
    def from_sockaddr(cls, family: int, sockaddr: tuple) -> InetAddress:
        """Build an endpoint from a socket-module address tuple."""
        if family not in (socket.AF_INET, socket.AF_INET6):
            raise ValueError(f"unsupported address family: {family}")
        host = sockaddr[0].split("%", 1)[0]
        addr = cls(sockaddr[1], False, family == socket.AF_INET6)
        addr._packed = socket.inet_pton(family, host)
        if family == socket.AF_INET6 and len(sockaddr) >= 4:
            addr._flowinfo = sockaddr[2]
            addr._scope_id = sockaddr[3]
        return addr

    def family(self) -> int:
        return self._family

    def to_ip(self) -> str:
        return socket.inet_ntop(self._family, self._packed)

    def to_ip_port(self) -> str:
        return f"{self.to_ip()}:{self._port}"

    def to_ip_net_endian(self) -> bytes:
        return self._packed

    def to_ip_port_net_endian(self) -> bytes:
        return self._packed + self._port.to_bytes(2, "big")

    def to_port(self) -> int:
        return self._port

    def is_ipv6(self) -> bool:
        return self._ipv6

    def _words(self) -> tuple[int, int, int, int]:
        data = self._packed
        return tuple(int.from_bytes(data[i:i + 4], "big") for i in range(0, 16, 4))  # type: ignore[return-value]

    def is_intranet_ip(self) -> bool:
        if self._family == socket.AF_INET:
            return _is_private_v4(int.from_bytes(self._packed, "big"))
        w0, w1, w2, w3 = self._words()
        if w0 == 0 and w1 == 0 and w2 == 0 and w3 == 1:
            return True
        if (w0 & 0xFFC00000) in (0xFEC00000, 0xFE800000):
            return True
        return w0 == 0 and w1 == 0 and w2 == _IPV4_MAPPED_MARKER and _is_private_v4(w3)

    def is_loopback_ip(self) -> bool:
        if not self._ipv6:
            return int.from_bytes(self._packed, "big") == _LOOPBACK_V4
        w0, w1, w2, w3 = self._words()
        if w0 == 0 and w1 == 0 and w2 == 0 and w3 == 1:
            return True
        return w0 == 0 and w1 == 0 and w2 == _IPV4_MAPPED_MARKER and w3 == _LOOPBACK_V4

    def is_unspecified(self) -> bool:
        return self._unspecified

    def ip_net_endian(self) -> int:
        """The IPv4 address as an integer holding network-order bytes."""
        if self._family != socket.AF_INET:
            raise ValueError("not an IPv4 address")
        return _native(self._packed)

    def ip6_net_endian(self) -> tuple[int, int, int, int]:
        """The IPv6 address as four integers holding network-order bytes."""
        if self._family != socket.AF_INET6:
            raise ValueError("not an IPv6 address")
        data = self._packed
        return tuple(_native(data[i:i + 4]) for i in range(0, 16, 4))  # type: ignore[return-value]

    def port_net_endian(self) -> int:
        """The port as an integer holding network-order bytes."""
        return _native(self._port.to_bytes(2, "big"))

    def sockaddr(self) -> tuple:
        """The address tuple expected by the socket module."""
        if self._family == socket.AF_INET6:
            return (self.to_ip(), self._port, self._flowinfo, self._scope_id)
        return (self.to_ip(), self._port)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InetAddress):
            return NotImplemented
        return (self._family, self._packed, self._port) == (other._family, other._packed, other._port)

    def __hash__(self) -> int:
        return hash((self._family, self._packed, self._port))

    def __repr__(self) -> str:
        return f"InetAddress({self.to_ip_port()!r})"