"""A thin owner of a TCP socket with the operations the reactor needs."""

from __future__ import annotations

import errno
import logging
import socket

from reactornet.inet_address import InetAddress

_log = logging.getLogger(__name__)


class Socket:
    """Owns a socket and closes it when done."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    @staticmethod
    def create_nonblocking(family: int) -> socket.socket:
        """Create a non-blocking TCP socket of the given family."""
        sock = socket.socket(family, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        sock.setblocking(False)
        _log.debug("sock=%d", sock.fileno())
        return sock

    @staticmethod
    def get_socket_error(sock: socket.socket) -> int:
        """Return the pending error of ``sock`` (0 if none)."""
        try:
            return sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as exc:
            return exc.errno or errno.EBADF

    @staticmethod
    def connect(sock: socket.socket, addr: InetAddress) -> int:
        """Start connecting to ``addr``; return 0 or the errno of the attempt."""
        return sock.connect_ex(addr.sockaddr())

    @staticmethod
    def get_local_addr(sock: socket.socket) -> InetAddress:
        return InetAddress.from_sockaddr(sock.family, sock.getsockname())

    @staticmethod
    def get_peer_addr(sock: socket.socket) -> InetAddress:
        return InetAddress.from_sockaddr(sock.family, sock.getpeername())

    @staticmethod
    def is_self_connect(sock: socket.socket) -> bool:
        """True if the socket is connected to its own local endpoint."""
        if sock.family not in (socket.AF_INET, socket.AF_INET6):
            return False
        return Socket.get_local_addr(sock) == Socket.get_peer_addr(sock)

    @property
    def sock(self) -> socket.socket:
        return self._sock

    def fd(self) -> int:
        return self._sock.fileno()

    def bind_address(self, local_addr: InetAddress) -> None:
        try:
            self._sock.bind(local_addr.sockaddr())
        except OSError:
            _log.error("Bind address failed at %s", local_addr.to_ip_port())
            raise

    def listen(self) -> None:
        self._sock.listen(socket.SOMAXCONN)

    def accept(self) -> tuple[socket.socket, InetAddress]:
        """Accept one pending connection as a non-blocking socket with its peer."""
        conn, peer = self._sock.accept()
        conn.setblocking(False)
        return conn, InetAddress.from_sockaddr(conn.family, peer)

    def close_write(self) -> None:
        try:
            self._sock.shutdown(socket.SHUT_WR)
        except OSError:
            _log.exception("sockets::shutdownWrite")

    def read(self, length: int) -> bytes:
        return self._sock.recv(length)

    def _set_flag(self, level: int, option: int, on: bool) -> None:
        self._sock.setsockopt(level, option, 1 if on else 0)

    def set_tcp_no_delay(self, on: bool) -> None:
        self._set_flag(socket.IPPROTO_TCP, socket.TCP_NODELAY, on)

    def set_reuse_addr(self, on: bool) -> None:
        self._set_flag(socket.SOL_SOCKET, socket.SO_REUSEADDR, on)

    def set_reuse_port(self, on: bool) -> None:
        option = getattr(socket, "SO_REUSEPORT", None)
        if option is None:
            if on:
                _log.error("SO_REUSEPORT is not supported.")
            return
        try:
            self._set_flag(socket.SOL_SOCKET, option, on)
        except OSError:
            if on:
                _log.exception("SO_REUSEPORT failed.")

    def set_keep_alive(self, on: bool) -> None:
        self._set_flag(socket.SOL_SOCKET, socket.SO_KEEPALIVE, on)

    def socket_error(self) -> int:
        return Socket.get_socket_error(self._sock)

    def close(self) -> None:
        if self._sock.fileno() >= 0:
            _log.debug("Socket closed: %d", self._sock.fileno())
        self._sock.close()

    def __enter__(self) -> Socket:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()