import socket
import sys

import pytest

from reactornet.inet_address import InetAddress


def test_any_ipv4_address():
    addr = InetAddress(8888)
    assert addr.to_ip() == "0.0.0.0"
    assert addr.to_port() == 8888
    assert not addr.is_unspecified()
    assert not addr.is_ipv6()
    assert addr.family() == socket.AF_INET


def test_loopback_ipv4_address():
    addr = InetAddress(8888, True)
    assert addr.to_ip() == "127.0.0.1"
    assert addr.is_loopback_ip()
    assert addr.is_intranet_ip()


def test_loopback_ipv6_address():
    addr = InetAddress(8888, True, True)
    assert addr.to_ip() == "::1"
    assert addr.is_ipv6()
    assert addr.family() == socket.AF_INET6
    assert addr.is_loopback_ip()
    assert addr.is_intranet_ip()


def test_any_ipv6_address():
    addr = InetAddress(0, False, True)
    assert addr.to_ip() == "::"
    assert not addr.is_loopback_ip()


@pytest.mark.parametrize(
    "ip,port,ipv6",
    [("192.168.1.1", 80, False), ("10.20.30.40", 443, False), ("2001:db8::5", 8080, True)],
)
def test_from_ip_round_trip(ip, port, ipv6):
    addr = InetAddress.from_ip(ip, port, ipv6)
    assert addr.to_ip() == ip
    assert addr.to_port() == port
    assert addr.to_ip_port() == f"{ip}:{port}"
    assert not addr.is_unspecified()


@pytest.mark.parametrize("ip,ipv6", [("not-an-ip", False), ("1.2.3", False), ("::zz", True)])
def test_from_ip_invalid_is_unspecified(ip, ipv6):
    assert InetAddress.from_ip(ip, 80, ipv6).is_unspecified()


@pytest.mark.parametrize(
    "ip,expected",
    [
        ("10.0.0.1", True),
        ("172.16.5.4", True),
        ("192.168.0.1", True),
        ("127.0.0.1", True),
        ("8.8.8.8", False),
        ("172.32.0.1", False),
        ("127.0.0.2", False),
    ],
)
def test_intranet_ipv4(ip, expected):
    assert InetAddress.from_ip(ip, 1).is_intranet_ip() is expected


@pytest.mark.parametrize(
    "ip,expected",
    [
        ("fe80::1", True),
        ("fec0::1", True),
        ("::ffff:10.1.2.3", True),
        ("::ffff:8.8.8.8", False),
        ("2001:db8::1", False),
    ],
)
def test_intranet_ipv6(ip, expected):
    assert InetAddress.from_ip(ip, 1, True).is_intranet_ip() is expected


def test_loopback_checks():
    assert InetAddress.from_ip("::ffff:127.0.0.1", 1, True).is_loopback_ip()
    assert not InetAddress.from_ip("10.0.0.1", 1).is_loopback_ip()
    assert not InetAddress.from_ip("fe80::1", 1, True).is_loopback_ip()


def test_net_endian_bytes():
    addr = InetAddress.from_ip("192.168.1.1", 8080)
    packed = socket.inet_pton(socket.AF_INET, "192.168.1.1")
    assert addr.to_ip_net_endian() == packed
    assert addr.to_ip_port_net_endian() == packed + (8080).to_bytes(2, "big")


def test_ipv6_net_endian_bytes():
    addr = InetAddress.from_ip("2001:db8::1", 9000, True)
    packed = socket.inet_pton(socket.AF_INET6, "2001:db8::1")
    assert addr.to_ip_net_endian() == packed
    assert addr.to_ip_port_net_endian() == packed + (9000).to_bytes(2, "big")
    words = addr.ip6_net_endian()
    assert b"".join(w.to_bytes(4, sys.byteorder) for w in words) == packed


def test_ip_and_port_net_endian_integers():
    addr = InetAddress.from_ip("10.1.2.3", 8080)
    packed = socket.inet_pton(socket.AF_INET, "10.1.2.3")
    assert addr.ip_net_endian().to_bytes(4, sys.byteorder) == packed
    assert addr.port_net_endian().to_bytes(2, sys.byteorder) == (8080).to_bytes(2, "big")


def test_family_mismatch_raises():
    with pytest.raises(ValueError):
        InetAddress(1, False, True).ip_net_endian()
    with pytest.raises(ValueError):
        InetAddress(1).ip6_net_endian()


def test_port_out_of_range():
    with pytest.raises(ValueError):
        InetAddress(70000)
    with pytest.raises(ValueError):
        InetAddress.from_ip("127.0.0.1", -1)


def test_from_sockaddr_round_trip_with_real_socket():
    local = InetAddress(0, True)
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(local.sockaddr())
        bound = InetAddress.from_sockaddr(socket.AF_INET, sock.getsockname())
    assert bound.is_loopback_ip()
    assert bound.to_port() > 0
    assert bound.to_ip() == local.to_ip()


def test_from_sockaddr_ipv6_tuple():
    addr = InetAddress.from_sockaddr(socket.AF_INET6, ("::1", 8888, 0, 0))
    assert addr.is_ipv6()
    assert addr.to_ip_port() == "::1:8888"
    assert addr.sockaddr() == ("::1", 8888, 0, 0)


def test_from_sockaddr_unknown_family():
    with pytest.raises(ValueError):
        InetAddress.from_sockaddr(-1, ("127.0.0.1", 1))


def test_equality_and_hash():
    a = InetAddress.from_ip("127.0.0.1", 8888)
    b = InetAddress(8888, True)
    assert a == b
    assert hash(a) == hash(b)
    assert a != InetAddress.from_ip("127.0.0.1", 8889)