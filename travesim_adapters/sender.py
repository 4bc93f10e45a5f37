"""Sending datagrams over UDP in unicast or multicast mode."""

from __future__ import annotations

import ipaddress
import socket

__all__ = ["Sender", "UnicastSender", "MulticastSender", "parse_endpoint"]


def parse_endpoint(address: str, port: int) -> tuple[str, int]:
    """Validate an address and port, returning them as an endpoint tuple."""
    ip = ipaddress.ip_address(address)
    if not 0 <= int(port) <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    return str(ip), int(port)


def address_family(address: str) -> socket.AddressFamily:
    if ipaddress.ip_address(address).version == 6:
        return socket.AF_INET6
    return socket.AF_INET


class Sender:
    """UDP sender bound to a single receiver endpoint."""

    def __init__(self, receiver_address: str, receiver_port: int) -> None:
        self.set_receiver_endpoint(receiver_address, receiver_port)
        self._socket = socket.socket(address_family(self.endpoint[0]), socket.SOCK_DGRAM)
        try:
            self._configure(self._socket)
        except OSError:
            self._socket.close()
            raise

    def _configure(self, sock: socket.socket) -> None:
        """Set socket options; subclasses override."""

    def send(self, data: bytes) -> int:
        """Send ``data`` to the receiver endpoint, returning the bytes sent."""
        return self._socket.sendto(bytes(data), self.endpoint)

    def set_receiver_endpoint(self, address: str, port: int) -> None:
        self.endpoint = parse_endpoint(address, port)

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> Sender:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class UnicastSender(Sender):
    """Sender limited to a single hop."""

    def _configure(self, sock: socket.socket) -> None:
        if sock.family == socket.AF_INET6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_UNICAST_HOPS, 1)
        else:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, 1)


class MulticastSender(Sender):
    """Sender to a multicast group, limited to a single hop."""

    def _configure(self, sock: socket.socket) -> None:
        if sock.family == socket.AF_INET6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_MULTICAST_HOPS, 1)
        else:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 1)