"""Non-blocking UDP receivers in unicast or multicast mode."""

from __future__ import annotations

import ipaddress
import socket
import struct
from abc import ABC, abstractmethod

from .sender import address_family, parse_endpoint

__all__ = [
    "BUFFER_SIZE",
    "INVALID_ENDPOINT",
    "SourceError",
    "Receiver",
    "UnicastReceiver",
    "MulticastReceiver",
]

BUFFER_SIZE = 1024
INVALID_ENDPOINT = ("0.0.0.0", 0)


class SourceError(RuntimeError):
    """A datagram came from a source other than the first one accepted."""


class Receiver(ABC):
    """Base UDP receiver; reads never block and return ``b""`` when idle."""

    def __init__(self, receiver_address: str, receiver_port: int) -> None:
        self.set_receiver_endpoint(receiver_address, receiver_port)
        self.specific_source = False
        self.sender_endpoint = INVALID_ENDPOINT
        self._socket: socket.socket | None = None

    @abstractmethod
    def _open_socket(self) -> socket.socket:
        """Create, configure and bind a new non-blocking socket."""

    def _open(self) -> None:
        self._socket = self._open_socket()

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            raise OSError("receiver socket is not open")
        return self._socket

    @property
    def local_endpoint(self) -> tuple[str, int]:
        """Address and port the socket is bound to."""
        name = self._require_socket().getsockname()
        return name[0], name[1]

    def _read(self, sock: socket.socket, buffer_size: int) -> tuple[bytes, tuple[str, int]]:
        try:
            data, source = sock.recvfrom(buffer_size)
        except BlockingIOError:
            return b"", INVALID_ENDPOINT
        return data, (source[0], source[1])

    def receive(self, buffer_size: int = BUFFER_SIZE) -> bytes:
        """Return one pending datagram, or ``b""`` when none is waiting."""
        data, source = self._read(self._require_socket(), buffer_size)
        self._validate_sender_endpoint(source)
        return data

    def receive_latest(self, buffer_size: int = BUFFER_SIZE) -> bytes:
        """Drain pending datagrams, returning only the most recent one."""
        sock = self._require_socket()
        data, source = self._read(sock, buffer_size)
        while data or source != INVALID_ENDPOINT:
            newer, newer_source = self._read(sock, buffer_size)
            if newer_source == INVALID_ENDPOINT and not newer:
                break
            data, source = newer, newer_source
        self._validate_sender_endpoint(source)
        return data

    def force_specific_source(self, specific_source: bool) -> None:
        """Accept data only from the first sender seen when ``specific_source`` is set."""
        self.specific_source = bool(specific_source)

    def set_receiver_endpoint(self, address: str, port: int) -> None:
        """Change the local endpoint; it takes effect on the next reset."""
        self.receiver_endpoint = parse_endpoint(address, port)

    def reset(self) -> None:
        """Forget the accepted sender and reopen the socket."""
        self.sender_endpoint = INVALID_ENDPOINT
        self._close_socket()
        self._socket = None
        self._open()

    def close(self) -> None:
        self._close_socket()

    def __enter__(self) -> Receiver:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _validate_sender_endpoint(self, current: tuple[str, int]) -> None:
        if not self.specific_source:
            return
        if self.sender_endpoint == INVALID_ENDPOINT:
            self.sender_endpoint = current
        elif self.sender_endpoint != current and current != INVALID_ENDPOINT:
            raise SourceError("Error in receiver. Any-source not enabled.")


class UnicastReceiver(Receiver):
    """Receiver bound to a unicast address."""

    def __init__(self, receiver_address: str, receiver_port: int) -> None:
        super().__init__(receiver_address, receiver_port)
        self._open()

    def _open_socket(self) -> socket.socket:
        sock = socket.socket(address_family(self.receiver_endpoint[0]), socket.SOCK_DGRAM)
        try:
            if sock.family == socket.AF_INET6:
                sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_UNICAST_HOPS, 1)
            else:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, 1)
            sock.bind(self.receiver_endpoint)
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        return sock


class MulticastReceiver(Receiver):
    """Receiver that joins a multicast group."""

    def __init__(
        self,
        multicast_address: str,
        multicast_port: int,
        receiver_address: str | None = None,
    ) -> None:
        super().__init__(
            receiver_address if receiver_address is not None else multicast_address,
            multicast_port,
        )
        self.set_multicast_address(multicast_address)
        self._open()

    def set_multicast_address(self, multicast_address: str) -> None:
        """Change the group to join; it takes effect on the next reset."""
        self.multicast_address = ipaddress.ip_address(multicast_address)

    def _membership(self) -> tuple[int, int, bytes]:
        group = self.multicast_address
        if group.version == 6:
            return socket.IPPROTO_IPV6, socket.IPV6_JOIN_GROUP, group.packed + struct.pack("@I", 0)
        return socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, group.packed + socket.inet_aton("0.0.0.0")

    def _open_socket(self) -> socket.socket:
        sock = socket.socket(address_family(self.receiver_endpoint[0]), socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if sock.family == socket.AF_INET6:
                sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_MULTICAST_HOPS, 1)
            else:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 1)
            level, option, request = self._membership()
            sock.setsockopt(level, option, request)
            sock.bind(self.receiver_endpoint)
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        return sock

    def _close_socket(self) -> None:
        if self._socket is None or self._socket.fileno() == -1:
            return
        level, option, request = self._membership()
        leave = {
            socket.IP_ADD_MEMBERSHIP: socket.IP_DROP_MEMBERSHIP,
            socket.IPV6_JOIN_GROUP: socket.IPV6_LEAVE_GROUP,
        }[option] if level == socket.IPPROTO_IP or level == socket.IPPROTO_IPV6 else option
        try:
            self._socket.setsockopt(level, leave, request)
        except OSError:
            pass
        finally:
            self._socket.close()