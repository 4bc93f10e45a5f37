import socket
import time

import pytest

from travesim_adapters.receiver import (
    INVALID_ENDPOINT,
    MulticastReceiver,
    SourceError,
    UnicastReceiver,
)
from travesim_adapters.sender import UnicastSender


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _receive_eventually(receiver, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        data = receiver.receive()
        if data:
            return data
        time.sleep(0.01)
    return b""


@pytest.fixture
def receiver():
    rx = UnicastReceiver("127.0.0.1", _free_port())
    yield rx
    rx.close()


def test_receive_without_data_is_empty(receiver):
    assert receiver.receive() == b""
    assert receiver.receive_latest() == b""


def test_round_trip(receiver):
    with UnicastSender(*receiver.local_endpoint) as sender:
        sender.send(b"Menssagem 0")
        assert _receive_eventually(receiver) == b"Menssagem 0"


def test_any_source_accepts_multiple_senders(receiver):
    endpoint = receiver.local_endpoint
    with UnicastSender(*endpoint) as first, UnicastSender(*endpoint) as second:
        first.send(b"from first")
        assert _receive_eventually(receiver) == b"from first"
        second.send(b"from second")
        assert _receive_eventually(receiver) == b"from second"


def test_specific_source_rejects_other_sender(receiver):
    receiver.force_specific_source(True)
    endpoint = receiver.local_endpoint
    with UnicastSender(*endpoint) as first, UnicastSender(*endpoint) as second:
        first.send(b"from first")
        assert _receive_eventually(receiver) == b"from first"
        assert receiver.sender_endpoint[0] == "127.0.0.1"
        second.send(b"from second")
        with pytest.raises(SourceError):
            _receive_eventually(receiver)


def test_reset_forgets_sender(receiver):
    receiver.force_specific_source(True)
    endpoint = receiver.local_endpoint
    with UnicastSender(*endpoint) as first, UnicastSender(*endpoint) as second:
        first.send(b"from first")
        assert _receive_eventually(receiver) == b"from first"

        receiver.reset()
        assert receiver.sender_endpoint == INVALID_ENDPOINT

        second.send(b"from second")
        assert _receive_eventually(receiver) == b"from second"


def test_receive_latest_returns_last(receiver):
    with UnicastSender(*receiver.local_endpoint) as sender:
        for message in (b"first", b"second", b"third"):
            sender.send(message)
        time.sleep(0.2)
        assert receiver.receive_latest() == b"third"
        assert receiver.receive() == b""


def test_set_receiver_endpoint_applies_on_reset(receiver):
    new_port = _free_port()
    receiver.set_receiver_endpoint("127.0.0.1", new_port)
    assert receiver.receiver_endpoint == ("127.0.0.1", new_port)
    receiver.reset()
    assert receiver.local_endpoint == ("127.0.0.1", new_port)

    with UnicastSender("127.0.0.1", new_port) as sender:
        sender.send(b"moved")
        assert _receive_eventually(receiver) == b"moved"


def test_invalid_address_raises():
    with pytest.raises(ValueError):
        UnicastReceiver("127.0.0,1", 30001)


def test_invalid_multicast_address_raises():
    with pytest.raises(ValueError):
        MulticastReceiver("not-an-address", 10002)


def test_receive_after_close_raises():
    rx = UnicastReceiver("127.0.0.1", _free_port())
    rx.close()
    with pytest.raises(OSError):
        rx.receive()