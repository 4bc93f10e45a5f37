import io
import json

import pytest

from travesim_adapters.cli import (
    CLEAR_TERMINAL,
    _watch_replacer,
    _watch_team,
    main,
    receive_messages,
    send_messages,
    vision_demo,
)
from travesim_adapters.messages import (
    BallReplacement,
    Command,
    Commands,
    Packet,
    Replacement,
    Robot,
    RobotReplacement,
)
from travesim_adapters.receiver import SourceError, UnicastReceiver
from travesim_adapters.replacer_receiver import ReplacerReceiver
from travesim_adapters.sender import UnicastSender
from travesim_adapters.team_command import TeamCommand
from travesim_adapters.team_receiver import TeamReceiver
from travesim_adapters.vision_sender import FIELD_WIDTH_M


@pytest.fixture
def receiver():
    rx = UnicastReceiver("127.0.0.1", 0)
    yield rx
    rx.close()


def _drain(rx, attempts=200):
    for _ in range(attempts):
        data = rx.receive()
        if data:
            return data
    return b""


def test_send_messages_reports_and_delivers(receiver):
    port = receiver.local_endpoint[1]
    out = io.StringIO()
    with UnicastSender("127.0.0.1", port) as sender:
        sent = send_messages(sender, 3, 0, out)

    assert sent == [len("Menssagem 0"), len("Menssagem 1"), len("Menssagem 2")]
    assert out.getvalue().startswith("Menssagem 0\nBytes sent: 11\n\n")
    assert _drain(receiver) == b"Menssagem 0"
    assert _drain(receiver) == b"Menssagem 1"
    assert _drain(receiver) == b"Menssagem 2"


def test_receive_messages_echoes_data(receiver):
    port = receiver.local_endpoint[1]
    with UnicastSender("127.0.0.1", port) as sender:
        sender.send(b"hello")

    out = io.StringIO()
    received = receive_messages(receiver, 50, 0.002, out)

    assert received == [b"hello"]
    assert "hello\n" in out.getvalue()
    assert "Loop count: 0\n" in out.getvalue()


def test_receive_messages_rejects_second_source(receiver):
    receiver.force_specific_source(True)
    port = receiver.local_endpoint[1]
    with UnicastSender("127.0.0.1", port) as first, UnicastSender("127.0.0.1", port) as second:
        first.send(b"one")
        second.send(b"two")
        with pytest.raises(SourceError):
            receive_messages(receiver, 50, 0.002, io.StringIO())


def test_vision_demo_packet_and_json():
    out = io.StringIO()
    env = vision_demo(out)

    assert env.frame.ball.x == 2.4
    assert env.frame.ball.vy == 0.7
    assert env.frame.robots_yellow[0].vorientation == 1.54
    assert env.frame.robots_blue[2].orientation == 3.14
    assert env.field.width == FIELD_WIDTH_M
    assert json.loads(out.getvalue()) == env.to_dict()


def test_main_vision_demo(capsys):
    assert main(["vision-demo"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["frame"]["ball"]["x"] == 2.4


def test_main_udp_send(receiver, capsys):
    port = receiver.local_endpoint[1]
    assert main(["udp-send", "--port", str(port), "--count", "2", "--interval", "0"]) == 0
    assert "Bytes sent: 11" in capsys.readouterr().out
    assert _drain(receiver) == b"Menssagem 0"
    assert _drain(receiver) == b"Menssagem 1"


def test_main_reports_bad_address(capsys):
    assert main(["udp-send", "--address", "not-an-ip", "--count", "1"]) == 1
    assert capsys.readouterr().err.startswith("Exception:")


def test_main_requires_command():
    with pytest.raises(SystemExit):
        main([])


def test_watch_team_prints_new_command():
    with TeamReceiver("127.0.0.1", 0, True) as team_receiver:
        port = team_receiver.local_endpoint[1]
        packet = Packet(
            cmd=Commands([Command(id=0, yellowteam=True, wheel_left=1.5, wheel_right=-2.0)])
        )
        with UnicastSender("127.0.0.1", port) as sender:
            sender.send(packet.encode())

        command = TeamCommand()
        out = io.StringIO()
        updates = _watch_team(team_receiver, command, 50, 0.002, out)

    assert updates == 1
    assert command.robot_command[0].left_speed == 1.5
    assert command.robot_command[0].right_speed == -2.0
    assert out.getvalue() == f"{CLEAR_TERMINAL}{command}"


def test_watch_replacer_prints_robots_then_ball():
    with ReplacerReceiver("127.0.0.1", 0) as replacer_receiver:
        port = replacer_receiver.local_endpoint[1]
        packet = Packet(
            replace=Replacement(
                ball=BallReplacement(x=0.5),
                robots=[RobotReplacement(position=Robot(robot_id=1, x=0.2), yellowteam=True)],
            )
        )
        with UnicastSender("127.0.0.1", port) as sender:
            sender.send(packet.encode())

        out = io.StringIO()
        total = _watch_replacer(replacer_receiver, 50, 0.002, out)

    text = out.getvalue()
    assert total == 2
    assert "ROBOT ID: 1" in text
    assert "BALL\n" in text
    assert text.index("ROBOT ID: 1") < text.index("BALL\n")


def test_watch_replacer_idle_prints_nothing():
    with ReplacerReceiver("127.0.0.1", 0) as replacer_receiver:
        out = io.StringIO()
        total = _watch_replacer(replacer_receiver, 3, 0, out)
    assert total == 0
    assert out.getvalue() == ""