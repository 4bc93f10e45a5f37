import math
import time

import pytest

from travesim_adapters.messages import Command, Commands, Packet, Replacement
from travesim_adapters.sender import UnicastSender
from travesim_adapters.team_command import TeamCommand, TeamsFormation
from travesim_adapters.team_receiver import TeamReceiver


def _poll(fn, timeout=2.0):
    deadline = time.monotonic() + timeout
    while True:
        result = fn()
        if result or time.monotonic() > deadline:
            return result
        time.sleep(0.01)


@pytest.fixture
def yellow():
    rx = TeamReceiver("127.0.0.1", 0, True)
    yield rx
    rx.close()


def _packet(*commands):
    return Packet(cmd=Commands(robot_commands=list(commands)))


def _speeds(team_command):
    return [(c.left_speed, c.right_speed) for c in team_command.robot_command]


def test_apply_packet_sets_matching_robots(yellow):
    cmd = TeamCommand()
    yellow.apply_packet(_packet(Command(id=1, yellowteam=True, wheel_left=2.0, wheel_right=-3.0)), cmd)
    assert _speeds(cmd) == [(0.0, 0.0), (2.0, -3.0), (0.0, 0.0)]


def test_apply_packet_ignores_other_team(yellow):
    cmd = TeamCommand()
    yellow.apply_packet(_packet(Command(id=0, yellowteam=False, wheel_left=1.0)), cmd)
    assert _speeds(cmd) == [(0.0, 0.0)] * 3


@pytest.mark.parametrize("robot_id", [3, 4, 0xFFFFFFFF])
def test_apply_packet_rejects_invalid_ids(yellow, robot_id):
    cmd = TeamCommand()
    yellow.apply_packet(_packet(Command(id=robot_id, yellowteam=True, wheel_left=1.0)), cmd)
    assert _speeds(cmd) == [(0.0, 0.0)] * 3


def test_apply_packet_accepts_fifth_robot_in_five_formation(yellow):
    cmd = TeamCommand(TeamsFormation.FIVE_ROBOTS_PER_TEAM)
    yellow.apply_packet(_packet(Command(id=4, yellowteam=True, wheel_right=1.5)), cmd)
    assert cmd.robot_command[4].right_speed == 1.5


def test_apply_packet_rejects_nan(yellow):
    cmd = TeamCommand()
    yellow.apply_packet(_packet(Command(id=0, yellowteam=True, wheel_left=math.nan, wheel_right=1.0)), cmd)
    assert _speeds(cmd) == [(0.0, 0.0)] * 3


def test_idle_receive_restores_last_command(yellow):
    cmd = TeamCommand()
    cmd.robot_command[0].left_speed = 9.0
    assert yellow.receive(cmd) is False
    assert _speeds(cmd) == [(0.0, 0.0)] * 3


def test_receive_then_keep_last(yellow):
    port = yellow.local_endpoint[1]
    cmd = TeamCommand()
    with UnicastSender("127.0.0.1", port) as tx:
        tx.send(_packet(Command(id=2, yellowteam=True, wheel_left=0.5, wheel_right=0.25)).encode())
        assert _poll(lambda: yellow.receive(cmd)) is True
    assert cmd.robot_command[2].left_speed == 0.5

    other = TeamCommand()
    assert yellow.receive(other) is False
    assert _speeds(other) == _speeds(cmd)


def test_receive_takes_latest_packet(yellow):
    port = yellow.local_endpoint[1]
    cmd = TeamCommand()
    with UnicastSender("127.0.0.1", port) as tx:
        tx.send(_packet(Command(id=0, yellowteam=True, wheel_left=1.0)).encode())
        tx.send(_packet(Command(id=0, yellowteam=True, wheel_left=2.0)).encode())
        time.sleep(0.05)
        assert _poll(lambda: yellow.receive(cmd)) is True
    assert cmd.robot_command[0].left_speed == 2.0


def test_packet_without_commands_is_not_new(yellow):
    port = yellow.local_endpoint[1]
    cmd = TeamCommand()
    with UnicastSender("127.0.0.1", port) as tx:
        tx.send(Packet(replace=Replacement()).encode())
    time.sleep(0.05)
    assert yellow.receive(cmd) is False
    assert _speeds(cmd) == [(0.0, 0.0)] * 3


def test_reset_reopens_socket():
    with TeamReceiver("127.0.0.1", 0, False, force_specific_source=True) as blue:
        blue.reset()
        port = blue.local_endpoint[1]
        cmd = TeamCommand()
        with UnicastSender("127.0.0.1", port) as tx:
            tx.send(_packet(Command(id=1, yellowteam=False, wheel_right=-2.0)).encode())
            assert _poll(lambda: blue.receive(cmd)) is True
        assert cmd.robot_command[1].right_speed == -2.0