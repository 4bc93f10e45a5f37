"""Command line tools for exercising the UDP and protocol adapters."""

from __future__ import annotations

import argparse
import itertools
import json
import sys
import time
from collections.abc import Iterator, Sequence
from typing import TextIO

from .entity_state import RobotState
from .field_state import FieldState
from .messages import Environment
from .receiver import MulticastReceiver, Receiver, UnicastReceiver
from .replacer_receiver import ReplacerReceiver
from .sender import MulticastSender, Sender, UnicastSender
from .team_command import TeamCommand
from .team_receiver import TeamReceiver
from .vision_sender import field_state_to_environment

__all__ = ["send_messages", "receive_messages", "vision_demo", "main"]

CLEAR_TERMINAL = "\033[2J\033[H"
LOOP_REPORT_PERIOD = 100000

DEFAULT_MULTICAST_ADDRESS = "224.0.0.1"
DEFAULT_MULTICAST_PORT = 10002
DEFAULT_UNICAST_ADDRESS = "127.0.0.1"
DEFAULT_UNICAST_PORT = 30001
DEFAULT_TEAM_PORT = 20011
DEFAULT_REPLACER_PORT = 20011


def _loop_indices(loops: int | None) -> Iterator[int]:
    return itertools.count() if loops is None else iter(range(loops))


def _pause(interval: float) -> None:
    if interval > 0:
        time.sleep(interval)


def send_messages(sender: Sender, count: int, interval: float, out: TextIO) -> list[int]:
    """Send ``count`` numbered text messages, reporting each; returns the bytes sent."""
    sent: list[int] = []
    for index in range(count):
        message = f"Menssagem {index}"
        bytes_sent = sender.send(message.encode())
        out.write(f"{message}\nBytes sent: {bytes_sent}\n\n")
        sent.append(bytes_sent)
        _pause(interval)
    return sent


def receive_messages(
    receiver: Receiver, loops: int | None, interval: float, out: TextIO
) -> list[bytes]:
    """Poll ``receiver`` ``loops`` times (forever if None), echoing what arrives."""
    received: list[bytes] = []
    for index in _loop_indices(loops):
        data = receiver.receive()
        if data:
            out.write(data.decode(errors="replace") + "\n")
            received.append(data)
        if index % LOOP_REPORT_PERIOD == 0:
            out.write(f"Loop count: {index}\n")
        _pause(interval)
    return received


def vision_demo(out: TextIO) -> Environment:
    """Build a sample field state, print its vision packet as JSON and return it."""
    field_state = FieldState()
    field_state.ball.position.x = 2.4
    field_state.ball.velocity.y = 0.7
    field_state.yellow_team[0].angular_velocity = 1.54
    field_state.blue_team[2].angular_position = 3.14

    environment = field_state_to_environment(field_state)
    out.write(json.dumps(environment.to_dict(), indent=2))
    out.write("\n")
    return environment


def _watch_team(
    receiver: TeamReceiver,
    team_command: TeamCommand,
    loops: int | None,
    interval: float,
    out: TextIO,
) -> int:
    """Print each newly received team command; returns how many arrived."""
    updates = 0
    for _ in _loop_indices(loops):
        if receiver.receive(team_command):
            out.write(f"{CLEAR_TERMINAL}{team_command}")
            updates += 1
        _pause(interval)
    return updates


def _watch_replacer(
    receiver: ReplacerReceiver, loops: int | None, interval: float, out: TextIO
) -> int:
    """Print every replacement state received; returns how many states arrived."""
    total = 0
    for _ in _loop_indices(loops):
        states = receiver.receive()
        for state in states or ():
            if isinstance(state, RobotState):
                out.write(str(state))
            else:
                out.write(f"BALL\n{state}")
            out.write("\n")
            total += 1
        _pause(interval)
    return total


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="travesim-adapters", description="Exercise the simulator adapters."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    send = commands.add_parser("udp-send", help="send numbered text datagrams")
    send.add_argument("--multicast", action="store_true", help="send to a multicast group")
    send.add_argument("--address")
    send.add_argument("--port", type=int)
    send.add_argument("--count", type=int, default=10)
    send.add_argument("--interval", type=float, default=0.2)

    receive = commands.add_parser("udp-receive", help="print received text datagrams")
    receive.add_argument("--multicast", action="store_true", help="join a multicast group")
    receive.add_argument("--address")
    receive.add_argument("--port", type=int)
    receive.add_argument("--loops", type=int)
    receive.add_argument("--interval", type=float, default=0.2)

    team = commands.add_parser("team-receive", help="print yellow team commands")
    team.add_argument("--address", default=DEFAULT_UNICAST_ADDRESS)
    team.add_argument("--port", type=int, default=DEFAULT_TEAM_PORT)
    team.add_argument("--loops", type=int)
    team.add_argument("--interval", type=float, default=0.001)

    replacer = commands.add_parser("replacer-receive", help="print replacement requests")
    replacer.add_argument("--address", default=DEFAULT_UNICAST_ADDRESS)
    replacer.add_argument("--port", type=int, default=DEFAULT_REPLACER_PORT)
    replacer.add_argument("--loops", type=int)
    replacer.add_argument("--interval", type=float, default=0.001)

    commands.add_parser("vision-demo", help="print a sample vision packet as JSON")
    return parser


def _endpoint(args: argparse.Namespace) -> tuple[str, int]:
    if args.multicast:
        address, port = DEFAULT_MULTICAST_ADDRESS, DEFAULT_MULTICAST_PORT
    else:
        address, port = DEFAULT_UNICAST_ADDRESS, DEFAULT_UNICAST_PORT
    return (
        args.address if args.address is not None else address,
        args.port if args.port is not None else port,
    )


def _run(args: argparse.Namespace, out: TextIO) -> None:
    if args.command == "udp-send":
        address, port = _endpoint(args)
        sender_type = MulticastSender if args.multicast else UnicastSender
        with sender_type(address, port) as sender:
            send_messages(sender, args.count, args.interval, out)
    elif args.command == "udp-receive":
        address, port = _endpoint(args)
        if args.multicast:
            receiver: Receiver = MulticastReceiver(address, port)
        else:
            receiver = UnicastReceiver(address, port)
            receiver.force_specific_source(True)
        with receiver:
            receive_messages(receiver, args.loops, args.interval, out)
    elif args.command == "team-receive":
        with TeamReceiver(args.address, args.port, True) as team_receiver:
            _watch_team(team_receiver, TeamCommand(), args.loops, args.interval, out)
    elif args.command == "replacer-receive":
        with ReplacerReceiver(args.address, args.port, True) as replacer_receiver:
            _watch_replacer(replacer_receiver, args.loops, args.interval, out)
    else:
        vision_demo(out)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        _run(args, sys.stdout)
    except KeyboardInterrupt:
        return 0
    except Exception as error:  # reported like any failure of the tool
        sys.stderr.write(f"Exception: {error}\n")
        return 1
    return 0