"""Receiving wheel speed commands from a team."""

from __future__ import annotations

import copy
import logging
import math

from .messages import DecodeError, Packet
from .receiver import BUFFER_SIZE, SourceError, UnicastReceiver
from .team_command import RobotCommand, TeamCommand, TeamsFormation

__all__ = ["TeamReceiver"]

logger = logging.getLogger(__name__)


def _copy_into(target: TeamCommand, source: TeamCommand) -> None:
    target.teams_formation = source.teams_formation
    target.robot_command = [
        RobotCommand(command.left_speed, command.right_speed) for command in source.robot_command
    ]


class TeamReceiver:
    """Reads the latest command packet of one team from a unicast UDP endpoint."""

    def __init__(
        self,
        receiver_address: str,
        receiver_port: int,
        is_yellow: bool,
        force_specific_source: bool = False,
        teams_formation: TeamsFormation = TeamsFormation.THREE_ROBOTS_PER_TEAM,
    ) -> None:
        self._receiver = UnicastReceiver(receiver_address, receiver_port)
        self._receiver.force_specific_source(force_specific_source)
        self.is_yellow = bool(is_yellow)
        self._last = TeamCommand(teams_formation)

    @property
    def local_endpoint(self) -> tuple[str, int]:
        return self._receiver.local_endpoint

    @property
    def _name(self) -> str:
        return "Yellow" if self.is_yellow else "Blue"

    def receive(self, team_command: TeamCommand) -> bool:
        """Update ``team_command`` from the newest packet.

        Returns True when a new command arrived; otherwise ``team_command``
        is set back to the last command received and False is returned.
        """
        try:
            data = self._receiver.receive_latest(BUFFER_SIZE)
        except (OSError, SourceError) as error:
            logger.error("%s team receiver: %s", self._name, error)
            return False

        packet = None
        if data:
            try:
                packet = Packet.decode(data)
            except DecodeError as error:
                logger.warning("%s team receiver: %s", self._name, error)

        if packet is not None and packet.cmd is not None:
            self.apply_packet(packet, team_command)
            self._last = copy.deepcopy(team_command)
            return True

        _copy_into(team_command, self._last)
        return False

    def apply_packet(self, packet: Packet, team_command: TeamCommand) -> None:
        """Write this team's valid wheel speeds from ``packet`` into ``team_command``."""
        if packet.cmd is None:
            return
        for robot_cmd in packet.cmd.robot_commands:
            if robot_cmd.yellowteam != self.is_yellow:
                logger.warning(
                    "Error: Team %s receiver and command colors don't match!",
                    self._name.lower(),
                )
                continue

            robot_id = robot_cmd.id
            if not 0 <= robot_id < team_command.robots_per_team:
                logger.warning(
                    "Error: Invalid robot id in team receiver! Received id is %d and max id is %d",
                    robot_id,
                    team_command.robots_per_team,
                )
                continue

            if math.isnan(robot_cmd.wheel_left) or math.isnan(robot_cmd.wheel_right):
                logger.warning("Error: Invalid robot speed in team receiver!")
                continue

            command = team_command.robot_command[robot_id]
            command.left_speed = robot_cmd.wheel_left
            command.right_speed = robot_cmd.wheel_right

    def set_receiver_endpoint(self, receiver_address: str, receiver_port: int) -> None:
        self._receiver.set_receiver_endpoint(receiver_address, receiver_port)

    def force_specific_source(self, force_specific_source: bool) -> None:
        self._receiver.force_specific_source(force_specific_source)

    def reset(self) -> None:
        try:
            self._receiver.reset()
        except OSError as error:
            logger.error("%s team receiver: %s", self._name, error)

    def close(self) -> None:
        self._receiver.close()

    def __enter__(self) -> TeamReceiver:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()