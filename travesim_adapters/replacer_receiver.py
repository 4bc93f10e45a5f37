"""Receiving replacement requests (robot and ball placement) from the teams."""

from __future__ import annotations

import logging

from .entity_state import EntityState, RobotState, Vector2D
from .messages import BallReplacement, DecodeError, Packet, Robot, RobotReplacement
from .receiver import BUFFER_SIZE, SourceError, UnicastReceiver

__all__ = [
    "ReplacerReceiver",
    "ball_replacement_to_entity_state",
    "robot_replacement_to_robot_state",
]

logger = logging.getLogger(__name__)


def ball_replacement_to_entity_state(ball: BallReplacement) -> EntityState:
    return EntityState(position=Vector2D(ball.x, ball.y), velocity=Vector2D(ball.vx, ball.vy))


def robot_replacement_to_robot_state(robot: RobotReplacement) -> RobotState:
    position = robot.position if robot.position is not None else Robot()
    return RobotState(
        Vector2D(position.x, position.y),
        position.orientation,
        Vector2D(position.vx, position.vy),
        position.vorientation,
        robot.yellowteam,
        position.robot_id,
    )


class ReplacerReceiver:
    """Reads replacement packets from a unicast UDP endpoint."""

    def __init__(
        self, receiver_address: str, receiver_port: int, force_specific_source: bool = False
    ) -> None:
        self._receiver = UnicastReceiver(receiver_address, receiver_port)
        self._receiver.force_specific_source(force_specific_source)

    @property
    def local_endpoint(self) -> tuple[str, int]:
        return self._receiver.local_endpoint

    def receive(self) -> list[EntityState] | None:
        """Return the requested states, robots first and the ball last.

        Returns None when no replacement packet was received.
        """
        try:
            data = self._receiver.receive(BUFFER_SIZE)
        except (OSError, SourceError) as error:
            logger.error("Replacer receiver: %s", error)
            return None

        if not data:
            return None

        try:
            packet = Packet.decode(data)
        except DecodeError as error:
            logger.warning("Replacer receiver: %s", error)
            return None

        if packet.replace is None:
            return None

        states: list[EntityState] = [
            robot_replacement_to_robot_state(robot) for robot in packet.replace.robots
        ]
        if packet.replace.ball is not None:
            states.append(ball_replacement_to_entity_state(packet.replace.ball))
        return states

    def set_receiver_endpoint(self, receiver_address: str, receiver_port: int) -> None:
        self._receiver.set_receiver_endpoint(receiver_address, receiver_port)

    def force_specific_source(self, force_specific_source: bool) -> None:
        self._receiver.force_specific_source(force_specific_source)

    def reset(self) -> None:
        try:
            self._receiver.reset()
        except OSError as error:
            logger.error("Replacer receiver: %s", error)

    def close(self) -> None:
        self._receiver.close()

    def __enter__(self) -> ReplacerReceiver:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()