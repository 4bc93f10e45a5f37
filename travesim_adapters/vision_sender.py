"""Publishing the field state as vision packets over UDP multicast."""

from __future__ import annotations

import logging

from .entity_state import EntityState
from .field_state import FieldState
from .messages import Ball, Environment, Field, Frame, Robot
from .sender import MulticastSender

__all__ = [
    "FIELD_WIDTH_M",
    "FIELD_LENGTH_M",
    "GOAL_WIDTH_M",
    "GOAL_DEPTH_M",
    "VisionSender",
    "field_state_to_environment",
]

logger = logging.getLogger(__name__)

FIELD_WIDTH_M = 1.3
FIELD_LENGTH_M = 1.5
GOAL_WIDTH_M = 0.4
GOAL_DEPTH_M = 0.1


def _robots(team: list[EntityState]) -> list[Robot]:
    return [
        Robot(
            robot_id=index,
            x=state.position.x,
            y=state.position.y,
            orientation=state.angular_position,
            vx=state.velocity.x,
            vy=state.velocity.y,
            vorientation=state.angular_velocity,
        )
        for index, state in enumerate(team)
    ]


def field_state_to_environment(field_state: FieldState) -> Environment:
    """Build the vision packet describing ``field_state``."""
    ball = field_state.ball
    frame = Frame(
        ball=Ball(x=ball.position.x, y=ball.position.y, vx=ball.velocity.x, vy=ball.velocity.y),
        robots_yellow=_robots(field_state.yellow_team),
        robots_blue=_robots(field_state.blue_team),
    )
    return Environment(
        step=field_state.time_step & 0xFFFFFFFF,
        frame=frame,
        field=Field(
            width=FIELD_WIDTH_M,
            length=FIELD_LENGTH_M,
            goal_width=GOAL_WIDTH_M,
            goal_depth=GOAL_DEPTH_M,
        ),
    )


class VisionSender:
    """Sends field states as encoded vision packets to a multicast endpoint."""

    def __init__(self, multicast_address: str, multicast_port: int) -> None:
        self._sender = MulticastSender(multicast_address, multicast_port)

    def send(self, field_state: FieldState) -> bool:
        """Send one packet; returns False when nothing was sent."""
        data = field_state_to_environment(field_state).encode()
        if self._sender.send(data) == 0:
            logger.warning("Error sending vision protobuff message")
            return False
        return True

    def set_multicast_endpoint(self, multicast_address: str, multicast_port: int) -> None:
        self._sender.set_receiver_endpoint(multicast_address, multicast_port)

    def close(self) -> None:
        self._sender.close()

    def __enter__(self) -> VisionSender:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()