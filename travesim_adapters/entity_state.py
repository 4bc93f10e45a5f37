"""Planar state of the ball and the robots."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

__all__ = [
    "PRINTING_DECIMAL_PRECISION",
    "PRINTING_MIN_WIDTH",
    "Vector2D",
    "EntityState",
    "RobotState",
]

PRINTING_DECIMAL_PRECISION = 3
PRINTING_MIN_WIDTH = 7


def format_number(value: float) -> str:
    """Fixed-point text used by the state printouts."""
    return f"{value:{PRINTING_MIN_WIDTH}.{PRINTING_DECIMAL_PRECISION}f}"


@dataclass
class Vector2D:
    x: float = 0.0
    y: float = 0.0

    def rotate(self, theta: float) -> None:
        """Rotate the coordinate frame by ``theta`` radians, in place."""
        old_x, old_y = self.x, self.y
        self.x = math.cos(theta) * old_x + math.sin(theta) * old_y
        self.y = -math.sin(theta) * old_x + math.cos(theta) * old_y

    def __str__(self) -> str:
        return f"X: {format_number(self.x)} | Y: {format_number(self.y)}"


@dataclass
class EntityState:
    position: Vector2D = field(default_factory=Vector2D)
    angular_position: float = 0.0
    velocity: Vector2D = field(default_factory=Vector2D)
    angular_velocity: float = 0.0

    def _motion_text(self) -> str:
        return (
            f"POSITION: {self.position} | THETA: {format_number(self.angular_position)}\n"
            f"VELOCITY: {self.velocity} | THETA: {format_number(self.angular_velocity)}\n"
        )

    def __str__(self) -> str:
        return self._motion_text()


@dataclass
class RobotState(EntityState):
    is_yellow: bool = True
    id: int = 0

    @classmethod
    def from_entity(cls, entity_state: EntityState, is_yellow: bool, id: int) -> RobotState:
        """Build a robot state from an entity state and team data."""
        return cls(
            Vector2D(entity_state.position.x, entity_state.position.y),
            entity_state.angular_position,
            Vector2D(entity_state.velocity.x, entity_state.velocity.y),
            entity_state.angular_velocity,
            is_yellow,
            id,
        )

    def __str__(self) -> str:
        return (
            f"TEAM YELLOW: {int(self.is_yellow)}\n"
            f"ROBOT ID: {self.id}\n"
            + self._motion_text()
        )