"""Wheel speed commands for a team of robots."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .entity_state import format_number

__all__ = ["TeamsFormation", "RobotCommand", "TeamCommand"]


class TeamsFormation(IntEnum):
    THREE_ROBOTS_PER_TEAM = 3
    FIVE_ROBOTS_PER_TEAM = 5


@dataclass
class RobotCommand:
    left_speed: float = 0.0
    right_speed: float = 0.0

    def __str__(self) -> str:
        return (
            f"LEFT SPEED: {format_number(self.left_speed)}\n"
            f"RIGHT SPEED: {format_number(self.right_speed)}"
        )


@dataclass
class TeamCommand:
    teams_formation: TeamsFormation = TeamsFormation.THREE_ROBOTS_PER_TEAM
    robot_command: list[RobotCommand] = field(init=False)

    def __post_init__(self) -> None:
        self.teams_formation = TeamsFormation(self.teams_formation)
        self.robot_command = [RobotCommand() for _ in range(self.robots_per_team)]

    @property
    def robots_per_team(self) -> int:
        return int(self.teams_formation)

    def __str__(self) -> str:
        return "".join(
            f"ROBOT {index}:\n{command}\n\n" for index, command in enumerate(self.robot_command)
        )