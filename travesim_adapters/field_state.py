"""Full state of the field: ball and both teams."""

from __future__ import annotations

from dataclasses import dataclass, field

from .entity_state import EntityState
from .team_command import TeamsFormation

__all__ = ["FieldState"]


@dataclass
class FieldState:
    teams_formation: TeamsFormation = TeamsFormation.THREE_ROBOTS_PER_TEAM
    ball: EntityState = field(default_factory=EntityState)
    time_step: int = 0
    yellow_team: list[EntityState] = field(init=False)
    blue_team: list[EntityState] = field(init=False)

    def __post_init__(self) -> None:
        self.teams_formation = TeamsFormation(self.teams_formation)
        self.yellow_team = [EntityState() for _ in range(self.robots_per_team)]
        self.blue_team = [EntityState() for _ in range(self.robots_per_team)]

    @property
    def robots_per_team(self) -> int:
        return int(self.teams_formation)

    @staticmethod
    def _team_text(team: list[EntityState]) -> str:
        return "".join(f"ROBOT {index}:\n{state}\n" for index, state in enumerate(team))

    def __str__(self) -> str:
        return (
            f"TIME STEP: \n{self.time_step}\n"
            f"BALL STATE: \n{self.ball}\n"
            f"TEAM YELLOW STATE: \n{self._team_text(self.yellow_team)}\n"
            f"TEAM BLUE STATE: \n{self._team_text(self.blue_team)}\n"
        )