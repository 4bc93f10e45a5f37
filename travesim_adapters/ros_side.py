"""Conversions between simulator model messages and the local state types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .entity_state import EntityState, RobotState, Vector2D
from .field_state import FieldState
from .team_command import TeamsFormation

__all__ = [
    "BALL_NAME",
    "DEFAULT_ENTITY_NAME",
    "DEFAULT_REFERENCE_FRAME",
    "Point",
    "Vector3",
    "Quaternion",
    "Pose",
    "Twist",
    "ModelState",
    "ModelStates",
    "robot_name",
    "point_to_vector2d",
    "vector3_to_vector2d",
    "vector2d_to_vector3",
    "vector2d_to_point",
    "model_state_to_entity_state",
    "model_state_to_robot_state",
    "entity_state_to_model_state",
    "robot_state_to_model_state",
    "model_states_to_field_state",
]

BALL_NAME = "vss_ball"
DEFAULT_ENTITY_NAME = BALL_NAME
DEFAULT_REFERENCE_FRAME = "world"


def robot_name(color: str, index: int) -> str:
    """Model name of robot ``index`` of the team with the given colour."""
    return f"{color}_team/robot_{index}"


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Quaternion:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0


@dataclass
class Pose:
    position: Point = field(default_factory=Point)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass
class Twist:
    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)


@dataclass
class ModelState:
    model_name: str = ""
    pose: Pose = field(default_factory=Pose)
    twist: Twist = field(default_factory=Twist)
    reference_frame: str = ""


@dataclass
class ModelStates:
    name: list[str] = field(default_factory=list)
    pose: list[Pose] = field(default_factory=list)
    twist: list[Twist] = field(default_factory=list)


def _quaternion_to_theta(q: Quaternion) -> float:
    return math.atan2(2 * (q.w * q.z + q.x * q.y), 1 - 2 * (q.y * q.y + q.z * q.z))


def point_to_vector2d(point: Point) -> Vector2D:
    return Vector2D(point.x, point.y)


def vector3_to_vector2d(vector3: Vector3) -> Vector2D:
    return Vector2D(vector3.x, vector3.y)


def vector2d_to_vector3(vector2d: Vector2D) -> Vector3:
    return Vector3(vector2d.x, vector2d.y, 0.0)


def vector2d_to_point(vector2d: Vector2D, z: float = 0.0) -> Point:
    return Point(vector2d.x, vector2d.y, z)


def model_state_to_entity_state(model_state: ModelState) -> EntityState:
    """Project a model state onto the field plane."""
    return EntityState(
        position=point_to_vector2d(model_state.pose.position),
        angular_position=_quaternion_to_theta(model_state.pose.orientation),
        velocity=vector3_to_vector2d(model_state.twist.linear),
        angular_velocity=model_state.twist.angular.z,
    )


def model_state_to_robot_state(model_state: ModelState, is_yellow: bool = True, id: int = 0) -> RobotState:
    return RobotState.from_entity(model_state_to_entity_state(model_state), is_yellow, id)


def entity_state_to_model_state(entity_state: EntityState, z: float = 0.0) -> ModelState:
    """Build a model state at height ``z`` from a planar entity state."""
    half_angle = entity_state.angular_position / 2
    return ModelState(
        model_name=DEFAULT_ENTITY_NAME,
        pose=Pose(
            position=vector2d_to_point(entity_state.position, z),
            orientation=Quaternion(0.0, 0.0, math.sin(half_angle), math.cos(half_angle)),
        ),
        twist=Twist(
            linear=vector2d_to_vector3(entity_state.velocity),
            angular=Vector3(0.0, 0.0, entity_state.angular_velocity),
        ),
        reference_frame=DEFAULT_REFERENCE_FRAME,
    )


def robot_state_to_model_state(robot_state: RobotState, z: float = 0.0) -> ModelState:
    model_state = entity_state_to_model_state(robot_state, z)
    model_state.model_name = robot_name("yellow" if robot_state.is_yellow else "blue", robot_state.id)
    return model_state


def _assign(target: EntityState, source: EntityState) -> None:
    target.position = source.position
    target.angular_position = source.angular_position
    target.velocity = source.velocity
    target.angular_velocity = source.angular_velocity


def model_states_to_field_state(
    model_states: ModelStates,
    teams_formation: TeamsFormation = TeamsFormation.THREE_ROBOTS_PER_TEAM,
) -> FieldState:
    """Collect the ball and robot models into a field state; other models are ignored."""
    field_state = FieldState(teams_formation)

    lookup: dict[str, EntityState] = {BALL_NAME: field_state.ball}
    for index, (yellow, blue) in enumerate(zip(field_state.yellow_team, field_state.blue_team)):
        lookup[robot_name("yellow", index)] = yellow
        lookup[robot_name("blue", index)] = blue

    for name, pose, twist in zip(model_states.name, model_states.pose, model_states.twist):
        target = lookup.get(name)
        if target is None:
            continue
        model_state = ModelState(
            model_name=name, pose=pose, twist=twist, reference_frame=DEFAULT_REFERENCE_FRAME
        )
        _assign(target, model_state_to_entity_state(model_state))

    return field_state