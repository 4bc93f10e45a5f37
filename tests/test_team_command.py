import pytest

from travesim_adapters.team_command import RobotCommand, TeamCommand, TeamsFormation


@pytest.mark.parametrize("formation", list(TeamsFormation))
def test_team_has_one_command_per_robot(formation):
    command = TeamCommand(formation)
    assert command.robots_per_team == int(formation)
    assert len(command.robot_command) == int(formation)
    assert all(robot == RobotCommand() for robot in command.robot_command)


def test_default_formation_is_three():
    assert TeamCommand().robots_per_team == TeamsFormation.THREE_ROBOTS_PER_TEAM


def test_robot_commands_are_independent():
    command = TeamCommand()
    command.robot_command[0].left_speed = 1.5
    assert command.robot_command[1].left_speed == 0.0


def test_invalid_formation_rejected():
    with pytest.raises(ValueError):
        TeamCommand(4)


def test_robot_command_str_lines():
    lines = str(RobotCommand(1.0, -2.0)).splitlines()
    assert lines[0].startswith("LEFT SPEED: ")
    assert lines[1].startswith("RIGHT SPEED: ")
    assert len(lines) == 2


def test_team_command_str_lists_every_robot():
    command = TeamCommand(TeamsFormation.FIVE_ROBOTS_PER_TEAM)
    text = str(command)
    assert text.count("ROBOT ") == command.robots_per_team
    assert text.index("ROBOT 0:") < text.index("ROBOT 4:")
    assert text.endswith("\n\n")