# travesim_adapters

This package connects a robot soccer simulator to the software that teams and
referees run. It uses only the standard library.

## What is in the package

| Module | Contents |
| --- | --- |
| `entity_state` | `Vector2D` (with `rotate(theta)`), `EntityState`, `RobotState` (with `RobotState.from_entity(entity_state, is_yellow, id)`) |
| `team_command` | `TeamsFormation` (`THREE_ROBOTS_PER_TEAM`, `FIVE_ROBOTS_PER_TEAM`), `RobotCommand`, `TeamCommand` |
| `field_state` | `FieldState`: the ball, both teams and a `time_step` |
| `ros_side` | Simulator model messages and converters (see below) |
| `sender` | `Sender`, `UnicastSender`, `MulticastSender` |
| `receiver` | `Receiver`, `UnicastReceiver`, `MulticastReceiver`, `SourceError` |
| `messages` | Wire messages: `Environment` for vision and `Packet` for team commands and replacements |
| `vision_sender` | `VisionSender` and `field_state_to_environment(field_state)` |
| `team_receiver` | `TeamReceiver` |
| `replacer_receiver` | `ReplacerReceiver`, `ball_replacement_to_entity_state`, `robot_replacement_to_robot_state` |
| `configurers_utils` | `IPValidation`, `ipv4_string_to_uint`, `check_valid_ip`, `get_error_msg` |
| `configurers` | `ReplacerConfigurer`, `TeamsConfigurer`, `VisionConfigurer`, and their config dataclasses |
| `cli` | The `travesim-adapters` command |

`str()` on the state and command classes gives a fixed-width text printout of
the object.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## State conversions

`travesim_adapters.ros_side` defines plain dataclasses for simulator model
messages: `Point`, `Vector3`, `Quaternion`, `Pose`, `Twist`, `ModelState` and
`ModelStates`. The following functions convert between those messages and the
local state types:

- `model_state_to_entity_state` and `model_state_to_robot_state`
- `entity_state_to_model_state` and `robot_state_to_model_state`
- `model_states_to_field_state`

Orientation quaternions are converted to planar angles, and planar angles to
quaternions. Robot models are named `yellow_team/robot_<n>` and
`blue_team/robot_<n>`. The ball model is named `vss_ball`.
`model_states_to_field_state` ignores any model with a different name.

```python
from travesim_adapters.entity_state import RobotState
from travesim_adapters.ros_side import robot_state_to_model_state

state = RobotState(is_yellow=False, id=1)
assert robot_state_to_model_state(state).model_name == "blue_team/robot_1"
```

## UDP transport

Sending works the same way for unicast and multicast:

- `Sender.send(data)` sends bytes to the configured endpoint and returns the
  number of bytes sent.
- `set_receiver_endpoint(address, port)` changes the destination.

Both sender types limit packets to a single hop.

Receivers never block:

- `receive()` returns one pending datagram, or `b""` if nothing is waiting.
- `receive_latest()` reads all pending datagrams and returns only the most
  recent one.

After `force_specific_source(True)`, a receiver accepts data only from the
first sender it sees. If another source sends to it, the receiver raises
`SourceError`.

`reset()` forgets the accepted source and reopens the socket. A new endpoint
set with `set_receiver_endpoint(...)` takes effect only at that point. The
same applies to a new multicast group set with
`MulticastReceiver.set_multicast_address(...)`.

All senders and receivers are context managers and have a `close()` method.

## Wire messages

`Environment` and `Packet` both have `encode()` and the class method
`decode(data)`. A malformed input raises `DecodeError`. `Environment.to_dict()`
returns a JSON-style mapping with camelCase keys.

```python
from travesim_adapters.field_state import FieldState
from travesim_adapters.messages import Environment
from travesim_adapters.vision_sender import field_state_to_environment

field_state = FieldState()
field_state.ball.position.x = 2.4
field_state.ball.velocity.y = 0.7

environment = field_state_to_environment(field_state)
payload = environment.encode()
assert Environment.decode(payload).to_dict() == environment.to_dict()
```

## Adapters

`VisionSender(address, port)` multicasts field states:

- `send(field_state)` returns `False` if nothing was sent.
- `set_multicast_endpoint(address, port)` changes the destination.

`TeamReceiver(address, port, is_yellow, force_specific_source, teams_formation)`
reads the latest command packet for one team.

- `receive(team_command)` fills in the wheel speeds and returns `True` when a
  new command arrives.
- When no new command arrives, it restores the last command received and
  returns `False`.
- Commands are skipped, with a logged warning, if they belong to the other
  team, have an out-of-range robot id, or have a NaN speed.

`ReplacerReceiver(address, port, force_specific_source)` reads replacement
requests. `receive()` returns a list of states: robots first (as
`RobotState`), then the ball (as `EntityState`). It returns `None` if no
replacement packet arrived.

## Configurers

`ReplacerConfigurer`, `TeamsConfigurer` and `VisionConfigurer` hold endpoint
settings. Each one wraps a dataclass (`ReplacerConfig`, `TeamsConfig`,
`VisionConfig`) with defaults, and is safe to use from several threads.

- `reconfigure(**fields)` updates the settings. An unknown field name raises
  `TypeError`.
- `consume_reset()` reports whether a reset was requested, or the
  configuration changed, since the last call, and clears that flag.
- `address()` validates the address before returning it. Unicast addresses may
  be anywhere in `0.0.0.0`–`255.255.255.255`. Multicast addresses must lie in
  `224.0.0.0`–`239.255.255.255`. An invalid address is logged and `"0.0.0.0"`
  is returned in its place.
- `TeamsConfigurer.address(color)` and `TeamsConfigurer.port(color)` take a
  `TeamColor`.

```python
from travesim_adapters.configurers_utils import IPValidation, check_valid_ip, get_error_msg

assert check_valid_ip("127.0.0.2", "127.0.0.0", "127.255.255.0") is IPValidation.VALID
print(get_error_msg(check_valid_ip("224.0.0.2", "127.0.0.0", "127.255.255.0")))
# The IP is not in the specified range. Hover over the parameterto see the range.
```

## Command line

```
travesim-adapters --help
```

The command has these subcommands:

- `udp-send [--multicast] [--address A] [--port P] [--count N] [--interval S]`
  sends numbered text datagrams.
- `udp-receive [--multicast] [--address A] [--port P] [--loops N] [--interval S]`
  prints received datagrams.
- `team-receive [--address A] [--port P] [--loops N] [--interval S]` prints
  yellow team commands.
- `replacer-receive [--address A] [--port P] [--loops N] [--interval S]`
  prints replacement requests.
- `vision-demo` prints a sample vision packet as JSON.

The receiving subcommands loop forever unless you give `--loops`.

## What the package does not do

The package does not connect to the simulator itself. It has no long-running
vision, teams or replacer adapter services. It does not subscribe to the
simulator's model states. It does not publish wheel commands to the robots,
and it does not place models or pause the physics in the simulator.

The configurers are not linked to any parameter server. Your program changes
their settings by calling `reconfigure`.