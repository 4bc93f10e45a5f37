"""Simulator-to-referee protocol messages and their protocol buffer wire format."""

from __future__ import annotations

import dataclasses
import struct
from typing import Any, ClassVar, Iterator, NamedTuple

__all__ = [
    "DecodeError",
    "Ball",
    "Robot",
    "Frame",
    "Field",
    "Environment",
    "Command",
    "Commands",
    "BallReplacement",
    "RobotReplacement",
    "Replacement",
    "Packet",
]

_UINT32_MASK = 0xFFFFFFFF
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF
_ZERO_DOUBLE = bytes(8)

_VARINT = 0
_FIXED64 = 1
_LENGTH_DELIMITED = 2
_FIXED32 = 5

_WIRE_TYPES = {
    "double": _FIXED64,
    "uint32": _VARINT,
    "bool": _VARINT,
    "message": _LENGTH_DELIMITED,
}


class DecodeError(ValueError):
    """The bytes are not a valid encoding of the expected message."""


class _Spec(NamedTuple):
    number: int
    name: str
    kind: str
    repeated: bool = False
    message: type | None = None


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------


def _varint(value: int) -> bytes:
    value &= _UINT64_MASK
    out = bytearray()
    while True:
        bits = value & 0x7F
        value >>= 7
        if value:
            out.append(bits | 0x80)
        else:
            out.append(bits)
            return bytes(out)


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise DecodeError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & _UINT64_MASK, pos
        shift += 7
        if shift >= 70:
            raise DecodeError("varint too long")


def _take(data: bytes, pos: int, size: int) -> tuple[bytes, int]:
    end = pos + size
    if end > len(data):
        raise DecodeError("truncated field")
    return data[pos:end], end


def _wire_fields(data: bytes) -> Iterator[tuple[int, int, Any]]:
    pos = 0
    while pos < len(data):
        key, pos = _read_varint(data, pos)
        number, wire = key >> 3, key & 0x7
        if number == 0:
            raise DecodeError("invalid field number 0")
        if wire == _VARINT:
            value, pos = _read_varint(data, pos)
        elif wire == _FIXED64:
            value, pos = _take(data, pos, 8)
        elif wire == _LENGTH_DELIMITED:
            length, pos = _read_varint(data, pos)
            value, pos = _take(data, pos, length)
        elif wire == _FIXED32:
            value, pos = _take(data, pos, 4)
        else:
            raise DecodeError(f"unsupported wire type {wire}")
        yield number, wire, value


def _encode_item(spec: _Spec, item: Any) -> bytes | None:
    if spec.kind == "message":
        if item is None:
            return None
        body = _encode(item)
        return _varint(len(body)) + body
    if spec.kind == "double":
        packed = struct.pack("<d", float(item))
        return None if packed == _ZERO_DOUBLE else packed
    if spec.kind == "uint32":
        value = int(item) & _UINT32_MASK
        return _varint(value) if value else None
    return b"\x01" if item else None


def _encode(message: Any) -> bytes:
    out = bytearray()
    for spec in message._FIELDS:
        value = getattr(message, spec.name)
        items = value if spec.repeated else (value,)
        for item in items:
            payload = _encode_item(spec, item)
            if payload is None and not spec.repeated:
                continue
            if payload is None:
                payload = _varint(0)
            out += _varint((spec.number << 3) | _WIRE_TYPES[spec.kind])
            out += payload
    return bytes(out)


def _decode(cls: type, data: bytes) -> Any:
    specs = {spec.number: spec for spec in cls._FIELDS}
    values: dict[str, Any] = {}
    pending: dict[str, list[bytes]] = {}

    for number, wire, raw in _wire_fields(bytes(data)):
        spec = specs.get(number)
        if spec is None:
            continue
        if wire != _WIRE_TYPES[spec.kind]:
            raise DecodeError(f"wrong wire type {wire} for field {spec.name!r}")
        if spec.kind == "message":
            if spec.repeated:
                values.setdefault(spec.name, []).append(_decode(spec.message, raw))
            else:
                pending.setdefault(spec.name, []).append(raw)
        elif spec.kind == "double":
            values[spec.name] = struct.unpack("<d", raw)[0]
        elif spec.kind == "uint32":
            values[spec.name] = raw & _UINT32_MASK
        else:
            values[spec.name] = raw != 0

    # Repeated occurrences of a singular message merge, like parsing their concatenation.
    for name, chunks in pending.items():
        values[name] = _decode(specs_by_name(cls)[name].message, b"".join(chunks))

    return cls(**values)


def specs_by_name(cls: type) -> dict[str, _Spec]:
    return {spec.name: spec for spec in cls._FIELDS}


def _json_name(name: str) -> str:
    first, *rest = name.split("_")
    return first + "".join(part.capitalize() for part in rest)


def _to_dict(message: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for spec in message._FIELDS:
        value = getattr(message, spec.name)
        key = _json_name(spec.name)
        if spec.kind == "message":
            if spec.repeated:
                result[key] = [_to_dict(item) for item in value]
            elif value is not None:
                result[key] = _to_dict(value)
        else:
            result[key] = value
    return result


# ---------------------------------------------------------------------------
# Common messages
# ---------------------------------------------------------------------------


@dataclasses.dataclass
class Ball:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "x", "double"),
        _Spec(2, "y", "double"),
        _Spec(3, "z", "double"),
        _Spec(4, "vx", "double"),
        _Spec(5, "vy", "double"),
        _Spec(6, "vz", "double"),
    )


@dataclasses.dataclass
class Robot:
    robot_id: int = 0
    x: float = 0.0
    y: float = 0.0
    orientation: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    vorientation: float = 0.0

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "robot_id", "uint32"),
        _Spec(2, "x", "double"),
        _Spec(3, "y", "double"),
        _Spec(4, "orientation", "double"),
        _Spec(5, "vx", "double"),
        _Spec(6, "vy", "double"),
        _Spec(7, "vorientation", "double"),
    )


@dataclasses.dataclass
class Field:
    width: float = 0.0
    length: float = 0.0
    goal_width: float = 0.0
    goal_depth: float = 0.0
    center_radius: float = 0.0
    penalty_width: float = 0.0
    penalty_depth: float = 0.0
    penalty_point: float = 0.0

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "width", "double"),
        _Spec(2, "length", "double"),
        _Spec(3, "goal_width", "double"),
        _Spec(4, "goal_depth", "double"),
        _Spec(5, "center_radius", "double"),
        _Spec(6, "penalty_width", "double"),
        _Spec(7, "penalty_depth", "double"),
        _Spec(8, "penalty_point", "double"),
    )


@dataclasses.dataclass
class Frame:
    ball: Ball | None = None
    robots_yellow: list[Robot] = dataclasses.field(default_factory=list)
    robots_blue: list[Robot] = dataclasses.field(default_factory=list)

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "ball", "message", message=Ball),
        _Spec(2, "robots_yellow", "message", repeated=True, message=Robot),
        _Spec(3, "robots_blue", "message", repeated=True, message=Robot),
    )


@dataclasses.dataclass
class Environment:
    """Vision packet sent from the simulator to the teams."""

    step: int = 0
    frame: Frame | None = None
    field: Field | None = None
    goals_blue: int = 0
    goals_yellow: int = 0

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "step", "uint32"),
        _Spec(2, "frame", "message", message=Frame),
        _Spec(3, "field", "message", message=Field),
        _Spec(4, "goals_blue", "uint32"),
        _Spec(5, "goals_yellow", "uint32"),
    )

    def encode(self) -> bytes:
        """Serialize to the protocol buffer wire format."""
        return _encode(self)

    @classmethod
    def decode(cls, data: bytes) -> Environment:
        """Parse wire-format bytes; raises DecodeError on malformed input."""
        return _decode(cls, data)

    def to_dict(self) -> dict[str, Any]:
        """JSON-style mapping with camelCase keys and all scalar fields present."""
        return _to_dict(self)


# ---------------------------------------------------------------------------
# Team commands and replacement
# ---------------------------------------------------------------------------


@dataclasses.dataclass
class Command:
    id: int = 0
    yellowteam: bool = False
    wheel_left: float = 0.0
    wheel_right: float = 0.0

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "id", "uint32"),
        _Spec(2, "yellowteam", "bool"),
        _Spec(6, "wheel_left", "double"),
        _Spec(7, "wheel_right", "double"),
    )


@dataclasses.dataclass
class Commands:
    robot_commands: list[Command] = dataclasses.field(default_factory=list)

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "robot_commands", "message", repeated=True, message=Command),
    )


@dataclasses.dataclass
class BallReplacement:
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "x", "double"),
        _Spec(2, "y", "double"),
        _Spec(3, "vx", "double"),
        _Spec(4, "vy", "double"),
    )


@dataclasses.dataclass
class RobotReplacement:
    position: Robot | None = None
    yellowteam: bool = False
    turnon: bool = False

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "position", "message", message=Robot),
        _Spec(5, "yellowteam", "bool"),
        _Spec(6, "turnon", "bool"),
    )


@dataclasses.dataclass
class Replacement:
    ball: BallReplacement | None = None
    robots: list[RobotReplacement] = dataclasses.field(default_factory=list)

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "ball", "message", message=BallReplacement),
        _Spec(2, "robots", "message", repeated=True, message=RobotReplacement),
    )


@dataclasses.dataclass
class Packet:
    """Packet sent by a team: wheel commands and/or a replacement request."""

    cmd: Commands | None = None
    replace: Replacement | None = None

    _FIELDS: ClassVar[tuple[_Spec, ...]] = (
        _Spec(1, "cmd", "message", message=Commands),
        _Spec(2, "replace", "message", message=Replacement),
    )

    def encode(self) -> bytes:
        """Serialize to the protocol buffer wire format."""
        return _encode(self)

    @classmethod
    def decode(cls, data: bytes) -> Packet:
        """Parse wire-format bytes; raises DecodeError on malformed input."""
        return _decode(cls, data)