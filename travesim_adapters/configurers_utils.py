"""Validation helpers for IPv4 addresses used by the configurers."""

from __future__ import annotations

import re
from enum import Enum

__all__ = ["IPValidation", "ipv4_string_to_uint", "check_valid_ip", "get_error_msg"]

_UINT_MAX = 0xFFFFFFFF
_BYTE_MAX = 0xFF
_NUMBER = re.compile(r"\s*([+-]?)(\d+)")
_SEPARATOR = re.compile(r"\s*(\S)")


class IPValidation(Enum):
    """Outcome of checking an IPv4 string against a range."""

    VALID = 0
    INVALID_FORMAT = 1
    INVALID_NUMBERS = 2
    OUT_OF_RANGE = 3


_ERROR_MESSAGES = {
    IPValidation.INVALID_FORMAT: "The IP string is wrong formatted.",
    IPValidation.INVALID_NUMBERS: "The numbers on the ip are not representable by 8 bits.",
    IPValidation.OUT_OF_RANGE: (
        "The IP is not in the specified range. Hover over the parameterto see the range."
    ),
}


def ipv4_string_to_uint(ip_string: str) -> tuple[int, int, int, int]:
    """Split a dotted IPv4 string into its four unsigned numbers.

    The numbers are not limited to 8 bits here; raises ValueError when the
    string is not four unsigned numbers separated by dots.
    """
    parts: list[int] = []
    pos = 0

    for index in range(4):
        if index:
            separator = _SEPARATOR.match(ip_string, pos)
            if separator is None or separator.group(1) != ".":
                raise ValueError(f"invalid IPv4 string: {ip_string!r}")
            pos = separator.end()

        number = _NUMBER.match(ip_string, pos)
        if number is None:
            raise ValueError(f"invalid IPv4 string: {ip_string!r}")

        value = int(number.group(2))
        if value > _UINT_MAX:
            raise ValueError(f"number out of range in IPv4 string: {ip_string!r}")
        if number.group(1) == "-":
            value = (-value) & _UINT_MAX

        parts.append(value)
        pos = number.end()

    if pos != len(ip_string):
        raise ValueError(f"trailing characters in IPv4 string: {ip_string!r}")

    return (parts[0], parts[1], parts[2], parts[3])


def _to_number(parts: tuple[int, int, int, int]) -> int:
    value = 0
    for part in parts:
        value = (value << 8) + part
    return value


def check_valid_ip(ip: str, min_ip: str, max_ip: str) -> IPValidation:
    """Check that ``ip`` is well formed and lies within ``[min_ip, max_ip]``."""
    try:
        ip_parts = ipv4_string_to_uint(ip)
        min_parts = ipv4_string_to_uint(min_ip)
        max_parts = ipv4_string_to_uint(max_ip)
    except ValueError:
        return IPValidation.INVALID_FORMAT

    if any(part > _BYTE_MAX for part in (*ip_parts, *min_parts, *max_parts)):
        return IPValidation.INVALID_NUMBERS

    ip_num = _to_number(ip_parts)
    if ip_num < _to_number(min_parts) or ip_num > _to_number(max_parts):
        return IPValidation.OUT_OF_RANGE

    return IPValidation.VALID


def get_error_msg(error: object) -> str:
    """Human readable description of a validation result."""
    return _ERROR_MESSAGES.get(error, "No error.")