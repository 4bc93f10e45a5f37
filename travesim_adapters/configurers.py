"""Runtime-reconfigurable settings for the replacer, teams and vision adapters."""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from .configurers_utils import IPValidation, check_valid_ip, get_error_msg

__all__ = [
    "TeamColor",
    "ReplacerConfig",
    "TeamsConfig",
    "VisionConfig",
    "AdapterConfigurer",
    "ReplacerConfigurer",
    "TeamsConfigurer",
    "VisionConfigurer",
    "INVALID_ADDRESS",
    "MIN_UNICAST_ADDRESS",
    "MAX_UNICAST_ADDRESS",
    "MIN_MULTICAST_ADDRESS",
    "MAX_MULTICAST_ADDRESS",
]

logger = logging.getLogger(__name__)

INVALID_ADDRESS = "0.0.0.0"
MIN_UNICAST_ADDRESS = "0.0.0.0"
MAX_UNICAST_ADDRESS = "255.255.255.255"
MIN_MULTICAST_ADDRESS = "224.0.0.0"
MAX_MULTICAST_ADDRESS = "239.255.255.255"


class TeamColor(Enum):
    YELLOW = "yellow"
    BLUE = "blue"


@dataclass
class ReplacerConfig:
    replacer_address: str = "127.0.0.1"
    replacer_port: int = 20013
    specific_source: bool = True
    reset: bool = False


@dataclass
class TeamsConfig:
    yellow_team_address: str = "127.0.0.1"
    yellow_team_port: int = 20011
    blue_team_address: str = "127.0.0.1"
    blue_team_port: int = 20012
    specific_source: bool = True
    reset: bool = False


@dataclass
class VisionConfig:
    multicast_address: str = "224.0.0.1"
    multicast_port: int = 10002
    reset: bool = False


ConfigT = TypeVar("ConfigT", ReplacerConfig, TeamsConfig, VisionConfig)


class AdapterConfigurer(Generic[ConfigT]):
    """Thread-safe holder of an adapter configuration that may change at runtime."""

    def __init__(self, config: ConfigT) -> None:
        self._lock = threading.RLock()
        self.config = config
        self.reconfigured = False

    def reconfigure(self, **kwargs) -> None:
        """Update configuration fields; marks the configurer as reconfigured."""
        known = {field.name for field in dataclasses.fields(self.config)}
        unknown = set(kwargs) - known
        if unknown:
            raise TypeError(f"unknown configuration fields: {', '.join(sorted(unknown))}")
        with self._lock:
            self.config = dataclasses.replace(self.config, **kwargs)
            self.reconfigured = True

    def consume_reset(self) -> bool:
        """Return whether a reset was requested since the last call, clearing it."""
        with self._lock:
            requested = self.config.reset or self.reconfigured
            self.config.reset = False
            self.reconfigured = False
            return requested

    def _reset_pending(self) -> bool:
        return bool(self.config.reset or self.reconfigured)

    def _validated(self, address: str, min_address: str, max_address: str) -> str:
        validation = check_valid_ip(address, min_address, max_address)
        if validation is IPValidation.VALID:
            return address
        logger.error(get_error_msg(validation))
        return INVALID_ADDRESS


class ReplacerConfigurer(AdapterConfigurer[ReplacerConfig]):
    """Configuration of the replacer receiver endpoint."""

    def __init__(self, config: ReplacerConfig | None = None) -> None:
        super().__init__(config if config is not None else ReplacerConfig())

    def address(self) -> str:
        with self._lock:
            return self._validated(
                self.config.replacer_address, MIN_UNICAST_ADDRESS, MAX_UNICAST_ADDRESS
            )

    def port(self) -> int:
        with self._lock:
            return self.config.replacer_port

    def specific_source(self) -> bool:
        with self._lock:
            return self.config.specific_source

    def __str__(self) -> str:
        with self._lock:
            return (
                f"Replacer Endpoint: {self.config.replacer_address}:{self.config.replacer_port}\n"
                f"Specific Source: {bool(self.config.specific_source)}\n"
                f"Reset: {self._reset_pending()}\n"
            )


class TeamsConfigurer(AdapterConfigurer[TeamsConfig]):
    """Configuration of both teams' command receiver endpoints."""

    def __init__(self, config: TeamsConfig | None = None) -> None:
        super().__init__(config if config is not None else TeamsConfig())

    def address(self, color: TeamColor) -> str:
        with self._lock:
            if color is TeamColor.YELLOW:
                address = self.config.yellow_team_address
            else:
                address = self.config.blue_team_address
            return self._validated(address, MIN_UNICAST_ADDRESS, MAX_UNICAST_ADDRESS)

    def port(self, color: TeamColor) -> int:
        with self._lock:
            if color is TeamColor.YELLOW:
                return self.config.yellow_team_port
            return self.config.blue_team_port

    def specific_source(self) -> bool:
        with self._lock:
            return self.config.specific_source

    def __str__(self) -> str:
        with self._lock:
            cfg = self.config
            return (
                f"Yellow Team Endpoint: {cfg.yellow_team_address}:{cfg.yellow_team_port}\n"
                f"Blue Team Endpoint: {cfg.blue_team_address}:{cfg.blue_team_port}\n"
                f"Specific Source: {bool(cfg.specific_source)}\n"
                f"Reset: {self._reset_pending()}\n"
            )


class VisionConfigurer(AdapterConfigurer[VisionConfig]):
    """Configuration of the vision multicast endpoint."""

    def __init__(self, config: VisionConfig | None = None) -> None:
        super().__init__(config if config is not None else VisionConfig())

    def address(self) -> str:
        with self._lock:
            return self._validated(
                self.config.multicast_address, MIN_MULTICAST_ADDRESS, MAX_MULTICAST_ADDRESS
            )

    def port(self) -> int:
        with self._lock:
            return self.config.multicast_port

    def __str__(self) -> str:
        with self._lock:
            return (
                f"Vision Endpoint: {self.config.multicast_address}:{self.config.multicast_port}\n"
                f"Reset: {self._reset_pending()}\n"
            )