# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Runtime settings for the Box Pusher server.

Every value has a constructor default; ``Settings.from_env`` overrides them
from ``PUSHER_*`` environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .models import DEFAULT_GRID_SIZE, DEFAULT_INPUT_INTERVAL_MS, DEFAULT_LEVEL_COUNT

BUNDLED_MAPS_DIR = Path(__file__).resolve().parent / "maps"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    """
    Configuration shared by the level store, the session and the server.

    Attributes:
        grid_size: Side length N of every board
        level_count: Levels before the index wraps back to 1
        input_interval_ms: Minimum delay between two accepted inputs
        maps_dir: Directory holding ``<index>.map`` files
        strict_decode: Fail on malformed maps instead of defaulting cells
        max_load_attempts: Consecutive failed loads before giving up
        log_level: Name of the root logging level
    """

    grid_size: int = DEFAULT_GRID_SIZE
    level_count: int = DEFAULT_LEVEL_COUNT
    input_interval_ms: float = DEFAULT_INPUT_INTERVAL_MS
    maps_dir: Path = field(default_factory=lambda: BUNDLED_MAPS_DIR)
    strict_decode: bool = False
    max_load_attempts: int = 5
    log_level: str = "INFO"

    def __post_init__(self):
        self.maps_dir = Path(self.maps_dir)
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.level_count <= 0:
            raise ValueError(f"level_count must be positive, got {self.level_count}")
        if self.input_interval_ms < 0:
            raise ValueError(f"input_interval_ms must not be negative, got {self.input_interval_ms}")
        if self.max_load_attempts <= 0:
            raise ValueError(f"max_load_attempts must be positive, got {self.max_load_attempts}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from ``PUSHER_*`` environment variables.

        When ``PUSHER_LEVEL_COUNT`` is unset, the level count is the number of
        consecutive maps found in the maps directory, or the default when the
        directory holds none.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            Settings instance

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        maps_dir = Path(env.get("PUSHER_MAPS_DIR") or BUNDLED_MAPS_DIR)

        level_count = _int(env, "PUSHER_LEVEL_COUNT")
        if level_count is None:
            level_count = count_maps(maps_dir) or DEFAULT_LEVEL_COUNT

        return cls(
            grid_size=_int(env, "PUSHER_GRID_SIZE", DEFAULT_GRID_SIZE),
            level_count=level_count,
            input_interval_ms=_float(env, "PUSHER_INPUT_INTERVAL_MS", DEFAULT_INPUT_INTERVAL_MS),
            maps_dir=maps_dir,
            strict_decode=_bool(env, "PUSHER_STRICT_DECODE"),
            max_load_attempts=_int(env, "PUSHER_MAX_LOAD_ATTEMPTS", 5),
            log_level=env.get("PUSHER_LOG_LEVEL", "INFO").upper(),
        )


def count_maps(directory: Path) -> int:
    """Number of consecutive ``1.map``, ``2.map``, ... files in ``directory``."""
    count = 0
    while (Path(directory) / f"{count + 1}.map").is_file():
        count += 1
    return count


def _int(env: Mapping[str, str], name: str, default: Optional[int] = None) -> Optional[int]:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def _bool(env: Mapping[str, str], name: str) -> bool:
    value = env.get(name, "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")
