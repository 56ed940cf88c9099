# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Box Pusher Environment - A Sokoban-style box pushing puzzle."""

from .client import PusherEnv, StepResult
from .decoder import decode, decode_text
from .errors import DecodeError, GameStateError, LevelLoadError, LevelNotFoundError, PusherError
from .models import (
    Direction,
    GameStatus,
    Level,
    MoveOutcome,
    Position,
    PusherAction,
    PusherObservation,
    PusherState,
    TileKind,
)

__all__ = [
    "DecodeError",
    "Direction",
    "GameStateError",
    "GameStatus",
    "Level",
    "LevelLoadError",
    "LevelNotFoundError",
    "MoveOutcome",
    "Position",
    "PusherAction",
    "PusherEnv",
    "PusherError",
    "PusherObservation",
    "PusherState",
    "StepResult",
    "TileKind",
    "decode",
    "decode_text",
]
