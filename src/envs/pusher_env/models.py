# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Data models for the Box Pusher Environment.

The board is a square grid of tile codes addressed as ``grid[col, row]`` with
row 0 at the bottom. The player is not a separate entity: it is one of the four
player-facing tile kinds at its cell, and the tile underneath it is tracked by
the state machine.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import numpy as np


DEFAULT_GRID_SIZE = 20
DEFAULT_LEVEL_COUNT = 50
DEFAULT_INPUT_INTERVAL_MS = 200


class TileKind(IntEnum):
    """Tile codes, identical to the digits used in ``.map`` files."""

    BLANK = 0
    WALL = 1
    GROUND = 2
    BOX = 3
    TARGET = 4
    PLAYER_DOWN = 5
    PLAYER_RIGHT = 6
    PLAYER_LEFT = 7
    PLAYER_UP = 8
    BOX_ON_TARGET = 9


PLAYER_KINDS = frozenset(
    {TileKind.PLAYER_DOWN, TileKind.PLAYER_RIGHT, TileKind.PLAYER_LEFT, TileKind.PLAYER_UP}
)
WALKABLE_KINDS = frozenset({TileKind.GROUND, TileKind.TARGET})
BOX_KINDS = frozenset({TileKind.BOX, TileKind.BOX_ON_TARGET})


class Direction(Enum):
    """Unit moves on the board. ``+y`` points up."""

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, 1)
    DOWN = (0, -1)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @property
    def facing(self) -> TileKind:
        # Moving along +x draws the "left" sprite and -x the "right" one.
        return _FACING[self]

    @staticmethod
    def from_name(name: str) -> "Direction":
        try:
            return Direction[name.strip().upper()]
        except (KeyError, AttributeError) as exc:
            raise ValueError(f"Unknown direction: {name!r}") from exc


_FACING = {
    Direction.RIGHT: TileKind.PLAYER_LEFT,
    Direction.LEFT: TileKind.PLAYER_RIGHT,
    Direction.UP: TileKind.PLAYER_UP,
    Direction.DOWN: TileKind.PLAYER_DOWN,
}


class Position(NamedTuple):
    """A ``(col, row)`` cell coordinate."""

    col: int
    row: int

    def offset(self, direction: Direction) -> "Position":
        dx, dy = direction.vector
        return Position(self.col + dx, self.row + dy)

    def in_bounds(self, size: int) -> bool:
        return 0 <= self.col < size and 0 <= self.row < size


class GameStatus(str, Enum):
    AWAITING_LEVEL_LOAD = "awaiting_level_load"
    IN_PROGRESS = "in_progress"


class MoveOutcome(str, Enum):
    """Result of a single ``advance`` call."""

    NONE = "none"
    REJECTED = "rejected"
    MOVED = "moved"
    PUSHED = "pushed"

    @property
    def accepted(self) -> bool:
        return self in (MoveOutcome.MOVED, MoveOutcome.PUSHED)


@dataclass(frozen=True, eq=False)
class Level:
    """
    A decoded level, consumed once to initialize the state machine.

    Attributes:
        grid: Read-only ``uint8`` array of tile codes, indexed ``[col, row]``
        position: Player starting cell
        warnings: Problems tolerated while decoding (bad digits, short rows,
            missing or duplicated player marker)
    """

    grid: np.ndarray
    position: Position
    warnings: Tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return int(self.grid.shape[0])


@dataclass(kw_only=True)
class PusherAction:
    """
    Action for the Box Pusher environment.

    Attributes:
        direction: The direction to move ("up", "down", "left", "right")
    """

    direction: str


@dataclass(kw_only=True)
class PusherObservation:
    """
    Observation of the Box Pusher board.

    Attributes:
        board: Tile codes flattened row by row, top row first, so that
            ``board[i * width + j]`` matches column ``j`` of line ``i`` in the
            ``.map`` file
        board_shape: Shape of the board (height, width)
        player_position: (col, row) position of the player, row 0 at the bottom
        under_tile: Tile code beneath the player
        level: Current level index (1-based)
        status: Game status tag
        num_boxes: Boxes on the board, on or off targets
        boxes_on_targets: Boxes currently covering a target
        moves_count: Accepted moves in the current level
        pushes_count: Accepted pushes in the current level
        is_solved: Whether the last level played was just completed
        changed: Whether the board changed since the previous observation
    """

    board: List[int]
    board_shape: List[int]
    player_position: List[int]
    under_tile: int
    level: int
    status: str
    num_boxes: int = 0
    boxes_on_targets: int = 0
    moves_count: int = 0
    pushes_count: int = 0
    is_solved: bool = False
    changed: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PusherState:
    """Session bookkeeping returned by ``/state``."""

    episode_id: Optional[str] = None
    step_count: int = 0
    level: int = 1
    status: str = GameStatus.AWAITING_LEVEL_LOAD.value
    levels_completed: int = 0
