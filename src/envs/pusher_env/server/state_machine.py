# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Puzzle state machine for the Box Pusher Environment.

Holds the board of one play session and advances it by one directional action
per tick. The player pushes at most one box per move and never pulls. A level
is won once no plain ``BOX`` tile remains; the machine then waits for the next
level to be loaded.
"""

import logging
from typing import Optional, Union

import numpy as np

from ..errors import GameStateError
from ..models import (
    BOX_KINDS,
    DEFAULT_GRID_SIZE,
    DEFAULT_LEVEL_COUNT,
    WALKABLE_KINDS,
    Direction,
    GameStatus,
    Level,
    MoveOutcome,
    Position,
    TileKind,
)

logger = logging.getLogger(__name__)


class PuzzleStateMachine:
    """
    Board state and movement rules for one play session.

    Lifecycle::

        AWAITING_LEVEL_LOAD --initialize--> IN_PROGRESS
        IN_PROGRESS --advance (not won)--> IN_PROGRESS
        IN_PROGRESS --advance (won)--> AWAITING_LEVEL_LOAD

    The level index starts at ``start_level`` and wraps from ``level_count``
    back to 1 on every win.

    Example:
        >>> machine = PuzzleStateMachine()
        >>> machine.initialize(decode(raw))
        >>> machine.queue_action(Direction.RIGHT)
        >>> machine.advance()
        <MoveOutcome.PUSHED: 'pushed'>
        >>> machine.is_won()
        False
    """

    def __init__(
        self,
        grid_size: int = DEFAULT_GRID_SIZE,
        level_count: int = DEFAULT_LEVEL_COUNT,
        start_level: int = 1,
    ):
        """
        Initialize an empty session waiting for its first level.

        Args:
            grid_size: Side length of the square board (default: 20)
            level_count: Number of levels before the index wraps to 1 (default: 50)
            start_level: Level index of the first level to load (default: 1)
        """
        if grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {grid_size}")
        if level_count <= 0:
            raise ValueError(f"level_count must be positive, got {level_count}")
        if not 1 <= start_level <= level_count:
            raise ValueError(f"start_level must be in [1, {level_count}], got {start_level}")

        self.grid_size = grid_size
        self.level_count = level_count

        self._grid = np.zeros((grid_size, grid_size), dtype=np.uint8)
        self._position = Position(0, 0)
        self._under_tile = TileKind.GROUND
        self._level = start_level
        self._status = GameStatus.AWAITING_LEVEL_LOAD
        self._pending: Optional[Direction] = None
        self._dirty = True
        self._moves_count = 0
        self._pushes_count = 0

    def initialize(self, level: Level) -> None:
        """
        Start playing a decoded level.

        Args:
            level: Level produced by the decoder

        Raises:
            GameStateError: If a level is already in progress or the level's
                board size does not match ``grid_size``
        """
        if self._status == GameStatus.IN_PROGRESS:
            raise GameStateError(f"Level {self._level} is already in progress")
        if level.grid.shape != (self.grid_size, self.grid_size):
            raise GameStateError(
                f"Level grid shape {level.grid.shape} does not match "
                f"{self.grid_size}x{self.grid_size} board"
            )

        self._grid = np.array(level.grid, dtype=np.uint8, copy=True)
        self._position = Position(*level.position)
        self._under_tile = TileKind.GROUND
        self._pending = None
        self._moves_count = 0
        self._pushes_count = 0
        self._status = GameStatus.IN_PROGRESS
        self._dirty = True
        logger.info(f"Level {self._level} started, player at {tuple(self._position)}")

    def queue_action(self, direction: Union[Direction, str]) -> None:
        """
        Record the next action, replacing any unconsumed one.

        Ignored unless a level is in progress.
        """
        if isinstance(direction, str):
            direction = Direction.from_name(direction)
        if self._status != GameStatus.IN_PROGRESS:
            return
        self._pending = direction

    def advance(self) -> MoveOutcome:
        """
        Apply the pending action, if any, and clear it.

        Returns:
            ``NONE`` when nothing was applied, ``REJECTED`` for a blocked move,
            ``MOVED`` or ``PUSHED`` for an accepted one
        """
        if self._status != GameStatus.IN_PROGRESS or self._pending is None:
            return MoveOutcome.NONE

        direction = self._pending
        self._pending = None
        outcome = self._step(direction)
        logger.debug(f"Level {self._level}: action={direction.name}, outcome={outcome.value}")

        if outcome.accepted and self.is_won():
            self._complete_level()
        return outcome

    def _step(self, direction: Direction) -> MoveOutcome:
        """Resolve a single move or push."""
        nxt = self._position.offset(direction)
        if not nxt.in_bounds(self.grid_size):
            return MoveOutcome.REJECTED

        target = int(self._grid[nxt.col, nxt.row])
        if target in WALKABLE_KINDS:
            self._grid[self._position.col, self._position.row] = self._under_tile
            self._under_tile = TileKind(target)
            self._grid[nxt.col, nxt.row] = direction.facing
            self._position = nxt
            self._moves_count += 1
            self._dirty = True
            return MoveOutcome.MOVED

        if target in BOX_KINDS:
            landing = nxt.offset(direction)
            if not landing.in_bounds(self.grid_size):
                return MoveOutcome.REJECTED
            beyond = int(self._grid[landing.col, landing.row])
            if beyond not in WALKABLE_KINDS:
                return MoveOutcome.REJECTED

            self._grid[self._position.col, self._position.row] = self._under_tile
            self._under_tile = TileKind.GROUND if target == TileKind.BOX else TileKind.TARGET
            self._grid[nxt.col, nxt.row] = direction.facing
            self._grid[landing.col, landing.row] = TileKind.BOX if beyond == TileKind.GROUND else TileKind.BOX_ON_TARGET
            self._position = nxt
            self._moves_count += 1
            self._pushes_count += 1
            self._dirty = True
            return MoveOutcome.PUSHED

        # Wall, blank or another player tile
        return MoveOutcome.REJECTED

    def _complete_level(self) -> None:
        finished = self._level
        self._level += 1
        if self._level > self.level_count:
            self._level = 1
        self._status = GameStatus.AWAITING_LEVEL_LOAD
        self._dirty = True
        logger.info(
            f"Level {finished} solved in {self._moves_count} moves "
            f"({self._pushes_count} pushes); next level {self._level}"
        )

    def is_won(self) -> bool:
        """True iff no uncovered box is left on the board."""
        return not np.any(self._grid == TileKind.BOX)

    def is_dirty(self) -> bool:
        return self._dirty

    def clear_dirty(self) -> None:
        self._dirty = False

    def current_level_index(self) -> int:
        return self._level

    def needs_level(self) -> bool:
        """True while the driver should fetch and ``initialize`` a level."""
        return self._status == GameStatus.AWAITING_LEVEL_LOAD

    def count(self, kind: TileKind) -> int:
        """Number of cells currently holding ``kind``."""
        return int(np.count_nonzero(self._grid == kind))

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the board, indexed ``[col, row]``."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    @property
    def position(self) -> Position:
        return self._position

    @property
    def under_tile(self) -> TileKind:
        return self._under_tile

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def pending_action(self) -> Optional[Direction]:
        return self._pending

    @property
    def moves_count(self) -> int:
        return self._moves_count

    @property
    def pushes_count(self) -> int:
        return self._pushes_count
