# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Box Pusher Environment Implementation.

Drives a ``PuzzleStateMachine``: fetches levels from a ``LevelStore`` whenever
the machine asks for one, throttles directional input and produces
observations for whoever renders the board.
"""

import logging
import time
from typing import Callable, List, Optional, Union
from uuid import uuid4

import numpy as np

from ..config import Settings
from ..errors import DecodeError, LevelLoadError
from ..models import (
    Direction,
    MoveOutcome,
    PusherAction,
    PusherObservation,
    PusherState,
    TileKind,
)
from .levels import LevelStore
from .state_machine import PuzzleStateMachine
from .throttle import InputThrottle

logger = logging.getLogger(__name__)

InputListener = Callable[[Direction], None]


class PusherEnvironment:
    """
    Box pusher play session.

    Levels are loaded lazily: every ``tick`` retries the pending load until it
    succeeds or ``settings.max_load_attempts`` consecutive attempts fail.
    Accepted key presses notify input listeners, which is where a frontend
    plays its feedback sound.

    Example:
        >>> env = PusherEnvironment(settings=Settings(input_interval_ms=0))
        >>> obs = env.reset()
        >>> print(f"Level {obs.level}, player at {obs.player_position}")
        >>>
        >>> obs = env.step(PusherAction(direction="right"))
        >>> print(f"Boxes on targets: {obs.boxes_on_targets}/{obs.num_boxes}")
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[LevelStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the environment.

        Args:
            settings: Runtime settings (default: ``Settings()``)
            store: Level source (default: a ``LevelStore`` on ``settings.maps_dir``)
            clock: Time source in seconds, used by the input throttle
        """
        self.settings = settings or Settings()
        self.store = store or LevelStore(
            self.settings.maps_dir,
            grid_size=self.settings.grid_size,
            strict=self.settings.strict_decode,
        )
        self.throttle = InputThrottle(self.settings.input_interval_ms, clock=clock)

        self._listeners: List[InputListener] = []
        self._state = PusherState(episode_id=str(uuid4()))
        self._failed_loads = 0
        self._just_solved = False
        self._machine = self._new_machine(1)

        logger.info(
            f"PusherEnvironment initialized with grid_size={self.settings.grid_size}, "
            f"level_count={self.settings.level_count}, maps_dir={self.settings.maps_dir}"
        )

    def _new_machine(self, level: int) -> PuzzleStateMachine:
        return PuzzleStateMachine(
            grid_size=self.settings.grid_size,
            level_count=self.settings.level_count,
            start_level=level,
        )

    @property
    def machine(self) -> PuzzleStateMachine:
        return self._machine

    def add_input_listener(self, callback: InputListener) -> None:
        """Register a callback run for every accepted key press."""
        self._listeners.append(callback)

    def tick(self) -> bool:
        """
        Load the next level if the state machine is waiting for one.

        Returns:
            True if a level is in progress after the tick

        Raises:
            LevelLoadError: After ``max_load_attempts`` consecutive failures
        """
        if not self._machine.needs_level():
            return True

        index = self._machine.current_level_index()
        try:
            level = self.store.load(index)
        except (LevelLoadError, DecodeError) as e:
            self._failed_loads += 1
            if self._failed_loads >= self.settings.max_load_attempts:
                logger.error(f"Giving up on level {index} after {self._failed_loads} attempts: {e}")
                self._failed_loads = 0
                raise LevelLoadError(f"Could not load level {index}: {e}") from e
            logger.warning(f"Loading level {index} failed (attempt {self._failed_loads}): {e}")
            return False

        self._failed_loads = 0
        self._machine.initialize(level)
        self._state.level = index
        return True

    def press(self, direction: Union[Direction, str], now: Optional[float] = None) -> MoveOutcome:
        """
        Handle one directional key press.

        Presses arriving before the input interval has elapsed are dropped and
        report ``NONE``.

        Args:
            direction: Direction or its name
            now: Clock reading to use instead of the throttle's clock

        Returns:
            Outcome of the move
        """
        if isinstance(direction, str):
            direction = Direction.from_name(direction)
        if not self.tick():
            return MoveOutcome.NONE
        if not self.throttle.ready(now):
            logger.debug(f"Dropped {direction.name}: input interval not elapsed")
            return MoveOutcome.NONE

        level = self._machine.current_level_index()
        self._machine.queue_action(direction)
        self.throttle.accept(now)
        for listener in self._listeners:
            listener(direction)

        outcome = self._machine.advance()
        self._state.step_count += 1

        if self._machine.needs_level():
            self._just_solved = True
            self._state.levels_completed += 1
            logger.info(f"Episode {self._state.episode_id} completed level {level}")
            # The move already happened; a failed load is retried on the next tick.
            try:
                self.tick()
            except LevelLoadError as e:
                logger.error(f"Next level after {level} is unavailable: {e}")
        return outcome

    def reset(self, level: Optional[int] = None) -> PusherObservation:
        """
        Start a new episode.

        Args:
            level: Level index to start from (default: the current one)

        Returns:
            PusherObservation of the freshly loaded level
        """
        start = self._machine.current_level_index() if level is None else level
        self._machine = self._new_machine(start)
        self._state = PusherState(episode_id=str(uuid4()), level=start)
        self._failed_loads = 0
        self._just_solved = False
        self.throttle.reset()
        logger.info(f"Environment reset at level {start}. New episode ID: {self._state.episode_id}")

        self.tick()
        return self.observe()

    def step(self, action: PusherAction) -> PusherObservation:
        """
        Apply a ``PusherAction`` and return the updated observation.

        The move outcome is reported in ``metadata["outcome"]``.
        """
        outcome = self.press(action.direction)
        observation = self.observe()
        observation.metadata["outcome"] = outcome.value
        return observation

    def observe(self) -> PusherObservation:
        """
        Snapshot the board for rendering and acknowledge the dirty flag.

        ``is_solved`` reports a level completed since the previous observation.
        """
        machine = self._machine
        # Top row first, matching the map file layout.
        board = np.flip(machine.grid.T, axis=0)
        observation = PusherObservation(
            board=[int(cell) for cell in board.ravel()],
            board_shape=[machine.grid_size, machine.grid_size],
            player_position=list(machine.position),
            under_tile=int(machine.under_tile),
            level=machine.current_level_index(),
            status=machine.status.value,
            num_boxes=machine.count(TileKind.BOX) + machine.count(TileKind.BOX_ON_TARGET),
            boxes_on_targets=machine.count(TileKind.BOX_ON_TARGET),
            moves_count=machine.moves_count,
            pushes_count=machine.pushes_count,
            is_solved=self._just_solved,
            changed=machine.is_dirty(),
            metadata={
                "step": self._state.step_count,
                "levels_completed": self._state.levels_completed,
            },
        )
        machine.clear_dirty()
        self._just_solved = False
        return observation

    @property
    def state(self) -> PusherState:
        """
        Get the current session state.

        Returns:
            PusherState with episode id, step count, level and status
        """
        self._state.level = self._machine.current_level_index()
        self._state.status = self._machine.status.value
        return self._state
