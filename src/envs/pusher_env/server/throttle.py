# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Minimum delay between accepted inputs, so key repeat cannot flood the board."""

import time
from typing import Callable, Optional

from ..models import DEFAULT_INPUT_INTERVAL_MS


class InputThrottle:
    """
    Accepts an input only once ``interval_ms`` has passed since the last one.

    The first input is always accepted. ``clock`` returns seconds and defaults
    to ``time.monotonic``.
    """

    def __init__(
        self,
        interval_ms: float = DEFAULT_INPUT_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval_ms < 0:
            raise ValueError(f"interval_ms must not be negative, got {interval_ms}")
        self.interval_ms = interval_ms
        self._clock = clock
        self._last: Optional[float] = None

    def ready(self, now: Optional[float] = None) -> bool:
        if self._last is None:
            return True
        now = self._clock() if now is None else now
        return (now - self._last) * 1000.0 >= self.interval_ms

    def accept(self, now: Optional[float] = None) -> None:
        self._last = self._clock() if now is None else now

    def reset(self) -> None:
        self._last = None
