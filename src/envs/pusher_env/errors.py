# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Exceptions raised by the Box Pusher Environment."""

from typing import Sequence


class PusherError(Exception):
    """Base class for all Box Pusher errors."""


class DecodeError(PusherError, ValueError):
    """Raw level data could not be turned into a level."""

    def __init__(self, message: str, warnings: Sequence[str] = ()):
        super().__init__(message)
        self.warnings = tuple(warnings)


class GameStateError(PusherError, RuntimeError):
    """An operation was requested in a state that does not allow it."""


class LevelLoadError(PusherError):
    """A level could not be fetched."""


class LevelNotFoundError(LevelLoadError, FileNotFoundError):
    """No map file exists for the requested level index."""
