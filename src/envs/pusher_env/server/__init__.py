# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Box Pusher server: state machine, level store and session driver."""

from .levels import LevelStore
from .pusher_environment import PusherEnvironment
from .state_machine import PuzzleStateMachine
from .throttle import InputThrottle

__all__ = ["InputThrottle", "LevelStore", "PusherEnvironment", "PuzzleStateMachine"]
