# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Box Pusher Environment HTTP Client.

This module provides the client for connecting to a Box Pusher Environment
server over HTTP.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

import requests

from .models import PusherAction, PusherObservation, PusherState

logger = logging.getLogger(__name__)

ObsT = TypeVar("ObsT")


@dataclass
class StepResult(Generic[ObsT]):
    observation: ObsT
    done: bool = False
    outcome: Optional[str] = None


class PusherEnv:
    """
    HTTP client for the Box Pusher Environment.

    This client connects to a Box Pusher Environment HTTP server and provides
    methods to interact with it: reset(), step(), and state access.

    Example:
        >>> # Connect to a running server
        >>> client = PusherEnv(base_url="http://localhost:8000")
        >>> result = client.reset()
        >>> print(f"Level: {result.observation.level}")
        >>> print(f"Number of boxes: {result.observation.num_boxes}")
        >>>
        >>> # Make a move
        >>> result = client.step(PusherAction(direction="up"))
        >>> print(f"Boxes on targets: {result.observation.boxes_on_targets}")
        >>> print(f"Level solved: {result.done}")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def reset(self, level: Optional[int] = None) -> StepResult[PusherObservation]:
        """Start a new episode, optionally at a given level."""
        payload = {"level": level} if level is not None else {}
        return self._parse_result(self._post("/reset", payload))

    def step(self, action: PusherAction) -> StepResult[PusherObservation]:
        """Send one move to the server."""
        return self._parse_result(self._post("/step", {"action": self._step_payload(action)}))

    def state(self) -> PusherState:
        response = self._session.get(f"{self.base_url}/state", timeout=self.timeout)
        response.raise_for_status()
        return self._parse_state(response.json())

    def close(self) -> None:
        self._session.close()

    def _post(self, path: str, payload: Dict) -> Dict:
        response = self._session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        if response.status_code >= 400:
            logger.error(f"POST {path} failed with {response.status_code}: {response.text}")
        response.raise_for_status()
        return response.json()

    def _step_payload(self, action: PusherAction) -> Dict:
        """
        Convert PusherAction to JSON payload for step request.

        Args:
            action: PusherAction instance

        Returns:
            Dictionary representation suitable for JSON encoding
        """
        return {
            "direction": action.direction,
        }

    def _parse_result(self, payload: Dict) -> StepResult[PusherObservation]:
        """
        Parse server response into StepResult[PusherObservation].

        Args:
            payload: JSON response from server

        Returns:
            StepResult with PusherObservation
        """
        obs_data = payload.get("observation", {})
        observation = PusherObservation(
            board=obs_data.get("board", []),
            board_shape=obs_data.get("board_shape", []),
            player_position=obs_data.get("player_position", [0, 0]),
            under_tile=obs_data.get("under_tile", 2),
            level=obs_data.get("level", 1),
            status=obs_data.get("status", ""),
            num_boxes=obs_data.get("num_boxes", 0),
            boxes_on_targets=obs_data.get("boxes_on_targets", 0),
            moves_count=obs_data.get("moves_count", 0),
            pushes_count=obs_data.get("pushes_count", 0),
            is_solved=obs_data.get("is_solved", False),
            changed=obs_data.get("changed", False),
            metadata=obs_data.get("metadata", {}),
        )

        return StepResult(
            observation=observation,
            done=payload.get("done", False),
            outcome=payload.get("outcome"),
        )

    def _parse_state(self, payload: Dict) -> PusherState:
        """
        Parse server response into PusherState object.

        Args:
            payload: JSON response from /state endpoint

        Returns:
            PusherState with episode_id, step_count, level and status
        """
        return PusherState(
            episode_id=payload.get("episode_id"),
            step_count=payload.get("step_count", 0),
            level=payload.get("level", 1),
            status=payload.get("status", ""),
            levels_completed=payload.get("levels_completed", 0),
        )
