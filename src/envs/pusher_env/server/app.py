# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
FastAPI application for the Box Pusher Environment.

This module creates an HTTP server that exposes the PusherEnvironment over
HTTP endpoints, making it compatible with the PusherEnv client.

Usage:
    # Development (with auto-reload):
    uvicorn envs.pusher_env.server.app:app --reload --host 0.0.0.0 --port 8000

    # Production (one worker: the session lives in process memory):
    uvicorn envs.pusher_env.server.app:app --host 0.0.0.0 --port 8000

    # Or run directly:
    python -m envs.pusher_env.server.app
"""

import logging
import os
import threading
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ..config import Settings
from ..errors import LevelLoadError
from ..models import PusherAction
from .pusher_environment import PusherEnvironment

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings, log_dir: Optional[Path] = None) -> None:
    """Log to ``logs/pusher_server.log`` and to the console."""
    log_dir = Path(log_dir or os.environ.get("PUSHER_LOG_DIR") or Path.cwd() / "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = log_dir / "pusher_server.log"

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()  # Keep logging to console as well
        ]
    )


class ResetRequest(BaseModel):
    level: Optional[int] = None


class ActionBody(BaseModel):
    direction: str


class StepRequest(BaseModel):
    action: ActionBody


def create_app(env: PusherEnvironment) -> FastAPI:
    """
    Build the HTTP app around one environment instance.

    Args:
        env: Environment served by every endpoint

    Returns:
        FastAPI application
    """
    app = FastAPI(title="Box Pusher Environment")
    lock = threading.Lock()

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "healthy"}

    @app.post("/reset")
    def reset(request: Optional[ResetRequest] = None) -> Dict[str, Any]:
        level = request.level if request is not None else None
        with lock:
            try:
                observation = env.reset(level=level)
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e)) from e
            except LevelLoadError as e:
                logger.error(f"Level load failed: {e}")
                raise HTTPException(status_code=503, detail=str(e)) from e
        return {"observation": asdict(observation), "done": observation.is_solved}

    @app.post("/step")
    def step(request: StepRequest) -> Dict[str, Any]:
        with lock:
            try:
                observation = env.step(PusherAction(direction=request.action.direction))
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e)) from e
            except LevelLoadError as e:
                logger.error(f"Level load failed: {e}")
                raise HTTPException(status_code=503, detail=str(e)) from e
        return {
            "observation": asdict(observation),
            "outcome": observation.metadata.get("outcome"),
            "done": observation.is_solved,
        }

    @app.get("/state")
    def state() -> Dict[str, Any]:
        with lock:
            return asdict(env.state)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Box Pusher server starting up.")

    @app.on_event("shutdown")
    def shutdown_event():
        logger.info("Box Pusher server shutting down.")

    return app


settings = Settings.from_env()
setup_logging(settings)

# Create the environment instance
env = PusherEnvironment(settings=settings)

# Create the app
app = create_app(env)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PUSHER_PORT", "8000")))
