import os
import tempfile

import pytest

# The app module configures file logging on import.
os.environ.setdefault("PUSHER_LOG_DIR", tempfile.mkdtemp(prefix="pusher-logs-"))

from envs.pusher_env.config import Settings
from envs.pusher_env.decoder import decode_text

from tests.helpers import LEVEL_ONE, LEVEL_TWO, FakeClock, write_map


@pytest.fixture
def make_level():
    def _make(*lines, strict=False):
        return decode_text("\n".join(lines) + "\n", size=len(lines), strict=strict)

    return _make


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def maps_dir(tmp_path):
    write_map(tmp_path, 1, LEVEL_ONE)
    write_map(tmp_path, 2, LEVEL_TWO)
    return tmp_path


@pytest.fixture
def settings(maps_dir):
    return Settings(grid_size=5, level_count=2, input_interval_ms=200, maps_dir=maps_dir, max_load_attempts=3)
