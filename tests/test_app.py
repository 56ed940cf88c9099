import pytest
from fastapi.testclient import TestClient

from envs.pusher_env.client import PusherEnv
from envs.pusher_env.config import Settings
from envs.pusher_env.models import PusherAction
from envs.pusher_env.server.app import create_app
from envs.pusher_env.server.pusher_environment import PusherEnvironment

from tests.helpers import LEVEL_ONE, write_map


@pytest.fixture
def http(maps_dir, clock):
    settings = Settings(grid_size=5, level_count=2, input_interval_ms=0, maps_dir=maps_dir)
    env = PusherEnvironment(settings=settings, clock=clock)
    with TestClient(create_app(env)) as client:
        yield client


def test_health(http):
    response = http.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_reset_without_body(http):
    response = http.post("/reset")

    assert response.status_code == 200
    payload = response.json()
    assert payload["observation"]["level"] == 1
    assert payload["observation"]["status"] == "in_progress"
    assert payload["done"] is False


def test_reset_to_level(http):
    response = http.post("/reset", json={"level": 2})

    assert response.json()["observation"]["player_position"] == [1, 2]


def test_reset_to_unknown_level_is_unprocessable(http):
    response = http.post("/reset", json={"level": 9})

    assert response.status_code == 422


def test_step_solves_level(http):
    http.post("/reset", json={})

    response = http.post("/step", json={"action": {"direction": "right"}})

    assert response.status_code == 200
    payload = response.json()
    assert payload["outcome"] == "pushed"
    assert payload["done"] is True
    assert payload["observation"]["level"] == 2


def test_step_with_unknown_direction(http):
    http.post("/reset", json={})

    response = http.post("/step", json={"action": {"direction": "north-east"}})

    assert response.status_code == 422


def test_state_tracks_steps(http):
    http.post("/reset", json={})
    http.post("/step", json={"action": {"direction": "down"}})

    payload = http.get("/state").json()

    assert payload["step_count"] == 1
    assert payload["level"] == 1
    assert payload["status"] == "in_progress"
    assert payload["episode_id"]


def test_winning_step_succeeds_when_next_level_is_missing(tmp_path, clock):
    write_map(tmp_path, 1, LEVEL_ONE)
    settings = Settings(grid_size=5, level_count=2, input_interval_ms=0, maps_dir=tmp_path, max_load_attempts=1)
    env = PusherEnvironment(settings=settings, clock=clock)

    with TestClient(create_app(env)) as http:
        http.post("/reset", json={})
        winning = http.post("/step", json={"action": {"direction": "right"}})
        later = http.post("/step", json={"action": {"direction": "left"}})
        state = http.get("/state").json()

    assert winning.status_code == 200
    payload = winning.json()
    assert payload["outcome"] == "pushed"
    assert payload["done"] is True
    assert payload["observation"]["status"] == "awaiting_level_load"
    assert later.status_code == 503
    assert state["levels_completed"] == 1
    assert state["step_count"] == 1


def test_reset_with_unloadable_level_is_service_unavailable(tmp_path, clock):
    settings = Settings(grid_size=5, level_count=2, input_interval_ms=0, maps_dir=tmp_path, max_load_attempts=1)
    env = PusherEnvironment(settings=settings, clock=clock)

    with TestClient(create_app(env)) as http:
        response = http.post("/reset", json={})

    assert response.status_code == 503


def test_client_round_trip(http):
    client = PusherEnv(base_url=str(http.base_url), session=http)

    result = client.reset(level=1)
    assert result.observation.level == 1
    assert result.observation.board_shape == [5, 5]

    result = client.step(PusherAction(direction="right"))
    assert result.outcome == "pushed"
    assert result.done
    assert result.observation.level == 2

    state = client.state()
    assert state.levels_completed == 1
    assert state.step_count == 1
