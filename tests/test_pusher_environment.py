import pytest

from envs.pusher_env.config import Settings
from envs.pusher_env.errors import LevelLoadError
from envs.pusher_env.models import Direction, GameStatus, MoveOutcome, PusherAction
from envs.pusher_env.server.pusher_environment import PusherEnvironment

from tests.helpers import LEVEL_ONE, write_map


@pytest.fixture
def env(settings, clock):
    return PusherEnvironment(settings=settings, clock=clock)


def test_reset_loads_first_level(env):
    observation = env.reset()

    assert observation.level == 1
    assert observation.status == GameStatus.IN_PROGRESS.value
    assert observation.player_position == [1, 3]
    assert observation.num_boxes == 1
    assert observation.boxes_on_targets == 0
    assert observation.changed
    assert not env.observe().changed


def test_board_is_reported_top_row_first(env):
    observation = env.reset()

    assert observation.board_shape == [5, 5]
    rows = [observation.board[i * 5:(i + 1) * 5] for i in range(5)]
    assert rows == [[int(c) for c in line] for line in LEVEL_ONE]


def test_winning_push_loads_next_level(env):
    env.reset()

    assert env.press(Direction.RIGHT) == MoveOutcome.PUSHED

    assert env.machine.current_level_index() == 2
    assert env.machine.status == GameStatus.IN_PROGRESS
    observation = env.observe()
    assert observation.is_solved
    assert observation.level == 2
    assert observation.player_position == [1, 2]
    assert env.state.levels_completed == 1
    assert not env.observe().is_solved


def test_last_level_wraps_to_first(env, clock):
    env.reset(level=2)

    env.press("right")

    assert env.machine.current_level_index() == 1
    assert env.state.level == 1


def test_presses_inside_interval_are_dropped(env, clock):
    env.reset()

    assert env.press(Direction.DOWN) == MoveOutcome.MOVED
    clock.advance(0.1)
    assert env.press(Direction.UP) == MoveOutcome.NONE
    clock.advance(0.1)
    assert env.press(Direction.UP) == MoveOutcome.MOVED
    assert env.state.step_count == 2


def test_input_listeners_hear_accepted_presses(env, clock):
    heard = []
    env.add_input_listener(heard.append)
    env.reset()

    env.press(Direction.LEFT)
    env.press(Direction.DOWN)
    clock.advance(0.2)
    env.press(Direction.DOWN)

    assert heard == [Direction.LEFT, Direction.DOWN]


def test_listeners_run_after_action_is_queued(env):
    pending = []
    env.add_input_listener(lambda direction: pending.append(env.machine.pending_action))
    env.reset()

    env.press(Direction.DOWN)

    assert pending == [Direction.DOWN]


def test_winning_press_keeps_outcome_when_next_level_fails(tmp_path, clock):
    write_map(tmp_path, 1, LEVEL_ONE)
    settings = Settings(grid_size=5, level_count=2, input_interval_ms=0, maps_dir=tmp_path, max_load_attempts=1)
    env = PusherEnvironment(settings=settings, clock=clock)
    env.reset()

    assert env.press(Direction.RIGHT) == MoveOutcome.PUSHED
    assert env.machine.needs_level()
    assert env.state.levels_completed == 1
    with pytest.raises(LevelLoadError):
        env.press(Direction.LEFT)


def test_missing_level_is_retried_then_reported(tmp_path, clock):
    write_map(tmp_path, 1, LEVEL_ONE)
    settings = Settings(grid_size=5, level_count=2, input_interval_ms=0, maps_dir=tmp_path, max_load_attempts=3)
    env = PusherEnvironment(settings=settings, clock=clock)
    env.reset()

    assert env.press(Direction.RIGHT) == MoveOutcome.PUSHED
    assert env.machine.needs_level()
    assert env.press(Direction.LEFT) == MoveOutcome.NONE
    with pytest.raises(LevelLoadError):
        env.press(Direction.LEFT)

    write_map(tmp_path, 2, LEVEL_ONE)
    assert env.tick()
    assert env.machine.current_level_index() == 2


def test_undecodable_level_is_retried(tmp_path, clock):
    (tmp_path / "1.map").write_bytes(b"\xff\xfe\xfd")
    settings = Settings(grid_size=5, level_count=1, maps_dir=tmp_path)
    env = PusherEnvironment(settings=settings, clock=clock)

    observation = env.reset()
    assert observation.status == GameStatus.AWAITING_LEVEL_LOAD.value

    write_map(tmp_path, 1, LEVEL_ONE)
    assert env.tick()
    assert env.observe().status == GameStatus.IN_PROGRESS.value


def test_reset_starts_new_episode(env):
    env.reset()
    episode = env.state.episode_id
    env.press(Direction.DOWN)

    observation = env.reset(level=2)

    assert env.state.episode_id != episode
    assert env.state.step_count == 0
    assert observation.level == 2
    assert observation.moves_count == 0


def test_reset_rejects_unknown_level(env):
    with pytest.raises(ValueError):
        env.reset(level=5)


def test_step_reports_outcome(env):
    env.reset()

    observation = env.step(PusherAction(direction="down"))

    assert observation.metadata["outcome"] == MoveOutcome.MOVED.value
    assert observation.player_position == [1, 2]
    assert observation.moves_count == 1


def test_step_rejects_unknown_direction(env):
    env.reset()

    with pytest.raises(ValueError):
        env.step(PusherAction(direction="diagonal"))


def test_bundled_levels_are_solvable(clock):
    env = PusherEnvironment(settings=Settings(input_interval_ms=0, level_count=3), clock=clock)
    solutions = {
        1: ["right", "right"],
        2: ["up", "left", "left", "down", "down", "up", "up", "right", "right", "right", "right", "down", "down"],
        3: ["left", "up", "up", "right", "down", "down"],
    }
    env.reset(level=1)

    for level, moves in solutions.items():
        assert env.machine.current_level_index() == level
        for direction in moves:
            assert env.press(direction).accepted
        assert env.observe().is_solved

    assert env.machine.current_level_index() == 1
    assert env.state.levels_completed == 3
