"""
Box Pusher Environment Simple Example

This script demonstrates basic usage of the Box Pusher environment.
It connects to a running server, resets it, and solves the first bundled level.

Usage:
    uvicorn envs.pusher_env.server.app:app --port 8000
    python examples/pusher_simple.py
"""

import sys
import time
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from envs.pusher_env import PusherAction, PusherEnv


def print_board(observation):
    """Print a visual representation of the board."""
    height, width = observation.board_shape
    board = []
    for i in range(height):
        row = observation.board[i * width:(i + 1) * width]
        if any(row):
            board.append(row)

    # Symbol mapping for visualization
    symbols = {
        0: ' ',  # Blank
        1: '█',  # Wall
        2: '·',  # Ground
        3: '□',  # Box
        4: '.',  # Target
        5: 'v',  # Player facing down
        6: '>',  # Player facing right
        7: '<',  # Player facing left
        8: '^',  # Player facing up
        9: '▣',  # Box on target
    }

    print("\nCurrent Board:")
    print("─" * (width * 2))
    for row in board:
        print(' '.join(symbols[cell] for cell in row))
    print("─" * (width * 2))


def main():
    print("Box Pusher Environment Example")
    print("=" * 50)

    pusher_env = PusherEnv(base_url="http://localhost:8000")

    try:
        print("\nResetting environment at level 1...")
        result = pusher_env.reset(level=1)

        print(f"\nInitial State:")
        print(f"  Level: {result.observation.level}")
        print(f"  Number of boxes: {result.observation.num_boxes}")
        print(f"  Player position: {result.observation.player_position}")

        print_board(result.observation)

        for i, direction in enumerate(["right", "right"], 1):
            # Inputs closer together than the server interval are dropped
            time.sleep(0.25)
            print(f"\n--- Move {i}: {direction.upper()} ---")
            result = pusher_env.step(PusherAction(direction=direction))

            print(f"Outcome: {result.outcome}")
            print(f"Player position: {result.observation.player_position}")
            print(f"Boxes on targets: {result.observation.boxes_on_targets}/{result.observation.num_boxes}")
            print_board(result.observation)

            if result.done:
                print("\n" + "=" * 50)
                print(f"Level solved! Now on level {result.observation.level}")
                print("=" * 50)
                break

        state = pusher_env.state()
        print(f"\nSteps taken: {state.step_count}, levels completed: {state.levels_completed}")

    finally:
        pusher_env.close()


if __name__ == "__main__":
    main()
