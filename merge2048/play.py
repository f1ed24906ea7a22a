"""
Terminal front end for merge2048.

Usage:
    python -m merge2048.play                      # interactive, saved to ~/.merge2048/state.json
    python -m merge2048.play --state-file none    # interactive, nothing saved
    python -m merge2048.play --autoplay 5 --seed 0

Keys: w/k up, d/l right, s/j down, a/h left, r restart, c keep playing, q quit.
"""

import argparse
import logging
import os

import numpy as np

from merge2048.agents.random_agent import play_game
from merge2048.environments.game_env import Game2048Env
from merge2048.game.actuator import TerminalActuator
from merge2048.game.config import DEFAULT_STATE_FILE, GRID_SIZE, STATE_FILE_ENV
from merge2048.game.game_manager import GameManager
from merge2048.game.input_manager import KeyboardInputManager
from merge2048.storage.json_file import JsonFileStorage
from merge2048.storage.memory import InMemoryStorage

QUIT_KEY = 'q'


def resolve_state_file(cli_path=None):
    """--state-file wins, then the environment variable, then the default path."""
    if cli_path:
        return cli_path
    env_path = os.environ.get(STATE_FILE_ENV)
    if env_path:
        return env_path
    return DEFAULT_STATE_FILE


def build_storage(path):
    if path.lower() == "none":
        return InMemoryStorage()
    return JsonFileStorage(path)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play 2048 in the terminal.")
    parser.add_argument("--size", type=int, default=GRID_SIZE, help="Board width and height")
    parser.add_argument("--state-file", type=str, default=None,
                        help=f"Where to save the game ('none' disables saving; env: {STATE_FILE_ENV})")
    parser.add_argument("--seed", type=int, default=None, help="Seed for tile spawns")
    parser.add_argument("--autoplay", type=int, default=0, metavar="N",
                        help="Let the random agent play N games instead of reading keys")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def autoplay(num_games, size, seed=None):
    env = Game2048Env(size=size)
    scores = []
    for i in range(num_games):
        info = play_game(env, seed=None if seed is None else seed + i)
        print(f"Game {i+1}: score {info['score']}, max tile {info['max_tile']}")
        scores.append(info["score"])
    if scores:
        print(f"\nAverage Score after {num_games} games: {np.mean(scores):.2f}")
    return scores


def interactive(size, storage, seed=None, read_key=None):
    read_key = read_key or input
    game = GameManager(size, storage=storage, actuator=TerminalActuator(),
                       rng=np.random.default_rng(seed))
    keyboard = KeyboardInputManager(game.handle)

    print("Welcome to 2048!")
    print("Use W (up), A (left), S (down), D (right) to play. "
          "'r' restarts, 'c' keeps playing after a win, 'q' quits.")

    while True:
        try:
            key = read_key("Enter your move: ")
        except EOFError:
            break
        if key.strip().lower() == QUIT_KEY:
            break
        if keyboard.press(key) is None:
            print("Invalid input. Please use w, a, s, d, r, c or q.")
    return game


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.autoplay:
        autoplay(args.autoplay, args.size, args.seed)
        return

    storage = build_storage(resolve_state_file(args.state_file))
    interactive(args.size, storage, args.seed)


if __name__ == "__main__":
    main()
