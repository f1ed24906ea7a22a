import gymnasium
from gymnasium import spaces
import numpy as np

from merge2048.game.config import GRID_SIZE, WIN_TILE
from merge2048.game.direction import Direction
from merge2048.game.game_manager import GameManager
from merge2048.storage.memory import InMemoryStorage


class Game2048Env(gymnasium.Env):
    """
    Gymnasium environment around `GameManager`.

    Acts as the game's input source (actions are Direction values) and reads
    the board back as a row-major value matrix. The environment keeps its own
    in-memory storage so episodes never touch a player's saved game.

    Reward modes:
        raw_score: points gained by the move's merges.
        log_merge: sum of log2 of every tile produced by a merge.
    Invalid moves (nothing changes) are penalised with -1.
    """

    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(self, size=GRID_SIZE, render_mode=None, reward_mode="raw_score", win_tile=WIN_TILE):
        super().__init__()
        if reward_mode not in ("raw_score", "log_merge"):
            raise ValueError(f"Unknown reward_mode: {reward_mode}. Must be 'raw_score' or 'log_merge'.")

        self.size = size
        self.reward_mode = reward_mode
        self.win_tile = win_tile
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(len(Direction))
        self.observation_space = spaces.Box(low=0,
                                            high=np.iinfo(np.int32).max,
                                            shape=(size, size),
                                            dtype=np.int32)
        self.game = None

    def _get_episode_info(self):
        return {
            "score": self.game.score,
            "max_tile": self.game.grid.max_tile(),
            "won": self.game.state.won,
            "num_empty_cells": len(self.game.grid.available_cells()),
            "valid_moves_mask": self.get_valid_moves_mask(),
        }

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        self.game = GameManager(self.size, storage=InMemoryStorage(), rng=self.np_random,
                                win_tile=self.win_tile)
        observation = self.game.grid.to_array()
        info = self._get_episode_info()

        if self.render_mode == "human":
            self.render()
        return observation, info

    def step(self, action):
        direction = Direction(int(action))
        score_before_move = self.game.score

        valid_move = self.game.move(direction)
        observation = self.game.grid.to_array()

        if not valid_move:
            reward = -1.0  # Punish invalid moves
            merged_tiles = []
        else:
            merged_tiles = self.game.last_move.merged_values
            if self.reward_mode == "log_merge":
                reward = float(np.sum(np.log2(merged_tiles))) if merged_tiles else 0.0
            else:
                reward = float(self.game.score - score_before_move)

        terminated = self.game.is_game_terminated()
        truncated = False
        info = self._get_episode_info()
        info.update({
            "merged_tiles": merged_tiles,
            "raw_score_delta": self.game.score - score_before_move,
            "reward_mode": self.reward_mode,
        })

        if self.render_mode == "human":
            self.render()

        return observation, reward, terminated, truncated, info

    def get_valid_moves_mask(self):
        """Boolean mask in Direction order (Up, Right, Down, Left)."""
        valid = set(self.game.valid_moves())
        return [direction in valid for direction in Direction]

    def render(self):
        if self.render_mode == "human":
            print(self.game)
        elif self.render_mode == "ansi":
            return str(self.game)
