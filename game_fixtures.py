"""Shared helpers for the test modules."""

import numpy as np

from merge2048.game.game_manager import GameManager
from merge2048.game.grid import Grid
from merge2048.game.state import GameState


class FixedRng:
    """
    Stand-in for numpy's Generator that always picks the first empty cell
    and spawns a 2 (or a 4 when `roll` >= 0.9).
    """

    def __init__(self, roll=0.0):
        self.roll = roll

    def integers(self, high):
        return 0

    def random(self):
        return self.roll


def make_game(rows=None, rng=None, **kwargs):
    """GameManager whose board is replaced by `rows` (row-major, 0 = empty)."""
    game = GameManager(len(rows) if rows is not None else 4,
                       rng=rng if rng is not None else FixedRng(), **kwargs)
    if rows is not None:
        game.state = GameState(Grid.from_values(rows))
    return game


def board(game):
    return game.grid.to_array()


def random_board(rng, size=4, fill=0.6, max_exponent=5):
    values = 2 ** rng.integers(1, max_exponent + 1, size=(size, size))
    values[rng.random((size, size)) > fill] = 0
    return values.astype(np.int32)
