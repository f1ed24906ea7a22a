from merge2048.game.grid import Grid


class InvalidStateError(ValueError):
    """Raised when a stored game cannot be turned back into a GameState."""


class GameState:
    """
    Score, status flags and the grid of one game session.

    `over` and `won` only ever go from False to True; a restart replaces the
    whole GameState instead of clearing them.
    """

    def __init__(self, grid, score=0, over=False, won=False, keep_playing=False):
        self.grid = grid
        self.score = score
        self.over = over
        self.won = won
        self.keep_playing = keep_playing

    @classmethod
    def fresh(cls, size):
        return cls(Grid.empty(size))

    @property
    def terminated(self):
        """True when input can no longer change the board."""
        return self.over or (self.won and not self.keep_playing)

    def serialize(self):
        return {
            "grid": self.grid.serialize(),
            "score": self.score,
            "over": self.over,
            "won": self.won,
            "keepPlaying": self.keep_playing,
        }

    @classmethod
    def from_serialized(cls, data):
        try:
            grid_data = data["grid"]
            grid = Grid.from_serialized(int(grid_data["size"]), grid_data["cells"])
            score = int(data["score"])
        except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as exc:
            raise InvalidStateError(f"Stored game state is malformed: {exc}") from exc

        if score < 0:
            raise InvalidStateError(f"Stored score must not be negative, got {score}")

        return cls(
            grid,
            score=score,
            over=bool(data.get("over", False)),
            won=bool(data.get("won", False)),
            keep_playing=bool(data.get("keepPlaying", False)),
        )

    def snapshot(self, best_score):
        """Metadata handed to the presentation sink alongside the grid."""
        return {
            "score": self.score,
            "bestScore": best_score,
            "over": self.over,
            "won": self.won,
            "terminated": self.terminated,
        }
