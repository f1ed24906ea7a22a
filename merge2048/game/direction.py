import operator
from enum import IntEnum


class Direction(IntEnum):
    """
    The four move directions.

    The integer values double as the action indices of the gym environment
    and match the key codes the browser game emitted (0: Up ... 3: Left).
    """
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def vector(self):
        """Unit vector (dx, dy) pointing in this direction."""
        return _VECTORS[self]

    @classmethod
    def parse(cls, value):
        """
        Coerces an int, a name ('up', 'LEFT') or a Direction into a Direction.

        Returns None for anything else; unknown directions are ignored by the
        game rather than treated as errors.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        if isinstance(value, bool):
            return None
        try:
            return cls(operator.index(value))
        except (TypeError, ValueError, OverflowError):
            return None


_VECTORS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}
