from collections import namedtuple

Position = namedtuple("Position", "x y")


class Tile:
    """
    A single numbered tile.

    Tiles are owned by the Grid's arena and referenced from the cell matrix by
    id. Only the Grid changes a tile's coordinates.
    """

    __slots__ = ("id", "x", "y", "value")

    def __init__(self, tile_id, position, value=2):
        self.id = tile_id
        self.x = position[0]
        self.y = position[1]
        self.value = value

    @property
    def position(self):
        return Position(self.x, self.y)

    def serialize(self):
        return {"position": {"x": self.x, "y": self.y}, "value": self.value}

    def __repr__(self):
        return "Tile(id={}, x={}, y={}, value={})".format(self.id, self.x, self.y, self.value)
