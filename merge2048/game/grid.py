import numpy as np

from merge2048.game.tile import Position, Tile

# Cell marker for "no tile".
EMPTY = -1


class Grid:
    """
    Fixed-size square board.

    Tiles live in an arena (`self.tiles`, keyed by tile id) and the cell matrix
    only stores ids, so moving a tile never aliases another cell's contents.
    The matrix is indexed `cells[x, y]`, the same layout used when the grid is
    serialized.
    """

    def __init__(self, size):
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.cells = np.full((size, size), EMPTY, dtype=np.int64)
        self.tiles = {}
        self._next_id = 0

    @classmethod
    def empty(cls, size):
        return cls(size)

    @classmethod
    def from_serialized(cls, size, cells):
        """
        Rebuilds a grid from a stored cell matrix.

        `cells[x][y]` is either None or a `{"position": {"x", "y"}, "value"}`
        mapping. Raises ValueError when the matrix does not fit the size.
        """
        if len(cells) != size or any(len(column) != size for column in cells):
            raise ValueError(f"Stored cells do not form a {size}x{size} matrix")
        grid = cls(size)

        for x, column in enumerate(cells):
            for y, stored in enumerate(column):
                if not stored:
                    continue
                position = stored.get("position") or {"x": x, "y": y}
                value = int(stored["value"])
                if value < 2 or value & (value - 1):
                    raise ValueError(f"Stored tile value {value} is not a power of two >= 2")
                grid.create_tile(Position(int(position["x"]), int(position["y"])), value)
        return grid

    @classmethod
    def from_values(cls, rows):
        """
        Builds a grid from a row-major value matrix (`rows[y][x]`, 0 = empty).

        Handy for setting up a board by hand:
            [[2, 2, 0, 0],
             [0, 0, 0, 0], ...]
        """
        values = np.asarray(rows)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"Expected a square matrix, received shape {values.shape}")

        grid = cls(values.shape[0])
        for y in range(grid.size):
            for x in range(grid.size):
                if values[y, x]:
                    grid.create_tile(Position(x, y), int(values[y, x]))
        return grid

    # --- Queries ---

    def each_cell(self):
        """Yields (x, y, tile or None) for every cell, x outer, y inner."""
        for x in range(self.size):
            for y in range(self.size):
                yield x, y, self._tile_at(x, y)

    def available_cells(self):
        return [Position(x, y) for x, y, tile in self.each_cell() if tile is None]

    def random_available_cell(self, rng):
        """Picks one empty cell uniformly; None when the grid is full."""
        cells = self.available_cells()
        if cells:
            return cells[int(rng.integers(len(cells)))]
        return None

    def cells_available(self):
        return bool(np.any(self.cells == EMPTY))

    def cell_available(self, position):
        return not self.cell_occupied(position)

    def cell_occupied(self, position):
        return self.cell_content(position) is not None

    def cell_content(self, position):
        """Tile at `position`, or None when empty or out of bounds."""
        if self.within_bounds(position):
            return self._tile_at(position[0], position[1])
        return None

    def within_bounds(self, position):
        x, y = position
        return 0 <= x < self.size and 0 <= y < self.size

    def max_tile(self):
        return max((tile.value for tile in self.tiles.values()), default=0)

    # --- Mutation ---

    def create_tile(self, position, value):
        """Allocates a new tile id and inserts the tile at `position`."""
        tile = Tile(self._next_id, position, value)
        self._next_id += 1
        self.insert_tile(tile)
        return tile

    def insert_tile(self, tile):
        if not self.within_bounds(tile.position):
            raise ValueError(f"{tile!r} lies outside a {self.size}x{self.size} grid")
        if self.cells[tile.x, tile.y] != EMPTY:
            raise ValueError(f"Cell ({tile.x}, {tile.y}) is already occupied")
        self.cells[tile.x, tile.y] = tile.id
        self.tiles[tile.id] = tile
        self._next_id = max(self._next_id, tile.id + 1)

    def remove_tile(self, tile):
        if self.cells[tile.x, tile.y] == tile.id:
            self.cells[tile.x, tile.y] = EMPTY
        self.tiles.pop(tile.id, None)

    def move_tile(self, tile, position):
        """Moves a tile to an empty cell (no-op when it is already there)."""
        if (tile.x, tile.y) == tuple(position):
            return
        self.cells[tile.x, tile.y] = EMPTY
        self.cells[position[0], position[1]] = tile.id
        tile.x, tile.y = position[0], position[1]

    # --- Conversion ---

    def serialize(self):
        cells = []
        for x in range(self.size):
            column = []
            for y in range(self.size):
                tile = self._tile_at(x, y)
                column.append(tile.serialize() if tile else None)
            cells.append(column)
        return {"size": self.size, "cells": cells}

    def to_array(self):
        """Row-major value matrix (`array[y, x]`), 0 for empty cells."""
        values = np.zeros((self.size, self.size), dtype=np.int32)
        for tile in self.tiles.values():
            values[tile.y, tile.x] = tile.value
        return values

    def copy(self):
        clone = self.__class__(self.size)
        clone.cells = self.cells.copy()
        clone.tiles = {tile_id: Tile(tile_id, tile.position, tile.value)
                       for tile_id, tile in self.tiles.items()}
        clone._next_id = self._next_id
        return clone

    def _tile_at(self, x, y):
        tile_id = self.cells[x, y]
        if tile_id == EMPTY:
            return None
        return self.tiles[int(tile_id)]

    def __str__(self):
        return str(self.to_array())
