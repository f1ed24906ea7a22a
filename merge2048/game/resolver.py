"""
Move Resolution for merge2048.

This module holds the rules of a single move, separated from the session
bookkeeping in `GameManager`:

1.  `resolve_move` slides and merges the tiles of a grid in place and reports
    what happened (score gained, merges, a trace of every tile). It never
    spawns tiles, so it can be run on a copy to preview a move.
2.  `moves_available` decides whether any move can still change the board.
    The neighbour scan over the value matrix is compiled with numba.
"""

import logging
from collections import namedtuple

from numba import njit

from merge2048.game.config import WIN_TILE
from merge2048.game.direction import Direction
from merge2048.game.events import TileMerge, TileMove
from merge2048.game.tile import Position

logger = logging.getLogger(__name__)

Traversals = namedtuple("Traversals", "x y")
FarthestPosition = namedtuple("FarthestPosition", "farthest next")
Resolution = namedtuple("Resolution", "moved score won trace merges")


def get_vector(direction):
    return Direction(direction).vector


def build_traversals(size, vector):
    """
    Cell visiting order for one move.

    Tiles closest to the wall they are moving towards are visited first, so a
    tile resting against the wall is settled before the tiles behind it.
    """
    xs = list(range(size))
    ys = list(range(size))
    if vector[0] == 1:
        xs.reverse()
    if vector[1] == 1:
        ys.reverse()
    return Traversals(xs, ys)


def find_farthest_position(grid, cell, vector):
    """
    Walks from `cell` along `vector` while the next cell is inside the grid
    and empty. Returns the last empty cell reached and the cell beyond it
    (which may be occupied or out of bounds).
    """
    previous = Position(*cell)
    cell = Position(previous.x + vector[0], previous.y + vector[1])
    while grid.within_bounds(cell) and grid.cell_available(cell):
        previous = cell
        cell = Position(previous.x + vector[0], previous.y + vector[1])
    return FarthestPosition(previous, cell)


def positions_equal(first, second):
    return first[0] == second[0] and first[1] == second[1]


def resolve_move(grid, direction, win_tile=WIN_TILE):
    """
    Slides every tile of `grid` towards `direction`, merging equal neighbours.

    The grid is mutated in place. A tile produced by a merge cannot merge
    again in the same move, so [2, 2, 2, 2] left gives [4, 4, 0, 0].

    Returns:
        Resolution(moved, score, won, trace, merges) where `moved` is True if
        any tile ended up in a different cell.
    """
    vector = get_vector(direction)
    traversals = build_traversals(grid.size, vector)

    # Snapshot: where every tile started, and which tiles are merge products.
    previous_positions = {tile.id: tile.position for tile in grid.tiles.values()}
    values = {tile.id: tile.value for tile in grid.tiles.values()}
    merged_this_move = set()
    merged_into = {}
    merges = []
    score = 0
    won = False
    moved = False

    for x in traversals.x:
        for y in traversals.y:
            cell = Position(x, y)
            tile = grid.cell_content(cell)
            if tile is None:
                continue

            positions = find_farthest_position(grid, cell, vector)
            next_tile = grid.cell_content(positions.next)

            if (next_tile is not None and next_tile.value == tile.value
                    and next_tile.id not in merged_this_move):
                grid.remove_tile(next_tile)
                grid.remove_tile(tile)
                merged = grid.create_tile(positions.next, tile.value * 2)
                tile.x, tile.y = positions.next

                merged_this_move.add(merged.id)
                merged_into[tile.id] = merged.id
                merged_into[next_tile.id] = merged.id
                merges.append(TileMerge(merged.id, merged.value, merged.position,
                                        (tile.id, next_tile.id)))
                score += merged.value
                if merged.value == win_tile:
                    won = True
            else:
                grid.move_tile(tile, positions.farthest)

            if not positions_equal(cell, tile.position):
                moved = True

    trace = []
    for tile_id, start in previous_positions.items():
        if tile_id in merged_into:
            target = grid.tiles[merged_into[tile_id]].position
            trace.append(TileMove(tile_id, values[tile_id], start, target, merged_into[tile_id]))
        else:
            trace.append(TileMove(tile_id, values[tile_id], start, grid.tiles[tile_id].position))

    logger.debug("Resolved %s: moved=%s merges=%d score=+%d",
                 Direction(direction).name, moved, len(merges), score)
    return Resolution(moved, score, won, tuple(trace), tuple(merges))


@njit
def _tile_matches_available(values):
    """True if two orthogonally adjacent cells hold the same non-zero value."""
    size = values.shape[0]
    for r in range(size):
        for c in range(size):
            value = values[r, c]
            if value == 0:
                continue
            if c + 1 < size and values[r, c + 1] == value:
                return True
            if r + 1 < size and values[r + 1, c] == value:
                return True
    return False


def tile_matches_available(grid):
    return bool(_tile_matches_available(grid.to_array()))


def moves_available(grid):
    """False only when the grid is full and no neighbours can merge."""
    return grid.cells_available() or tile_matches_available(grid)
