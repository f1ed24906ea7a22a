"""
Typed events exchanged between the game and its collaborators.

Input events flow into `GameManager.handle()`; core events flow out through an
`EventBus` to any registered observers. The move trace records
(`TileMove`, `TileMerge`, `TileSpawn`) replace the per-tile animation state the
browser game used to keep on its tiles.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional, Tuple

from merge2048.game.direction import Direction
from merge2048.game.tile import Position

logger = logging.getLogger(__name__)


# --- Input events ---

@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class KeepPlaying:
    pass


# --- Move trace ---

@dataclass(frozen=True)
class TileMove:
    """Where a tile that existed before the move ended up."""
    tile_id: int
    value: int
    from_position: Position
    to_position: Position
    merged_into: Optional[int] = None


@dataclass(frozen=True)
class TileMerge:
    """A tile created by merging two tiles this move."""
    tile_id: int
    value: int
    position: Position
    merged_from: Tuple[int, int]


@dataclass(frozen=True)
class TileSpawn:
    tile_id: int
    value: int
    position: Position


# --- Core events ---

@dataclass(frozen=True)
class MoveResolved:
    direction: Direction
    moved: bool
    score_delta: int
    score: int
    won: bool
    over: bool
    trace: Tuple[TileMove, ...] = ()
    merges: Tuple[TileMerge, ...] = ()
    spawned: Optional[TileSpawn] = None

    @property
    def merged_values(self):
        return [merge.value for merge in self.merges]


@dataclass(frozen=True)
class Restarted:
    score: int = 0


@dataclass(frozen=True)
class KeptPlaying:
    score: int = 0


class EventBus:
    """
    Observer lists keyed by event class.

    Subscribing to `MoveResolved` only delivers `MoveResolved` instances; there
    is no string-keyed dispatch.
    """

    def __init__(self):
        self._observers = defaultdict(list)

    def subscribe(self, event_type, callback):
        self._observers[event_type].append(callback)
        return callback

    def unsubscribe(self, event_type, callback):
        observers = self._observers.get(event_type, [])
        if callback in observers:
            observers.remove(callback)

    def emit(self, event):
        observers = self._observers.get(type(event), [])
        logger.debug("Emitting %s to %d observer(s)", type(event).__name__, len(observers))
        for callback in list(observers):
            callback(event)
