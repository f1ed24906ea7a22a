"""
Game Session Manager for merge2048.

`GameManager` owns the single GameState of a session and is the only thing
that mutates it. Every input (move, restart, keep playing) runs to completion
before the next one is handled:

1.  Resolve the move on the grid (`resolver.resolve_move`).
2.  If anything moved, spawn a tile and check whether the game is over.
3.  Update the best score, persist or clear the stored game, and hand a
    snapshot to the actuator.
4.  Notify observers with a typed event carrying the move trace.

Storage and presentation are injected; the defaults keep everything in memory
and render nothing.
"""

import logging

import numpy as np

from merge2048.game.actuator import Actuator
from merge2048.game.config import GRID_SIZE, SPAWN_PROBABILITIES, SPAWN_VALUES, START_TILES, WIN_TILE
from merge2048.game.direction import Direction
from merge2048.game.events import (EventBus, KeepPlaying, KeptPlaying, Move, MoveResolved,
                                   Restart, Restarted, TileSpawn)
from merge2048.game.resolver import moves_available, resolve_move
from merge2048.game.state import GameState, InvalidStateError
from merge2048.storage.memory import InMemoryStorage

logger = logging.getLogger(__name__)


class GameManager:
    def __init__(self, size=GRID_SIZE, storage=None, actuator=None, rng=None,
                 win_tile=WIN_TILE, start_tiles=START_TILES):
        self.size = size
        self.storage = storage if storage is not None else InMemoryStorage()
        self.actuator = actuator if actuator is not None else Actuator()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.win_tile = win_tile
        self.start_tiles = start_tiles
        self.events = EventBus()
        self.last_move = None
        self.state = None
        self.setup()

    @property
    def grid(self):
        return self.state.grid

    @property
    def score(self):
        return self.state.score

    def subscribe(self, event_type, callback):
        return self.events.subscribe(event_type, callback)

    # --- Lifecycle ---

    def setup(self):
        """Restores the stored game if there is one, otherwise starts fresh."""
        stored = self.storage.load()
        state = None
        if stored:
            try:
                state = GameState.from_serialized(stored)
            except InvalidStateError as exc:
                logger.warning("Discarding stored game: %s", exc)
                self.storage.clear()

        if state is not None:
            logger.info("Resumed stored game (score %d)", state.score)
            self.state = state
        else:
            self.state = GameState.fresh(self.size)
            self.add_start_tiles()
        self.last_move = None
        self.actuate()

    def restart(self):
        self.storage.clear()
        self.actuator.continue_game()
        self.setup()
        logger.info("Game restarted")
        self.events.emit(Restarted(self.state.score))

    def keep_playing(self):
        """Lets a won game continue past the winning tile."""
        self.state.keep_playing = True
        self.actuator.continue_game()
        self.actuate()
        self.events.emit(KeptPlaying(self.state.score))

    def is_game_terminated(self):
        return self.state.terminated

    def handle(self, event):
        """Dispatches one input event."""
        if isinstance(event, Move):
            return self.move(event.direction)
        if isinstance(event, Restart):
            return self.restart()
        if isinstance(event, KeepPlaying):
            return self.keep_playing()
        logger.debug("Ignoring unknown input event %r", event)
        return None

    # --- Tiles ---

    def add_start_tiles(self):
        for _ in range(self.start_tiles):
            self.add_random_tile()

    def add_random_tile(self):
        """
        Spawns a tile in a random empty cell.
        Probabilities: 90% chance of '2', 10% chance of '4'.
        Returns the new tile, or None when the grid is full.
        """
        cell = self.grid.random_available_cell(self.rng)
        if cell is None:
            return None
        value = SPAWN_VALUES[0] if self.rng.random() < SPAWN_PROBABILITIES[0] else SPAWN_VALUES[1]
        return self.grid.create_tile(cell, value)

    # --- Moves ---

    def move(self, direction):
        """
        Plays one move.

        Returns True if the board changed. Unknown directions and moves on a
        terminated game are ignored and return False.
        """
        parsed = Direction.parse(direction)
        if parsed is None:
            logger.debug("Ignoring unknown direction %r", direction)
            return False
        if self.is_game_terminated():
            logger.debug("Ignoring %s: game is terminated", parsed.name)
            return False

        state = self.state
        resolution = resolve_move(state.grid, parsed, self.win_tile)
        state.score += resolution.score
        if resolution.won and not state.won:
            state.won = True
            logger.info("Reached %d (score %d)", self.win_tile, state.score)

        spawned = None
        if resolution.moved:
            tile = self.add_random_tile()
            if tile is not None:
                spawned = TileSpawn(tile.id, tile.value, tile.position)
            if not self.moves_available():
                state.over = True
                logger.info("Game over (score %d)", state.score)

        self.actuate()

        self.last_move = MoveResolved(
            direction=parsed,
            moved=resolution.moved,
            score_delta=resolution.score,
            score=state.score,
            won=state.won,
            over=state.over,
            trace=resolution.trace,
            merges=resolution.merges,
            spawned=spawned,
        )
        self.events.emit(self.last_move)
        return resolution.moved

    def moves_available(self):
        return moves_available(self.grid)

    def valid_moves(self):
        """Directions that would change the board, found by resolving a copy."""
        if self.is_game_terminated():
            return []
        return [direction for direction in Direction
                if resolve_move(self.grid.copy(), direction, self.win_tile).moved]

    # --- Output ---

    def actuate(self):
        """Updates the best score, persists the game and renders it."""
        state = self.state
        best_score = self.storage.get_best_score()
        if best_score < state.score:
            self.storage.set_best_score(state.score)
            best_score = state.score

        if state.over:
            self.storage.clear()
        else:
            self.storage.save(self.serialize())

        self.actuator.actuate(state.grid.copy(), state.snapshot(best_score))

    def serialize(self):
        return self.state.serialize()

    def __str__(self):
        score_str = "Score: {}\n".format(self.state.score)
        return score_str + str(self.grid)
