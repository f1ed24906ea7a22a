import unittest
import numpy as np

from game_fixtures import FixedRng, board, make_game
from merge2048.game.actuator import Actuator
from merge2048.game.direction import Direction
from merge2048.game.events import KeepPlaying, KeptPlaying, Move, MoveResolved, Restart, Restarted
from merge2048.game.game_manager import GameManager
from merge2048.game.grid import Grid
from merge2048.game.state import GameState, InvalidStateError
from merge2048.storage.memory import InMemoryStorage


class RecordingActuator(Actuator):
    def __init__(self):
        self.calls = []
        self.continued = 0

    def actuate(self, grid, metadata):
        self.calls.append((grid, metadata))

    def continue_game(self):
        self.continued += 1


class TestGameState(unittest.TestCase):

    def test_terminated_flag(self):
        state = GameState.fresh(4)
        self.assertFalse(state.terminated)
        state.won = True
        self.assertTrue(state.terminated)
        state.keep_playing = True
        self.assertFalse(state.terminated)
        state.over = True
        self.assertTrue(state.terminated)

    def test_serialize_restore(self):
        state = GameState(Grid.from_values([[2, 0], [0, 4]]), score=12, won=True, keep_playing=True)
        restored = GameState.from_serialized(state.serialize())
        self.assertEqual(restored.score, 12)
        self.assertTrue(restored.won)
        self.assertTrue(restored.keep_playing)
        self.assertFalse(restored.over)
        np.testing.assert_array_equal(restored.grid.to_array(), [[2, 0], [0, 4]])

    def test_serialized_keys(self):
        data = GameState.fresh(4).serialize()
        self.assertEqual(set(data), {"grid", "score", "over", "won", "keepPlaying"})

    def test_malformed_state_raises(self):
        for data in [{}, {"grid": {"size": 4}, "score": 0},
                     {"grid": {"size": 2, "cells": [[None]]}, "score": 0},
                     {"grid": {"size": 2, "cells": [[None, None], [None, None]]}, "score": -5},
                     {"grid": {"size": 2, "cells": [[None, None], [None, None]]}, "score": float("inf")},
                     {"grid": {"size": 10**7, "cells": [[None, None], [None, None]]}, "score": 0},
                     {"grid": {"size": 2, "cells": [[{"value": 3}, None], [None, None]]}, "score": 0},
                     {"grid": {"size": 2, "cells": [[{"value": 0}, None], [None, None]]}, "score": 0},
                     {"grid": {"size": 2, "cells": [[{"value": 1}, None], [None, None]]}, "score": 0}]:
            with self.assertRaises(InvalidStateError):
                GameState.from_serialized(data)


class TestPersistence(unittest.TestCase):

    def test_every_move_is_saved(self):
        storage = InMemoryStorage()
        game = GameManager(storage=storage, rng=np.random.default_rng(3))
        self.assertEqual(storage.load(), game.serialize())

        for direction in Direction:
            game.move(direction)
            self.assertEqual(storage.load(), game.serialize())

    def test_stored_game_is_resumed(self):
        storage = InMemoryStorage()
        first = GameManager(storage=storage, rng=np.random.default_rng(5))
        first.move(Direction.LEFT)
        first.move(Direction.UP)

        second = GameManager(storage=storage, rng=np.random.default_rng(99))
        self.assertEqual(second.score, first.score)
        np.testing.assert_array_equal(board(second), board(first))

    def test_malformed_stored_game_starts_fresh(self):
        storage = InMemoryStorage()
        storage.save({"grid": {"size": 4, "cells": "garbage"}, "score": 10})
        game = GameManager(storage=storage, rng=np.random.default_rng(0))
        self.assertEqual(game.score, 0)
        self.assertEqual(len(game.grid.tiles), 2)

    def test_oversized_or_invalid_stored_game_starts_fresh(self):
        for stored in [{"grid": {"size": 10**7, "cells": []}, "score": 0},
                       {"grid": {"size": 2, "cells": [[None, None], [None, None]]}, "score": float("inf")},
                       {"grid": {"size": 2, "cells": [[{"value": 3}, None], [None, None]]}, "score": 0}]:
            storage = InMemoryStorage()
            storage.save(stored)
            with self.assertLogs("merge2048.game.game_manager", level="WARNING"):
                game = GameManager(storage=storage, rng=np.random.default_rng(0))
            self.assertEqual(game.grid.size, 4)
            self.assertEqual(game.score, 0)
            self.assertEqual(storage.load(), game.serialize())

    def test_game_over_clears_stored_game(self):
        storage = InMemoryStorage()
        game = make_game([
            [4, 2, 4, 2],
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [16, 8, 16, 0]
        ], storage=storage)
        game.move(Direction.RIGHT)
        self.assertTrue(game.state.over)
        self.assertIsNone(storage.load())

    def test_best_score_is_monotonic(self):
        storage = InMemoryStorage()
        storage.set_best_score(6)
        game = make_game([
            [2, 2, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0]
        ], storage=storage)
        game.move(Direction.LEFT)
        self.assertEqual(storage.get_best_score(), 6, "A lower score must not replace the best")

        game.move(Direction.RIGHT)
        game.state.score = 40
        game.move(Direction.DOWN)
        self.assertEqual(storage.get_best_score(), 40)

        game.restart()
        self.assertEqual(storage.get_best_score(), 40)

    def test_restart_replaces_state(self):
        storage = InMemoryStorage()
        game = make_game([
            [1024, 1024, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0]
        ], storage=storage)
        game.move(Direction.LEFT)
        self.assertTrue(game.state.won)

        game.restart()
        self.assertFalse(game.state.won)
        self.assertFalse(game.state.over)
        self.assertEqual(game.score, 0)
        self.assertEqual(len(game.grid.tiles), 2)
        self.assertEqual(storage.load(), game.serialize())


class TestPresentationAndEvents(unittest.TestCase):

    def test_actuator_receives_snapshot(self):
        actuator = RecordingActuator()
        game = GameManager(actuator=actuator, rng=np.random.default_rng(0))
        self.assertEqual(len(actuator.calls), 1)

        grid, metadata = actuator.calls[-1]
        self.assertIsNot(grid, game.grid)
        self.assertEqual(metadata, {"score": 0, "bestScore": 0, "over": False,
                                    "won": False, "terminated": False})

    def test_actuator_called_even_when_nothing_moves(self):
        actuator = RecordingActuator()
        game = make_game([
            [2, 4, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0]
        ], actuator=actuator)
        calls = len(actuator.calls)
        self.assertFalse(game.move(Direction.LEFT))
        self.assertEqual(len(actuator.calls), calls + 1)

    def test_terminated_game_is_not_rendered_again(self):
        actuator = RecordingActuator()
        game = make_game([
            [1024, 1024, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0]
        ], actuator=actuator)
        game.move(Direction.LEFT)
        self.assertTrue(actuator.calls[-1][1]["terminated"])

        calls = len(actuator.calls)
        game.move(Direction.RIGHT)
        self.assertEqual(len(actuator.calls), calls)

        game.keep_playing()
        self.assertEqual(actuator.continued, 1)
        self.assertFalse(actuator.calls[-1][1]["terminated"])
        self.assertTrue(actuator.calls[-1][1]["won"])

    def test_observers_receive_typed_events(self):
        game = make_game([
            [2, 2, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0]
        ])
        moves, restarts, kept = [], [], []
        game.subscribe(MoveResolved, moves.append)
        game.subscribe(Restarted, restarts.append)
        game.subscribe(KeptPlaying, kept.append)

        game.handle(Move(Direction.LEFT))
        self.assertEqual(len(moves), 1)
        self.assertEqual(restarts, [])
        event = moves[0]
        self.assertTrue(event.moved)
        self.assertEqual(event.score_delta, 4)
        self.assertEqual(event.merged_values, [4])
        self.assertEqual(event.spawned.value, 2)

        game.handle(KeepPlaying())
        self.assertEqual(len(kept), 1)
        self.assertTrue(game.state.keep_playing)

        game.handle(Restart())
        self.assertEqual(len(restarts), 1)
        self.assertEqual(len(moves), 1)

    def test_unsubscribe(self):
        game = make_game()
        moves = []
        game.subscribe(MoveResolved, moves.append)
        game.events.unsubscribe(MoveResolved, moves.append)
        game.move(Direction.LEFT)
        game.move(Direction.RIGHT)
        self.assertEqual(moves, [])

    def test_unknown_input_event_is_ignored(self):
        game = make_game(rng=FixedRng())
        before = board(game).copy()
        self.assertIsNone(game.handle("jump"))
        np.testing.assert_array_equal(before, board(game))


if __name__ == "__main__":
    unittest.main()
