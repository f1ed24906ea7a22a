import copy

from merge2048.storage.base import StorageManager


class InMemoryStorage(StorageManager):
    """Keeps state for the lifetime of the process only."""

    def __init__(self):
        self._state = None
        self._best_score = 0

    def load(self):
        return copy.deepcopy(self._state)

    def save(self, state):
        self._state = copy.deepcopy(state)

    def clear(self):
        self._state = None

    def get_best_score(self):
        return self._best_score

    def set_best_score(self, score):
        self._best_score = int(score)
