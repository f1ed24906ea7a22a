"""
JSON file persistence.

The whole store is one small JSON document:
    {"bestScore": 1234, "gameState": {...}}
Read and write failures are logged and swallowed so that a missing or
read-only file just means a fresh game.
"""

import json
import logging
import os

from merge2048.storage.base import StorageManager

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "bestScore"
GAME_STATE_KEY = "gameState"


class JsonFileStorage(StorageManager):

    def __init__(self, path):
        self.path = os.path.abspath(os.path.expanduser(path))

    def load(self):
        return self._read().get(GAME_STATE_KEY)

    def save(self, state):
        data = self._read()
        data[GAME_STATE_KEY] = state
        self._write(data)

    def clear(self):
        data = self._read()
        if data.pop(GAME_STATE_KEY, None) is not None:
            self._write(data)

    def get_best_score(self):
        try:
            return int(self._read().get(BEST_SCORE_KEY, 0))
        except (OverflowError, TypeError, ValueError):
            return 0

    def set_best_score(self, score):
        data = self._read()
        data[BEST_SCORE_KEY] = int(score)
        self._write(data)

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read game store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring game store %s: expected a JSON object", self.path)
            return {}
        return data

    def _write(self, data):
        tmp_path = self.path + ".tmp"
        try:
            os.makedirs(os.path.dirname(self.path), exist_ok=True)
            with open(tmp_path, "w") as fh:
                json.dump(data, fh)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning("Could not write game store %s: %s", self.path, exc)
