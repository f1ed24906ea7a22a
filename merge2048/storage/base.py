class StorageManager:
    """
    Interface the game uses to persist a session and the best score.

    `load()` returns the serialized state or None; `save()` may silently do
    nothing when the backend is unavailable. The game never blocks on storage.
    """

    def load(self):
        raise NotImplementedError

    def save(self, state):
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError

    def get_best_score(self):
        raise NotImplementedError

    def set_best_score(self, score):
        raise NotImplementedError
