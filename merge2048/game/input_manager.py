import logging

from merge2048.game.direction import Direction
from merge2048.game.events import KeepPlaying, Move, Restart

logger = logging.getLogger(__name__)

# Same letter bindings as the browser game: WASD and vim keys.
KEY_MAP = {
    'w': Direction.UP, 'k': Direction.UP,
    'd': Direction.RIGHT, 'l': Direction.RIGHT,
    's': Direction.DOWN, 'j': Direction.DOWN,
    'a': Direction.LEFT, 'h': Direction.LEFT,
}
RESTART_KEY = 'r'
KEEP_PLAYING_KEY = 'c'


class KeyboardInputManager:
    """
    Translates typed keys into input events and hands them to a handler
    (normally `GameManager.handle`).
    """

    def __init__(self, handler):
        self.handler = handler

    @staticmethod
    def event_for_key(key):
        """The input event bound to `key`, or None for an unbound key."""
        key = key.strip().lower()
        if key in KEY_MAP:
            return Move(KEY_MAP[key])
        if key == RESTART_KEY:
            return Restart()
        if key == KEEP_PLAYING_KEY:
            return KeepPlaying()
        return None

    def press(self, key):
        event = self.event_for_key(key)
        if event is None:
            logger.debug("Ignoring unbound key %r", key)
            return None
        self.handler(event)
        return event
