"""
Game Configuration for merge2048.

Central place for the rules that are tunable without touching the move logic.
Everything here is a plain module-level constant so that the engine, the
environments and the CLI all read the same values.
"""

# --- Board ---
GRID_SIZE = 4

# Number of random tiles placed on a fresh board.
START_TILES = 2

# The objective tile. Producing it by a merge sets the "won" flag.
WIN_TILE = 2048

# --- Spawning ---
# A spawned tile is a 2 most of the time and a 4 otherwise.
SPAWN_VALUES = (2, 4)
SPAWN_PROBABILITIES = (0.9, 0.1)

# --- Persistence ---
# Environment variable that overrides where the CLI keeps the saved game.
STATE_FILE_ENV = "MERGE2048_STATE_FILE"
DEFAULT_STATE_FILE = "~/.merge2048/state.json"
