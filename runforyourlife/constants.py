MAX_PLAYERS = 7
MIN_PLAYERS_TO_START = 2

# Display names longer than this are truncated on join.
NAME_MAX_LENGTH = 20

# Round duration bounds, in seconds.
DEFAULT_DURATION = 10
MIN_DURATION = 5
MAX_DURATION = 60

__all__ = [
    "MAX_PLAYERS",
    "MIN_PLAYERS_TO_START",
    "NAME_MAX_LENGTH",
    "DEFAULT_DURATION",
    "MIN_DURATION",
    "MAX_DURATION",
]
