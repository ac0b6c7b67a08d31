"""IMC Bot Configuration Module.

Settings are read from the environment (and an optional .env file).
"""
from config.settings import (
    BASE_DIR,
    STATE_STORAGE_PATH,
    PERSIST_STATE,
    CHOICE_MATCH_THRESHOLD,
    LOG_LEVEL,
)

__all__ = [
    "BASE_DIR",
    "STATE_STORAGE_PATH",
    "PERSIST_STATE",
    "CHOICE_MATCH_THRESHOLD",
    "LOG_LEVEL",
]
