"""
Core module - shared data types and YAML I/O.
"""
from .types import (
    Throw,
    FeedSnapshot,
    BULL_NUMBER,
    TAKEOUT,
    TAKEOUT_IN_PROGRESS,
    TAKEOUT_FINISHED,
    RESET,
    THROW_REMOVED,
)
from .io_utils import (
    atomic_write_yaml,
    load_yaml,
)

__all__ = [
    # Types
    "Throw",
    "FeedSnapshot",
    "BULL_NUMBER",
    # Feed vocabulary
    "TAKEOUT",
    "TAKEOUT_IN_PROGRESS",
    "TAKEOUT_FINISHED",
    "RESET",
    "THROW_REMOVED",
    # I/O
    "atomic_write_yaml",
    "load_yaml",
]
