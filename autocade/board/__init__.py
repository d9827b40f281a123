"""
Board module - dartboard layout and throw classification.
"""
from .geometry import SECTOR_SEQUENCE, BOARD_NUMBERS, sector_index, board_distance
from .classifier import ThrowValue, MISS, classify_throw, classify

__all__ = [
    "SECTOR_SEQUENCE",
    "BOARD_NUMBERS",
    "sector_index",
    "board_distance",
    "ThrowValue",
    "MISS",
    "classify_throw",
    "classify",
]
