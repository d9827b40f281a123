"""
Dartboard layout: sector order and distances between numbers.
"""
from typing import Tuple

# Official sector sequence (clockwise from top)
SECTOR_SEQUENCE: Tuple[int, ...] = (20, 1, 18, 4, 13, 6, 10, 15, 2, 17,
                                    3, 19, 7, 16, 8, 11, 14, 9, 12, 5)

BOARD_NUMBERS: Tuple[int, ...] = tuple(range(1, 21))


def sector_index(number: int) -> int:
    """
    Position of a number on the board (0 = top, clockwise).

    Returns:
        Index into SECTOR_SEQUENCE, or -1 for numbers not on the ring (bull, miss)
    """
    try:
        return SECTOR_SEQUENCE.index(number)
    except ValueError:
        return -1


def board_distance(n1: int, n2: int) -> int:
    """
    Number of sectors between two numbers, going the short way round.

    Args:
        n1: First number (1-20)
        n2: Second number (1-20)

    Returns:
        Distance in sectors (0-10); 0 if either number is not on the ring
    """
    i1 = sector_index(n1)
    i2 = sector_index(n2)
    if i1 == -1 or i2 == -1:
        return 0

    diff = abs(i1 - i2)
    return min(diff, len(SECTOR_SEQUENCE) - diff)
