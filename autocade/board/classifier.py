"""
Throw classification - maps a raw segment to its scoring value.
"""
from dataclasses import dataclass

from autocade.core import Throw, BULL_NUMBER


@dataclass(frozen=True)
class ThrowValue:
    """Semantic value of one dart."""
    points: int
    is_single: bool = False
    is_double: bool = False
    is_triple: bool = False
    is_miss: bool = False
    is_bull: bool = False  # Outer or inner bull

    @property
    def multiplier(self) -> int:
        if self.is_miss:
            return 0
        if self.is_triple:
            return 3
        if self.is_double:
            return 2
        return 1


MISS = ThrowValue(points=0, is_miss=True)


def classify_throw(number: int, multiplier: int) -> ThrowValue:
    """
    Classify a raw segment.

    Anything that is not a real board segment (unknown number, multiplier
    outside 1-3, triple bull) is normalised to a miss.

    Args:
        number: Segment number (1-20, 25 for bull)
        multiplier: 0=Miss, 1=Single, 2=Double, 3=Triple

    Returns:
        ThrowValue with points = number * multiplier
    """
    if not number or multiplier not in (1, 2, 3):
        return MISS

    is_bull = number == BULL_NUMBER
    if not (1 <= number <= 20 or is_bull):
        return MISS
    if is_bull and multiplier == 3:
        return MISS

    return ThrowValue(
        points=number * multiplier,
        is_single=multiplier == 1,
        is_double=multiplier == 2,
        is_triple=multiplier == 3,
        is_bull=is_bull,
    )


def classify(throw: Throw) -> ThrowValue:
    """Classify a Throw record."""
    return classify_throw(throw.number, throw.multiplier)
