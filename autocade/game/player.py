"""
Player data structure and statistics.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict

from autocade.board import ThrowValue


@dataclass
class Player:
    """Represents a player taking part in a game."""
    id: str
    name: str


@dataclass
class DartStats:
    """Cumulative dart statistics for one player (per leg or per match)."""
    darts_thrown: int = 0
    hits: int = 0
    misses: int = 0
    singles: int = 0
    doubles: int = 0
    triples: int = 0
    bulls: int = 0

    turns: int = 0
    busts: int = 0
    points_scored: int = 0  # Points actually taken off the score
    highest_turn: int = 0  # Best non-bust turn total

    def record_dart(self, value: ThrowValue) -> None:
        """Count one observed dart."""
        self.darts_thrown += 1
        if value.is_miss:
            self.misses += 1
            return

        self.hits += 1
        if value.is_single:
            self.singles += 1
        elif value.is_double:
            self.doubles += 1
        elif value.is_triple:
            self.triples += 1
        if value.is_bull:
            self.bulls += 1

    def remove_dart(self, value: ThrowValue) -> None:
        """Reverse record_dart for an undone dart (counts never go negative)."""
        self.darts_thrown = max(0, self.darts_thrown - 1)
        if value.is_miss:
            self.misses = max(0, self.misses - 1)
            return

        self.hits = max(0, self.hits - 1)
        if value.is_single:
            self.singles = max(0, self.singles - 1)
        elif value.is_double:
            self.doubles = max(0, self.doubles - 1)
        elif value.is_triple:
            self.triples = max(0, self.triples - 1)
        if value.is_bull:
            self.bulls = max(0, self.bulls - 1)

    def record_turn(self, turn_total: int, bust: bool) -> None:
        """
        Count a finished turn.

        Args:
            turn_total: Points thrown in the turn
            bust: Whether the turn busted (points are not scored)
        """
        self.turns += 1
        if bust:
            self.busts += 1
            return

        self.points_scored += turn_total
        if turn_total > self.highest_turn:
            self.highest_turn = turn_total

    def merge(self, other: "DartStats") -> None:
        """Accumulate another record (e.g. a finished leg) into this one."""
        self.darts_thrown += other.darts_thrown
        self.hits += other.hits
        self.misses += other.misses
        self.singles += other.singles
        self.doubles += other.doubles
        self.triples += other.triples
        self.bulls += other.bulls
        self.turns += other.turns
        self.busts += other.busts
        self.points_scored += other.points_scored
        self.highest_turn = max(self.highest_turn, other.highest_turn)

    @property
    def average_per_dart(self) -> float:
        """Calculate average points per dart."""
        if self.darts_thrown == 0:
            return 0.0
        return self.points_scored / self.darts_thrown

    @property
    def three_dart_average(self) -> float:
        return self.average_per_dart * 3

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["three_dart_average"] = round(self.three_dart_average, 2)
        return data
