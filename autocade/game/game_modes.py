"""
X01 rules: settings, turn phases and per-dart resolution.
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from autocade.core import Throw
from autocade.board import ThrowValue

IN_OUT_MODES = ("single", "double")
MATCH_MODES = ("off", "legs", "sets")

MAX_DARTS_PER_TURN = 3


@dataclass
class X01Settings:
    """
    X01 game configuration.

    Rules:
    - Start at base_score, subtract each dart
    - Must finish exactly on 0
    - Double-in: darts only count after the first double
    - Double-out: the finishing dart must be a double (Bull counts)
    - Bust if the score goes below 0, to exactly 1 (double-out),
      or to 0 without a valid finish
    """
    base_score: int = 501
    in_mode: str = "single"
    out_mode: str = "double"
    match_mode: str = "off"
    legs_to_win: int = 3
    sets_to_win: int = 3

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for impossible settings."""
        if self.base_score <= 1:
            raise ValueError("base_score must be greater than 1")
        if self.in_mode not in IN_OUT_MODES:
            raise ValueError(f"in_mode must be one of {IN_OUT_MODES}")
        if self.out_mode not in IN_OUT_MODES:
            raise ValueError(f"out_mode must be one of {IN_OUT_MODES}")
        if self.match_mode not in MATCH_MODES:
            raise ValueError(f"match_mode must be one of {MATCH_MODES}")
        if self.legs_to_win <= 0:
            raise ValueError("legs_to_win must be positive")
        if self.sets_to_win <= 0:
            raise ValueError("sets_to_win must be positive")

    @property
    def double_in(self) -> bool:
        return self.in_mode == "double"

    @property
    def double_out(self) -> bool:
        return self.out_mode == "double"

    def get_name(self) -> str:
        """Get game mode name, e.g. '501 (Double Out)'."""
        suffix = ""
        if self.double_out:
            suffix = " (Double Out)"
        if self.double_in:
            suffix += " (Double In)"
        return f"{self.base_score}{suffix}"


class TurnPhase(Enum):
    """Phases of one X01 turn."""
    AWAITING_ENTRY = "awaiting_entry"  # Double-in not yet satisfied
    ACCUMULATING = "accumulating"
    BUSTED = "busted"
    COMPLETED = "completed"  # Leg checked out


def resolve_dart(
        projected: int,
        value: ThrowValue,
        double_out: bool
) -> Tuple[TurnPhase, Optional[str]]:
    """
    Resolve the turn phase after a scoring dart.

    Args:
        projected: Remaining score if the turn so far (including this dart) counts
        value: The dart just thrown
        double_out: Require a double to finish

    Returns:
        (phase, message) where message is e.g. "BUST!" or "CHECKOUT!"
    """
    if projected < 0:
        return TurnPhase.BUSTED, "BUST! (Score below 0)"

    if projected == 0:
        if double_out and not value.is_double:
            return TurnPhase.BUSTED, "BUST! (Must finish on double)"
        return TurnPhase.COMPLETED, "CHECKOUT!"

    if projected == 1 and double_out:
        return TurnPhase.BUSTED, "BUST! (Cannot checkout on 1)"

    return TurnPhase.ACCUMULATING, None


@dataclass
class TurnDart:
    """One dart as recorded in the current turn."""
    throw: Throw
    value: ThrowValue
    points: int  # Points added to the running total (0 if not scoring)
    phase_after: TurnPhase
    counted: bool = True  # Included in dart statistics
    opened: bool = False  # This dart satisfied double-in


@dataclass
class TurnAccumulator:
    """
    The darts of one player's turn.

    Created when the turn begins, applied or discarded when it ends.
    """
    player_idx: int
    score_at_turn_start: int
    initial_phase: TurnPhase = TurnPhase.ACCUMULATING
    darts: List[TurnDart] = field(default_factory=list)
    running_total: int = 0

    @property
    def phase(self) -> TurnPhase:
        if not self.darts:
            return self.initial_phase
        return self.darts[-1].phase_after

    @property
    def bust(self) -> bool:
        return self.phase is TurnPhase.BUSTED

    @property
    def throws(self) -> List[Throw]:
        return [d.throw for d in self.darts]

    @property
    def darts_remaining(self) -> int:
        return max(0, MAX_DARTS_PER_TURN - len(self.darts))

    @property
    def is_full(self) -> bool:
        return len(self.darts) >= MAX_DARTS_PER_TURN

    @property
    def projected(self) -> int:
        """Remaining score if the turn ended now."""
        if self.bust:
            return self.score_at_turn_start
        return self.score_at_turn_start - self.running_total
