"""
Core data types for the scoring core.
Defines the contract between the device feed and the game engines.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Producer status / event vocabulary
TAKEOUT = "Takeout"
TAKEOUT_IN_PROGRESS = "Takeout in progress"
TAKEOUT_FINISHED = "Takeout finished"
RESET = "Reset"
THROW_REMOVED = "Throw removed"

BULL_NUMBER = 25


@dataclass(frozen=True)
class Throw:
    """
    A single dart detection as reported by the device.

    The core never mutates a Throw; multiplier 0 denotes a miss.
    """
    number: int  # 1-20, or 25 for the bull
    multiplier: int  # 0=Miss, 1=Single, 2=Double, 3=Triple
    name: str = ""  # Segment name from the producer (e.g. "T20")

    @property
    def label(self) -> str:
        """Checkout-style label: S20, D16, T19, S25, Bull or Miss."""
        valid_number = 1 <= self.number <= 20 or self.number == BULL_NUMBER
        if self.multiplier not in (1, 2, 3) or not valid_number:
            return "Miss"
        if self.number == BULL_NUMBER and self.multiplier == 3:
            return "Miss"
        if self.number == BULL_NUMBER and self.multiplier == 2:
            return "Bull"
        prefix = {1: "S", 2: "D", 3: "T"}[self.multiplier]
        return f"{prefix}{self.number}"

    @classmethod
    def from_label(cls, label: str) -> "Throw":
        """
        Parse a checkout-style label.

        Unknown labels become a miss rather than raising, mirroring how the
        classifier treats malformed segments.
        """
        text = label.strip().upper()
        if text in ("BULL", "DB", "D25"):
            return cls(number=BULL_NUMBER, multiplier=2, name=label)
        if text in ("SB", "25"):
            return cls(number=BULL_NUMBER, multiplier=1, name=label)

        prefix, digits = text[:1], text[1:]
        multiplier = {"S": 1, "D": 2, "T": 3}.get(prefix)
        if multiplier is None or not digits.isdigit():
            return cls(number=0, multiplier=0, name=label)

        return cls(number=int(digits), multiplier=multiplier, name=label)

    @classmethod
    def from_dict(cls, data: Any) -> "Throw":
        """
        Build a Throw from device JSON.

        Accepts ``{"segment": {...}}`` as sent by the board, a flat
        ``{"number", "multiplier", "name"}`` mapping, or a plain label string.
        Anything malformed (missing entry, non-numeric fields) becomes a miss.
        """
        if isinstance(data, str):
            return cls.from_label(data)
        if not isinstance(data, dict):
            return cls(0, 0)

        segment = data.get("segment", data)
        if not isinstance(segment, dict):
            return cls(0, 0)

        try:
            number = int(segment.get("number") or 0)
            multiplier = int(segment.get("multiplier") or 0)
        except (TypeError, ValueError):
            logger.debug(f"Malformed segment treated as a miss: {segment!r}")
            return cls(0, 0)

        return cls(number=number, multiplier=multiplier, name=str(segment.get("name") or ""))


@dataclass
class FeedSnapshot:
    """
    One observation of the device state.

    ``throws`` only ever holds the darts of the current, uncommitted turn;
    the producer clears it once the darts are collected.
    """
    throws: List[Throw] = field(default_factory=list)
    status: str = ""
    event: str = ""

    @property
    def num_throws(self) -> int:
        return len(self.throws)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FeedSnapshot":
        """Parse a device state message."""
        data = data or {}
        return cls(
            throws=[Throw.from_dict(t) for t in data.get("throws") or []],
            status=str(data.get("status") or ""),
            event=str(data.get("event") or ""),
        )
