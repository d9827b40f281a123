"""
Caller - announcement cues for the presentation layer.

The engines resolve state first and then ask the caller for cues; the
caller only queues cue keys (e.g. "60", "t20", "game_shot"). Choosing a
voice pack and playing audio happen outside the scoring core.
"""
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional
import logging

from autocade.checkout import MAX_CHECKOUT

logger = logging.getLogger(__name__)


@dataclass
class CallerSettings:
    """Which announcements are enabled."""
    enabled: bool = True
    announce_all_darts: bool = False  # Each dart, or just the turn total
    announce_checkouts: bool = True  # Remaining score when <= 170
    announce_busts: bool = True
    announce_game_start: bool = True


class Caller:
    """Queues announcement cues according to CallerSettings."""

    def __init__(self, settings: Optional[CallerSettings] = None, max_queue: int = 64):
        self.settings = settings or CallerSettings()
        self.queue: Deque[str] = deque(maxlen=max_queue)

    def _queue(self, cue: str) -> None:
        self.queue.append(cue)
        logger.debug(f"Cue queued: {cue}")

    def call_score(self, score: int) -> None:
        """Call a turn total (0-180)."""
        if not self.settings.enabled:
            return
        self._queue(str(score))

    def call_dart(self, label: str) -> None:
        """Call a single dart, e.g. 't20'."""
        if not self.settings.enabled or not self.settings.announce_all_darts:
            return
        self._queue(label.lower())

    def call_remaining(self, remaining: int) -> None:
        """Call the remaining score when it is in checkout range."""
        if not self.settings.enabled or not self.settings.announce_checkouts:
            return
        if 2 <= remaining <= MAX_CHECKOUT:
            self._queue(str(remaining))

    def call_game_on(self) -> None:
        if not self.settings.enabled or not self.settings.announce_game_start:
            return
        self._queue("game_on")

    def call_game_shot(self) -> None:
        if not self.settings.enabled:
            return
        self._queue("game_shot")

    def call_bust(self) -> None:
        if not self.settings.enabled or not self.settings.announce_busts:
            return
        self._queue("busted")

    def drain(self) -> List[str]:
        """Return and clear all queued cues."""
        cues = list(self.queue)
        self.queue.clear()
        return cues

    def stop_all(self) -> None:
        """Drop pending cues."""
        self.queue.clear()
