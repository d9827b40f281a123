"""
Feed reconciliation - turns consecutive device snapshots into game events.

The device only reports the darts of the current turn plus a status/event
tag. Comparing each snapshot with the previous one yields:
- NEW_THROW: feed grew, new darts appended
- UNDO: feed shrank because a single dart was removed by hand/simulator
- TAKEOUT: feed shrank while darts are being collected (ignored)
- TURN_END: darts collected, next player's turn
- NOISE: nothing actionable (repeats, unknown tags)
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from autocade.core import (
    FeedSnapshot,
    Throw,
    TAKEOUT,
    TAKEOUT_IN_PROGRESS,
    TAKEOUT_FINISHED,
    RESET,
    THROW_REMOVED,
)

logger = logging.getLogger(__name__)


class FeedEvent(Enum):
    """Classification of one snapshot relative to the previous one."""
    NEW_THROW = "new_throw"
    UNDO = "undo"
    TAKEOUT = "takeout"
    TURN_END = "turn_end"
    NOISE = "noise"


@dataclass
class ReconcilerConfig:
    """Which producer tags mark a turn boundary or an undo."""
    turn_end_statuses: Tuple[str, ...] = (TAKEOUT, TAKEOUT_IN_PROGRESS, TAKEOUT_FINISHED)
    turn_end_events: Tuple[str, ...] = (TAKEOUT_FINISHED, RESET)
    undo_events: Tuple[str, ...] = (THROW_REMOVED,)

    # True: a boundary needs an emptied feed that previously held darts.
    # False: the boundary fires on the transition into the tag itself.
    require_empty_feed: bool = True


# X01 ends a turn once the board has been cleared
X01_RECONCILER = ReconcilerConfig()

# Killer advances on the "Takeout finished" event alone
KILLER_RECONCILER = ReconcilerConfig(
    turn_end_statuses=(),
    turn_end_events=(TAKEOUT_FINISHED,),
    require_empty_feed=False,
)


@dataclass
class FeedChange:
    """Result of observing one snapshot."""
    kind: FeedEvent
    added: List[Throw] = field(default_factory=list)
    removed: List[Throw] = field(default_factory=list)


class FeedReconciler:
    """
    Diffs device snapshots against the last-seen one.

    Holds no reference to the producer, only the previous throw list and
    tags needed for the next comparison.
    """

    def __init__(self, config: Optional[ReconcilerConfig] = None):
        self.config = config or X01_RECONCILER
        self.previous_throws: List[Throw] = []
        self.previous_tags: Tuple[str, str] = ("", "")

    def _is_boundary_tag(self, snapshot: FeedSnapshot) -> bool:
        return (
            snapshot.status in self.config.turn_end_statuses
            or snapshot.event in self.config.turn_end_events
        )

    def classify(self, snapshot: FeedSnapshot) -> FeedChange:
        """
        Classify a snapshot without updating the baseline.

        Args:
            snapshot: Current device state

        Returns:
            FeedChange describing the transition from the previous snapshot
        """
        previous = self.previous_throws
        current = snapshot.throws
        boundary = self._is_boundary_tag(snapshot)

        if boundary:
            if self.config.require_empty_feed:
                if not current and previous:
                    return FeedChange(FeedEvent.TURN_END, removed=list(previous))
            elif (snapshot.status, snapshot.event) != self.previous_tags:
                return FeedChange(FeedEvent.TURN_END)

        if len(current) < len(previous):
            removed = list(previous[len(current):])
            if snapshot.event in self.config.undo_events:
                return FeedChange(FeedEvent.UNDO, removed=removed)
            # Physical takeout (or any unexplained shrink) never undoes a dart
            return FeedChange(FeedEvent.TAKEOUT, removed=removed)

        if len(current) > len(previous):
            return FeedChange(FeedEvent.NEW_THROW, added=list(current[len(previous):]))

        return FeedChange(FeedEvent.NOISE)

    def observe(self, snapshot: FeedSnapshot) -> FeedChange:
        """Classify a snapshot and make it the new baseline."""
        change = self.classify(snapshot)

        if change.kind is not FeedEvent.NOISE:
            logger.debug(
                f"Feed {change.kind.value}: {len(self.previous_throws)} -> "
                f"{len(snapshot.throws)} throws "
                f"(status={snapshot.status!r}, event={snapshot.event!r})"
            )

        self.previous_throws = list(snapshot.throws)
        self.previous_tags = (snapshot.status, snapshot.event)
        return change

    def reset(self) -> None:
        """Forget the baseline."""
        self.previous_throws = []
        self.previous_tags = ("", "")
