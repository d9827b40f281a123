"""
X01 game state management: turns, legs, sets and the match.

The engine consumes device snapshots one at a time. Every snapshot is
fully resolved before process() returns; nothing is deferred.
"""
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
import logging

from autocade.core import FeedSnapshot, Throw
from autocade.board import classify
from autocade.checkout import Checkout, MAX_CHECKOUT, suggest_checkouts
from .caller import Caller
from .feed import FeedEvent, FeedReconciler, X01_RECONCILER
from .game_modes import (
    TurnAccumulator,
    TurnDart,
    TurnPhase,
    X01Settings,
    resolve_dart,
)
from .player import DartStats, Player

logger = logging.getLogger(__name__)


@dataclass
class PlayerLegState:
    """Per-player state within one leg."""
    player_id: str
    remaining: int
    has_started: bool = True  # False until double-in is satisfied
    is_winner: bool = False
    stats: DartStats = field(default_factory=DartStats)


@dataclass
class PlayerMatchState:
    """Per-player state across the legs of one match."""
    player_id: str
    legs_won: int = 0
    sets_won: int = 0
    legs_won_total: int = 0
    stats: DartStats = field(default_factory=DartStats)


class X01Engine:
    """
    X01 turn/leg/match state machine.

    Turn flow:
    1. AWAITING_ENTRY (double-in only): non-doubles are counted but score nothing
    2. ACCUMULATING: each dart adds to the turn total
    3. BUSTED / COMPLETED: further darts in the turn do not score

    The turn is applied when the device reports the darts were collected.
    A checkout is provisional until then, so undoing the finishing dart
    restores the leg.
    """

    def __init__(
            self,
            players: List[Player],
            settings: Optional[X01Settings] = None,
            caller: Optional[Caller] = None
    ):
        """
        Initialize X01 engine and start a match.

        Args:
            players: Players in throwing order
            settings: X01 configuration (default: 501 double-out, single leg)
            caller: Optional caller receiving announcement cues
        """
        if not players:
            raise ValueError("X01 needs at least one player")

        self.players = list(players)
        self.settings = settings or X01Settings()
        self.caller = caller
        self.reconciler = FeedReconciler(X01_RECONCILER)

        self.log: List[str] = []
        self.new_match()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def new_match(self) -> None:
        """Reset everything and start leg 1 of set 1."""
        self.match_states = [PlayerMatchState(player_id=p.id) for p in self.players]
        self.set_starter_idx = 0
        self.leg_starter_idx = 0
        self.set_number = 1
        self.leg_number = 0
        self.match_winner: Optional[Player] = None
        self.log.clear()

        logger.info(
            f"Match started: {self.settings.get_name()}, match mode "
            f"'{self.settings.match_mode}' with {len(self.players)} players"
        )
        self._start_leg()

    def _start_leg(self) -> None:
        self.leg_number += 1
        self.legs = [
            PlayerLegState(
                player_id=p.id,
                remaining=self.settings.base_score,
                has_started=not self.settings.double_in,
            )
            for p in self.players
        ]
        self.leg_winner: Optional[Player] = None
        self.current_player_idx = self.leg_starter_idx
        # Cleared by the first dart of the leg
        self._leg_untouched = True
        self.turn = self._new_turn()

        logger.info(
            f"Leg {self.leg_number} (set {self.set_number}) started, "
            f"{self.current_player.name} to throw"
        )
        if self.caller:
            self.caller.call_game_on()

    def _new_turn(self) -> TurnAccumulator:
        leg = self.legs[self.current_player_idx]
        initial = TurnPhase.ACCUMULATING if leg.has_started else TurnPhase.AWAITING_ENTRY
        return TurnAccumulator(
            player_idx=self.current_player_idx,
            score_at_turn_start=leg.remaining,
            initial_phase=initial,
        )

    # ------------------------------------------------------------------
    # Feed handling
    # ------------------------------------------------------------------

    def process(self, snapshot: FeedSnapshot) -> List[str]:
        """
        Process one device snapshot.

        Args:
            snapshot: Current device state

        Returns:
            Event messages produced by this snapshot
        """
        change = self.reconciler.observe(snapshot)
        events: List[str] = []

        if change.kind is FeedEvent.NEW_THROW:
            for throw in change.added:
                events.extend(self.add_throw(throw))

        elif change.kind is FeedEvent.UNDO:
            for _ in change.removed:
                events.extend(self.undo_last_throw())

        elif change.kind is FeedEvent.TURN_END:
            if self._is_untouched_leg():
                logger.debug("Ignoring takeout before the first dart of a fresh leg")
            else:
                events.extend(self.end_turn())

        return events

    def _is_untouched_leg(self) -> bool:
        leg = self.legs[self.current_player_idx]
        return (
            self._leg_untouched
            and leg.remaining == self.settings.base_score
            and self.turn.running_total == 0
        )

    # ------------------------------------------------------------------
    # Darts
    # ------------------------------------------------------------------

    def add_throw(self, throw: Throw) -> List[str]:
        """
        Add a dart for the current player.

        Args:
            throw: Detected dart

        Returns:
            Event messages
        """
        if self.match_winner is not None:
            return []

        player = self.current_player
        leg = self.legs[self.current_player_idx]
        turn = self.turn
        value = classify(throw)

        # Extra darts never score but stay in the turn so a feed undo removes them
        if turn.is_full:
            logger.debug(f"Ignoring extra dart {throw.label}: turn already has 3 darts")
            turn.darts.append(TurnDart(throw, value, 0, turn.phase, counted=False))
            return []

        self._leg_untouched = False

        # Leg already checked out: keep the dart only so undo stays aligned
        if turn.phase is TurnPhase.COMPLETED:
            turn.darts.append(TurnDart(throw, value, 0, TurnPhase.COMPLETED, counted=False))
            return []

        leg.stats.record_dart(value)
        if self.caller:
            self.caller.call_dart(throw.label)

        events = [f"{player.name}: {throw.label}"]

        if turn.phase is TurnPhase.BUSTED:
            turn.darts.append(TurnDart(throw, value, 0, TurnPhase.BUSTED))
            self.log.extend(events)
            return events

        opened = False
        if turn.phase is TurnPhase.AWAITING_ENTRY:
            if not value.is_double:
                turn.darts.append(TurnDart(throw, value, 0, TurnPhase.AWAITING_ENTRY))
                events.append(f"{player.name}: No score (double in required)")
                self.log.extend(events)
                return events
            leg.has_started = True
            opened = True
            events.append(f"{player.name}: Double in!")

        turn.running_total += value.points
        phase, message = resolve_dart(
            turn.score_at_turn_start - turn.running_total,
            value,
            self.settings.double_out,
        )
        turn.darts.append(TurnDart(throw, value, value.points, phase, opened=opened))

        if phase is TurnPhase.BUSTED:
            events.append(f"{player.name}: {message}")
            logger.info(f"{player.name} busted on {throw.label}: {message}")
            if self.caller:
                self.caller.call_bust()

        elif phase is TurnPhase.COMPLETED:
            leg.remaining = 0
            leg.is_winner = True
            self.leg_winner = player
            events.append(f"{player.name}: {message}")
            logger.info(f"{player.name} checked out on {throw.label}")
            if self.caller:
                self.caller.call_game_shot()

        logger.debug(
            f"{player.name} hit {throw.label}: {value.points} points "
            f"(Turn: {turn.running_total}, projected {turn.projected})"
        )
        self.log.extend(events)
        return events

    def undo_last_throw(self) -> List[str]:
        """
        Remove the most recent dart of the current turn.

        Returns:
            Event messages (empty if there was nothing to undo)
        """
        turn = self.turn
        if self.match_winner is not None or not turn.darts:
            return []

        player = self.current_player
        leg = self.legs[self.current_player_idx]
        # Phase falls back to the previous dart. Darts after a bust scored
        # nothing, so removing one leaves the bust; removing the busting dart clears it
        dart = turn.darts.pop()

        if dart.counted:
            leg.stats.remove_dart(dart.value)
        turn.running_total = max(0, turn.running_total - dart.points)
        if dart.opened:
            leg.has_started = False

        if leg.is_winner and turn.phase is not TurnPhase.COMPLETED:
            leg.is_winner = False
            leg.remaining = turn.score_at_turn_start
            self.leg_winner = None
            logger.info(f"Checkout by {player.name} undone")

        events = [f"{player.name}: Undo {dart.throw.label}"]
        logger.debug(f"Undone: {dart.throw.label} (Turn: {turn.running_total})")
        self.log.extend(events)
        return events

    # ------------------------------------------------------------------
    # Turns and legs
    # ------------------------------------------------------------------

    def end_turn(self) -> List[str]:
        """
        Apply the current turn and advance to the next player.

        Returns:
            Event messages
        """
        if self.match_winner is not None:
            return []

        player = self.current_player
        leg = self.legs[self.current_player_idx]
        turn = self.turn
        total = turn.running_total

        if self.leg_winner is not None:
            leg.stats.record_turn(total, bust=False)
            events = self._complete_leg()
            self.log.extend(events)
            return events

        bust = turn.bust
        leg.stats.record_turn(total, bust)

        if bust:
            events = [f"{player.name} busted, stays on {leg.remaining}"]
            if self.caller:
                self.caller.call_score(0)
        else:
            leg.remaining -= total
            events = [f"{player.name} scored {total} ({leg.remaining} left)"]
            if self.caller:
                self.caller.call_score(total)

        self.next_player()
        if self.caller:
            self.caller.call_remaining(self.legs[self.current_player_idx].remaining)

        self.log.extend(events)
        return events

    def next_player(self) -> None:
        """Advance to next player and open their turn."""
        self.current_player_idx = (self.current_player_idx + 1) % len(self.players)
        self.turn = self._new_turn()
        logger.debug(f"Next player: {self.current_player.name}")

    def _complete_leg(self) -> List[str]:
        winner_idx = self.current_player_idx
        winner = self.players[winner_idx]
        events = [f"{winner.name} wins leg {self.leg_number}!"]

        for match_state, leg in zip(self.match_states, self.legs):
            match_state.stats.merge(leg.stats)

        mode = self.settings.match_mode
        record = self.match_states[winner_idx]
        match_won = False

        if mode == "off":
            match_won = True
        else:
            record.legs_won += 1
            record.legs_won_total += 1

            if mode == "sets" and record.legs_won >= self.settings.legs_to_win:
                record.sets_won += 1
                for match_state in self.match_states:
                    match_state.legs_won = 0
                events.append(f"{winner.name} wins set {self.set_number}!")

                if record.sets_won >= self.settings.sets_to_win:
                    match_won = True
                else:
                    self.set_number += 1
                    self.set_starter_idx = (self.set_starter_idx + 1) % len(self.players)
                    self.leg_starter_idx = self.set_starter_idx

            elif mode == "legs" and record.legs_won >= self.settings.legs_to_win:
                match_won = True

            else:
                self.leg_starter_idx = (self.leg_starter_idx + 1) % len(self.players)

        if match_won:
            self.match_winner = winner
            events.append(f"{winner.name} wins the match!")
            logger.info(f"Match finished! Winner: {winner.name}")
        else:
            logger.info(f"Leg {self.leg_number} won by {winner.name}")
            self._start_leg()

        return events

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_idx]

    @property
    def current_leg(self) -> PlayerLegState:
        return self.legs[self.current_player_idx]

    @property
    def projected_score(self) -> int:
        """Remaining score of the current player including the open turn."""
        if self.leg_winner is not None:
            return 0
        return self.turn.projected

    def checkout_suggestions(self) -> List[Checkout]:
        """Checkout suggestions for the current player, if any."""
        if self.match_winner is not None or self.leg_winner is not None or self.turn.bust:
            return []
        if not self.current_leg.has_started:
            return []

        projected = self.projected_score
        minimum = 2 if self.settings.double_out else 1
        if projected < minimum or projected > MAX_CHECKOUT:
            return []

        return suggest_checkouts(
            projected,
            max(1, self.turn.darts_remaining),
            self.settings.double_out,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Read-only summary of the match for presentation and export."""
        return {
            "mode": self.settings.get_name(),
            "match_mode": self.settings.match_mode,
            "set_number": self.set_number,
            "leg_number": self.leg_number,
            "current_player": self.current_player.name,
            "projected_score": self.projected_score,
            "turn_total": self.turn.running_total,
            "bust": self.turn.bust,
            "match_winner": self.match_winner.name if self.match_winner else None,
            "players": [
                {
                    "name": player.name,
                    "remaining": leg.remaining,
                    "is_winner": leg.is_winner,
                    "legs_won": record.legs_won,
                    "sets_won": record.sets_won,
                    "leg_stats": leg.stats.to_dict(),
                    "match_stats": record.stats.to_dict(),
                }
                for player, leg, record in zip(self.players, self.legs, self.match_states)
            ],
        }
