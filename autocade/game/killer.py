"""
Killer game mode.

Rules:
- Every player gets a board number and a number of lives
- Hitting your own number charges you up; 3 charge makes you a Killer
- Killers take lives from opponents by hitting their numbers
- Last player with lives left wins

Undo works on full-state snapshots: every dart pushes the pre-dart state,
a removed dart pops it. Hits have cross-player side effects, so the state
is restored wholesale instead of inverting the hit.
"""
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple
import logging

from autocade.core import FeedSnapshot, Throw
from autocade.board import BOARD_NUMBERS, ThrowValue, board_distance, classify
from .feed import FeedEvent, FeedReconciler, KILLER_RECONCILER
from .player import Player

logger = logging.getLogger(__name__)

ZONES = ("full", "outer-single", "single", "double", "triple")
KILLER_VS_KILLER = ("life", "status", "both")
STARTING_ORDERS = ("listed", "random")

KILLER_ACTIVATION_HITS = 3
MAX_KILLER_PLAYERS = len(BOARD_NUMBERS)


@dataclass
class KillerSettings:
    """Killer game configuration."""
    starting_lives: int = 5
    zone: str = "full"  # Ring that counts for charging and hitting
    multiplier: bool = False  # Doubles/triples count 2x/3x
    suicide: bool = False  # Killers lose lives on their own number
    killer_vs_killer: str = "life"  # life | status | both
    starting_order: str = "listed"  # listed | random

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for impossible settings."""
        if self.starting_lives <= 0:
            raise ValueError("starting_lives must be positive")
        if self.zone not in ZONES:
            raise ValueError(f"zone must be one of {ZONES}")
        if self.killer_vs_killer not in KILLER_VS_KILLER:
            raise ValueError(f"killer_vs_killer must be one of {KILLER_VS_KILLER}")
        if self.starting_order not in STARTING_ORDERS:
            raise ValueError(f"starting_order must be one of {STARTING_ORDERS}")


@dataclass
class KillerPlayerState:
    """Per-player Killer state."""
    id: str
    name: str
    number: int
    lives: int
    charge: int = 0
    is_killer: bool = False
    rank: Optional[int] = None

    @property
    def is_alive(self) -> bool:
        return self.lives > 0


@dataclass
class KillerGameState:
    """Complete Killer game state; copied, never shared, between snapshots."""
    players: List[KillerPlayerState] = field(default_factory=list)
    turn_index: int = 0
    winner: Optional[KillerPlayerState] = None
    log: List[str] = field(default_factory=list)

    def copy(self) -> "KillerGameState":
        players = [replace(p) for p in self.players]
        winner = None
        if self.winner is not None:
            winner = next(p for p in players if p.id == self.winner.id)
        return KillerGameState(
            players=players,
            turn_index=self.turn_index,
            winner=winner,
            log=list(self.log),
        )

    @property
    def current_player(self) -> Optional[KillerPlayerState]:
        if 0 <= self.turn_index < len(self.players):
            return self.players[self.turn_index]
        return None

    @property
    def alive(self) -> List[KillerPlayerState]:
        return [p for p in self.players if p.is_alive]


def assign_killer_numbers(
        players: Sequence[Player],
        starting_lives: int,
        rng: Optional[random.Random] = None
) -> List[KillerPlayerState]:
    """
    Give every player a distinct board number, spread around the board.

    Numbers are shuffled, then each player takes the first number that is
    at least 4 sectors away from all numbers already taken; the distance
    requirement relaxes to 3, 2, 1, 0 when nothing fits.

    Args:
        players: Players in turn order (at most 20)
        starting_lives: Lives each player starts with
        rng: Random source (default: module-level random)

    Returns:
        Initial player states in the same order as ``players``
    """
    if len(players) > MAX_KILLER_PLAYERS:
        raise ValueError(f"Killer supports at most {MAX_KILLER_PLAYERS} players")

    rng = rng or random.Random()
    available = list(BOARD_NUMBERS)
    rng.shuffle(available)

    picked: List[int] = []
    assigned: List[KillerPlayerState] = []

    for player in players:
        best_number = None

        if not picked:
            best_number = available[0]
        else:
            for min_offset in range(4, -1, -1):
                best_number = next(
                    (n for n in available
                     if all(board_distance(n, existing) >= min_offset for existing in picked)),
                    None,
                )
                if best_number is not None:
                    break
            if best_number is None:
                best_number = available[0]

        available.remove(best_number)
        picked.append(best_number)
        assigned.append(KillerPlayerState(
            id=player.id,
            name=player.name,
            number=best_number,
            lives=starting_lives,
        ))

    return assigned


def zone_accepts(zone: str, value: ThrowValue) -> bool:
    """
    Check whether a dart lands in the configured zone.

    The feed does not distinguish the inner and outer single rings, so
    'outer-single' accepts any single. The bull is never in a zone.
    """
    if value.is_miss or value.is_bull:
        return False
    if zone == "full":
        return True
    if zone in ("single", "outer-single"):
        return value.is_single
    if zone == "double":
        return value.is_double
    if zone == "triple":
        return value.is_triple
    return False


def _eliminate(state: KillerGameState, victim: KillerPlayerState) -> None:
    victim.lives = 0
    victim.is_killer = False
    # Ranks count down as players drop out
    victim.rank = len(state.alive) + 1


def process_killer_throw(
        throw: Throw,
        game_state: KillerGameState,
        settings: KillerSettings
) -> Tuple[KillerGameState, List[str]]:
    """
    Resolve one dart for the current player.

    Args:
        throw: Detected dart
        game_state: State before the dart (not modified)
        settings: Killer configuration

    Returns:
        (new_state, events)
    """
    state = game_state.copy()
    events: List[str] = []

    thrower = state.current_player
    if state.winner is not None or thrower is None or not thrower.is_alive:
        return state, events

    value = classify(throw)
    owner = None
    if not value.is_miss:
        owner = next(
            (p for p in state.players if p.number == throw.number and p.is_alive),
            None,
        )

    if owner is None:
        events.append("Miss")
        state.log.extend(events)
        return state, events

    damage = value.multiplier if settings.multiplier else 1
    valid_hit = zone_accepts(settings.zone, value)

    # Own number
    if owner.id == thrower.id:
        if not valid_hit:
            events.append("Invalid Zone")
        elif thrower.is_killer and settings.suicide:
            thrower.lives -= damage
            events.append(f"Suicide! -{damage}")
            if thrower.lives <= 0:
                _eliminate(state, thrower)
                events.append("Suicide Elimination!")
        elif not thrower.is_killer:
            thrower.charge += damage
            if thrower.charge >= KILLER_ACTIVATION_HITS:
                thrower.charge = KILLER_ACTIVATION_HITS
                thrower.is_killer = True
                events.append("Became KILLER!")
            else:
                events.append(f"Charge +{damage} ({thrower.charge}/{KILLER_ACTIVATION_HITS})")
        else:
            events.append("Already Killer")

    # Opponent's number
    elif not thrower.is_killer:
        events.append("Must be Killer")

    elif not valid_hit:
        events.append("Safe (Zone)")

    else:
        if owner.is_killer:
            policy = settings.killer_vs_killer
            if policy in ("life", "both"):
                owner.lives -= damage
                events.append(f"Hit Killer {owner.name}! -{damage}")
            if policy in ("status", "both"):
                owner.charge = max(0, owner.charge - damage)
                if owner.charge <= 0:
                    owner.is_killer = False
                    events.append(f"{owner.name} lost Killer status!")
                else:
                    events.append(
                        f"{owner.name} charge -{damage} ({owner.charge}/{KILLER_ACTIVATION_HITS})"
                    )
        else:
            owner.lives -= damage
            events.append(f"Hit {owner.name}! -{damage}")

        if owner.lives <= 0:
            _eliminate(state, owner)
            events.append(f"{owner.name} Eliminated!")

    # Winner check
    alive = state.alive
    if len(alive) == 1 and len(state.players) > 1:
        state.winner = alive[0]
        alive[0].rank = 1
        events.append(f"{alive[0].name} Wins!")

    state.log.extend(events)
    return state, events


class KillerEngine:
    """
    Killer turn engine driven by device snapshots.

    Owns its undo history; the history only ever covers the current turn.
    """

    def __init__(
            self,
            players: List[Player],
            settings: Optional[KillerSettings] = None,
            rng: Optional[random.Random] = None
    ):
        """
        Initialize Killer engine and start a game.

        Args:
            players: Players in listed order
            settings: Killer configuration
            rng: Random source for number assignment and starting order
        """
        if not players:
            raise ValueError("Killer needs at least one player")
        if len(players) > MAX_KILLER_PLAYERS:
            raise ValueError(f"Killer supports at most {MAX_KILLER_PLAYERS} players")

        self.players = list(players)
        self.settings = settings or KillerSettings()
        self.rng = rng or random.Random()
        self.reconciler = FeedReconciler(KILLER_RECONCILER)

        self.state = KillerGameState()
        self.history: List[KillerGameState] = []
        self.new_game()

    def new_game(self) -> None:
        """Assign numbers and start from the first player."""
        order = list(self.players)
        if self.settings.starting_order == "random":
            self.rng.shuffle(order)

        self.state = KillerGameState(
            players=assign_killer_numbers(order, self.settings.starting_lives, self.rng),
            turn_index=0,
        )
        self.history.clear()
        self.reconciler.reset()

        numbers = ", ".join(f"{p.name}={p.number}" for p in self.state.players)
        logger.info(f"Killer game started with {len(order)} players ({numbers})")

    @property
    def current_player(self) -> Optional[KillerPlayerState]:
        return self.state.current_player

    @property
    def winner(self) -> Optional[KillerPlayerState]:
        return self.state.winner

    def process(self, snapshot: FeedSnapshot) -> List[str]:
        """
        Process one device snapshot.

        Returns:
            Event messages produced by this snapshot
        """
        change = self.reconciler.observe(snapshot)
        events: List[str] = []

        if change.kind is FeedEvent.TURN_END:
            events.extend(self.next_turn())

        elif change.kind is FeedEvent.NEW_THROW:
            for throw in change.added:
                events.extend(self.throw(throw))

        elif change.kind is FeedEvent.UNDO:
            for _ in change.removed:
                self.undo()

        return events

    def throw(self, throw: Throw) -> List[str]:
        """Resolve a dart for the current player."""
        # Every delivered dart gets a history entry so feed undos stay aligned
        self.history.append(self.state)
        if self.state.winner is not None:
            return []

        self.state, events = process_killer_throw(throw, self.state, self.settings)

        logger.debug(f"{throw.label}: {', '.join(events) or 'no effect'}")
        if self.state.winner is not None:
            logger.info(f"Killer finished! Winner: {self.state.winner.name}")
        return events

    def undo(self) -> bool:
        """
        Restore the state before the last dart.

        Returns:
            True if a state was restored, False if the history was empty
        """
        if not self.history:
            return False

        self.state = self.history.pop()
        logger.info("Undone last dart")
        return True

    def next_turn(self) -> List[str]:
        """Advance to the next living player."""
        self.history.clear()

        state = self.state
        if state.winner is not None:
            return []
        if len(state.alive) <= 1:
            return []

        count = len(state.players)
        next_index = (state.turn_index + 1) % count
        while not state.players[next_index].is_alive:
            next_index = (next_index + 1) % count

        state.turn_index = next_index
        player = state.players[next_index]
        events = [f"{player.name}'s turn"]
        state.log.extend(events)
        logger.debug(f"Next player: {player.name}")
        return events
