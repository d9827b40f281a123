"""
Tests for Killer rules and engine.
"""
import random
import pytest

from autocade.core import FeedSnapshot, Throw, TAKEOUT_FINISHED, THROW_REMOVED
from autocade.board import board_distance
from autocade.game import (
    KillerEngine,
    KillerGameState,
    KillerPlayerState,
    KillerSettings,
    Player,
    assign_killer_numbers,
    process_killer_throw,
)


def make_state(*players, turn_index=0):
    return KillerGameState(players=list(players), turn_index=turn_index)


def hit(state, label, settings=None):
    return process_killer_throw(Throw.from_label(label), state, settings or KillerSettings())


def alice(**kwargs):
    return KillerPlayerState(id="a", name="Alice", number=20, **{"lives": 3, **kwargs})


def bob(**kwargs):
    return KillerPlayerState(id="b", name="Bob", number=1, **{"lives": 3, **kwargs})


def cara(**kwargs):
    return KillerPlayerState(id="c", name="Cara", number=5, **{"lives": 3, **kwargs})


def test_assign_numbers_distinct():
    """Test number assignment gives distinct board numbers."""
    players = [Player(id=str(i), name=f"P{i}") for i in range(4)]

    for seed in range(25):
        assigned = assign_killer_numbers(players, 3, random.Random(seed))
        numbers = [p.number for p in assigned]

        assert len(set(numbers)) == 4
        assert all(1 <= n <= 20 for n in numbers)
        assert all(p.lives == 3 and p.charge == 0 and not p.is_killer for p in assigned)


def test_assign_numbers_spread():
    """Test two players get numbers at least 4 sectors apart."""
    players = [Player(id="a", name="A"), Player(id="b", name="B")]

    for seed in range(25):
        first, second = assign_killer_numbers(players, 3, random.Random(seed))
        assert board_distance(first.number, second.number) >= 4


def test_assign_numbers_full_board():
    """Test 20 players use every number once."""
    players = [Player(id=str(i), name=f"P{i}") for i in range(20)]
    assigned = assign_killer_numbers(players, 1, random.Random(1))

    assert sorted(p.number for p in assigned) == list(range(1, 21))

    with pytest.raises(ValueError):
        assign_killer_numbers(players + [Player(id="x", name="X")], 1)


def test_charge_up_to_killer():
    """Test three own-number hits make a killer exactly once."""
    state = make_state(alice(), bob())

    state, events = hit(state, "S20")
    assert state.players[0].charge == 1
    assert events == ["Charge +1 (1/3)"]

    state, _ = hit(state, "D20")
    state, events = hit(state, "T20")
    assert state.players[0].is_killer
    assert state.players[0].charge == 3
    assert events == ["Became KILLER!"]

    state, events = hit(state, "S20")
    assert state.players[0].charge == 3
    assert events == ["Already Killer"]


def test_multiplier_charge_clamped():
    """Test multiplier rule charges by the ring and clamps at 3."""
    settings = KillerSettings(multiplier=True)
    state = make_state(alice(charge=1), bob())

    state, events = hit(state, "T20", settings)

    assert state.players[0].charge == 3
    assert state.players[0].is_killer
    assert events == ["Became KILLER!"]


def test_invalid_zone_self_hit():
    """Test self-hits outside the zone do nothing."""
    settings = KillerSettings(zone="double")
    state = make_state(alice(), bob())

    state, events = hit(state, "S20", settings)
    assert events == ["Invalid Zone"]
    assert state.players[0].charge == 0

    state, _ = hit(state, "D20", settings)
    assert state.players[0].charge == 1


def test_outer_single_matches_single():
    """Test 'outer-single' accepts any single."""
    settings = KillerSettings(zone="outer-single")
    state = make_state(alice(), bob())

    state, _ = hit(state, "S20", settings)
    assert state.players[0].charge == 1

    state, events = hit(state, "T20", settings)
    assert events == ["Invalid Zone"]


def test_must_be_killer():
    """Test non-killers cannot hit opponents."""
    state = make_state(alice(), bob())

    state, events = hit(state, "S1")

    assert events == ["Must be Killer"]
    assert state.players[1].lives == 3


def test_killer_hits_opponent():
    """Test killer takes a life."""
    state = make_state(alice(is_killer=True, charge=3), bob())

    state, events = hit(state, "S1")

    assert state.players[1].lives == 2
    assert events == ["Hit Bob! -1"]


def test_safe_zone():
    """Test hits outside the kill zone are safe."""
    settings = KillerSettings(zone="triple")
    state = make_state(alice(is_killer=True, charge=3), bob())

    state, events = hit(state, "D1", settings)

    assert events == ["Safe (Zone)"]
    assert state.players[1].lives == 3


def test_miss_and_bull():
    """Test numbers without a living owner are misses."""
    state = make_state(alice(is_killer=True, charge=3), bob())

    for label in ("S7", "Bull", "S25", "Miss"):
        state, events = hit(state, label)
        assert events == ["Miss"]


def test_elimination_and_win():
    """Test eliminating the last opponent wins the game."""
    state = make_state(alice(is_killer=True, charge=3), bob(lives=1))

    state, events = hit(state, "S1")

    assert state.players[1].lives == 0
    assert state.players[1].rank == 2
    assert state.winner.name == "Alice"
    assert state.players[0].rank == 1
    assert events == ["Hit Bob! -1", "Bob Eliminated!", "Alice Wins!"]


def test_elimination_rank_order():
    """Test ranks count down as players drop out."""
    state = make_state(alice(is_killer=True, charge=3), bob(lives=1), cara(lives=1))

    state, _ = hit(state, "S1")
    assert state.players[1].rank == 3
    assert state.winner is None

    state, _ = hit(state, "S5")
    assert state.players[2].rank == 2
    assert state.players[0].rank == 1


def test_eliminated_number_is_miss():
    """Test an eliminated player's number no longer resolves."""
    state = make_state(alice(is_killer=True, charge=3), bob(), cara(lives=0, rank=3))

    state, events = hit(state, "T5")

    assert events == ["Miss"]
    assert state.players[2].lives == 0


def test_damage_clamped_at_zero():
    """Test lives never go below zero."""
    settings = KillerSettings(multiplier=True)
    state = make_state(alice(is_killer=True, charge=3), bob(lives=2), cara())

    state, _ = hit(state, "T1", settings)

    assert state.players[1].lives == 0
    assert not state.players[1].is_killer


@pytest.mark.parametrize("policy,lives,charge,is_killer", [
    ("life", 2, 3, True),
    ("status", 3, 2, True),
    ("both", 2, 2, True),
])
def test_killer_vs_killer(policy, lives, charge, is_killer):
    """Test killer-vs-killer policies."""
    settings = KillerSettings(killer_vs_killer=policy)
    state = make_state(alice(is_killer=True, charge=3), bob(is_killer=True, charge=3))

    state, _ = hit(state, "S1", settings)

    target = state.players[1]
    assert (target.lives, target.charge, target.is_killer) == (lives, charge, is_killer)


def test_status_policy_revokes_killer():
    """Test status policy removes killer status at zero charge."""
    settings = KillerSettings(killer_vs_killer="status")
    state = make_state(alice(is_killer=True, charge=3), bob(is_killer=True, charge=1))

    state, events = hit(state, "S1", settings)

    assert not state.players[1].is_killer
    assert state.players[1].charge == 0
    assert events == ["Bob lost Killer status!"]


def test_suicide():
    """Test suicide rule damages the thrower and can eliminate them."""
    settings = KillerSettings(suicide=True)
    state = make_state(alice(is_killer=True, charge=3, lives=1), bob())

    state, events = hit(state, "S20", settings)

    assert state.players[0].lives == 0
    assert state.players[0].rank == 2
    assert state.winner.name == "Bob"
    assert events == ["Suicide! -1", "Suicide Elimination!", "Bob Wins!"]


def test_process_is_pure():
    """Test the input state is left untouched."""
    state = make_state(alice(is_killer=True, charge=3), bob())

    new_state, _ = hit(state, "S1")

    assert state.players[1].lives == 3
    assert state.log == []
    assert new_state.players[1].lives == 2
    assert new_state.log == ["Hit Bob! -1"]


def test_no_play_after_winner():
    """Test throws after the game is won are ignored."""
    state = make_state(alice(is_killer=True, charge=3), bob(lives=1))
    state, _ = hit(state, "S1")

    state, events = hit(state, "S1")
    assert events == []


# ----------------------------------------------------------------------
# Engine
# ----------------------------------------------------------------------


def snap(*labels, status="Throw", event="Throw detected"):
    return FeedSnapshot(
        throws=[Throw.from_label(label) for label in labels],
        status=status,
        event=event,
    )


@pytest.fixture
def engine():
    players = [Player(id="a", name="Alice"), Player(id="b", name="Bob"), Player(id="c", name="Cara")]
    engine = KillerEngine(players, KillerSettings(starting_lives=3), rng=random.Random(3))
    engine.state = make_state(alice(), bob(), cara())
    return engine


def test_engine_new_game():
    """Test engine setup."""
    players = [Player(id=str(i), name=f"P{i}") for i in range(4)]
    engine = KillerEngine(players, KillerSettings(starting_lives=7), rng=random.Random(0))

    assert len({p.number for p in engine.state.players}) == 4
    assert all(p.lives == 7 for p in engine.state.players)
    assert engine.current_player.id == "0"
    assert engine.history == []


def test_engine_random_order():
    """Test random starting order keeps every player."""
    players = [Player(id=str(i), name=f"P{i}") for i in range(6)]
    engine = KillerEngine(players, KillerSettings(starting_order="random"), rng=random.Random(5))

    assert sorted(p.id for p in engine.state.players) == [str(i) for i in range(6)]


def test_engine_throw_and_undo(engine):
    """Test feed undo restores the full previous state."""
    engine.process(snap("S20"))
    engine.process(snap("S20", "S20"))
    assert engine.state.players[0].charge == 2
    assert len(engine.history) == 2

    engine.process(snap("S20", event=THROW_REMOVED))
    assert engine.state.players[0].charge == 1
    assert len(engine.history) == 1


def test_engine_undo_empty_history(engine):
    """Test undo with no history is a no-op."""
    assert engine.undo() is False
    assert engine.state.players[0].charge == 0


def test_engine_turn_advance(engine):
    """Test 'Takeout finished' advances and clears history."""
    engine.process(snap("S20"))

    events = engine.process(snap(status="Takeout finished", event=TAKEOUT_FINISHED))

    assert engine.current_player.name == "Bob"
    assert engine.history == []
    assert events == ["Bob's turn"]


def test_engine_turn_skips_eliminated(engine):
    """Test eliminated players are skipped."""
    engine.state = make_state(alice(), bob(lives=0, rank=3), cara())

    engine.next_turn()
    assert engine.current_player.name == "Cara"

    engine.next_turn()
    assert engine.current_player.name == "Alice"


def test_engine_no_advance_after_win(engine):
    """Test turn does not move once the game is won."""
    engine.state = make_state(alice(is_killer=True, charge=3), bob(lives=1), cara(lives=0, rank=3))
    engine.throw(Throw.from_label("S1"))
    assert engine.winner.name == "Alice"

    assert engine.next_turn() == []
    assert engine.current_player.name == "Alice"
    assert engine.throw(Throw.from_label("S20")) == []


def test_engine_undo_after_win_keeps_winner(engine):
    """Test removing a dart thrown after the winning dart keeps the win."""
    engine.state = make_state(alice(is_killer=True, charge=3), bob(lives=1), cara(lives=0, rank=3))

    engine.process(snap("S1"))
    engine.process(snap("S1", "S5"))
    assert len(engine.history) == 2

    engine.process(snap("S1", event=THROW_REMOVED))
    assert engine.winner.name == "Alice"
    assert engine.state.players[1].lives == 0

    engine.process(snap(event=THROW_REMOVED))
    assert engine.winner is None
    assert engine.state.players[1].lives == 1


def test_engine_settings_validation():
    """Test invalid settings and player counts."""
    with pytest.raises(ValueError):
        KillerSettings(zone="bullseye")
    with pytest.raises(ValueError):
        KillerSettings(killer_vs_killer="never")
    with pytest.raises(ValueError):
        KillerSettings(starting_lives=0)
    with pytest.raises(ValueError):
        KillerEngine([Player(id=str(i), name=str(i)) for i in range(21)])
