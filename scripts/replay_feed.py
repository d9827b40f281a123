"""
Replay a recorded device feed through a game engine.

The feed file is YAML with the game type, the players and a list of
snapshots as sent by the board (throws may be labels such as "T20" or
device segment dicts). Optional `x01` / `killer` sections override the
game config.

Usage:
    python scripts/replay_feed.py config/sample_x01_feed.yaml
    python scripts/replay_feed.py feed.yaml --config config/default_config.yaml
    python scripts/replay_feed.py feed.yaml --summary results/summary.yaml --seed 7
"""
import sys
import random
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from autocade.core import FeedSnapshot, load_yaml, atomic_write_yaml
from autocade.checkout import format_checkout
from autocade.game import (
    Caller,
    KillerEngine,
    Player,
    X01Engine,
    build_caller_settings,
    build_killer_settings,
    build_x01_settings,
    load_game_settings,
)
import logging

logger = logging.getLogger(__name__)


def build_engine(recording: dict, settings: dict, seed=None):
    """Create the engine named by the recording."""
    names = recording.get("players") or []
    players = [Player(id=str(i), name=str(name)) for i, name in enumerate(names)]

    # Per-recording sections take precedence over the config file
    merged = {section: dict(settings.get(section) or {}) for section in ("x01", "killer", "caller")}
    for section in merged:
        merged[section].update(recording.get(section) or {})

    game = str(recording.get("game", "x01")).lower()
    if game == "killer":
        return KillerEngine(players, build_killer_settings(merged), rng=random.Random(seed))
    if game == "x01":
        caller = Caller(build_caller_settings(merged))
        return X01Engine(players, build_x01_settings(merged), caller=caller)

    raise ValueError(f"Unknown game: {game}")


def summarize(engine) -> dict:
    """Summary dictionary for either engine."""
    if isinstance(engine, X01Engine):
        return engine.get_stats()

    state = engine.state
    return {
        "winner": state.winner.name if state.winner else None,
        "players": [
            {
                "name": p.name,
                "number": p.number,
                "lives": p.lives,
                "charge": p.charge,
                "is_killer": p.is_killer,
                "rank": p.rank,
            }
            for p in state.players
        ],
        "log": list(state.log),
    }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Replay a recorded darts feed")
    parser.add_argument("feed", type=str, help="Path to feed recording (YAML)")
    parser.add_argument("--config", "-c", type=str, default=None, help="Game config YAML")
    parser.add_argument("--summary", "-s", type=str, default=None, help="Write summary YAML here")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (Killer numbers)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    recording = load_yaml(Path(args.feed))
    settings = load_game_settings(Path(args.config) if args.config else None)

    try:
        engine = build_engine(recording, settings, seed=args.seed)
    except ValueError as e:
        logger.error(f"Cannot start replay: {e}")
        return 1

    for i, raw in enumerate(recording.get("snapshots") or []):
        events = engine.process(FeedSnapshot.from_dict(raw))
        for event in events:
            print(f"[{i:03d}] {event}")

        if isinstance(engine, X01Engine):
            for cue in engine.caller.drain():
                print(f"[{i:03d}]   cue: {cue}")
            suggestions = engine.checkout_suggestions()
            if suggestions and events:
                print(f"[{i:03d}]   checkout: {format_checkout(suggestions[0])}")

    summary = summarize(engine)
    winner = summary.get("match_winner") or summary.get("winner")
    print(f"\nWinner: {winner or '-'}")

    if args.summary:
        atomic_write_yaml(Path(args.summary), summary)
        print(f"Summary written to {args.summary}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
