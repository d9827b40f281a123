"""
Game module - feed reconciliation, player statistics, and game engines.
"""
from .player import Player, DartStats
from .feed import (
    FeedEvent,
    FeedChange,
    FeedReconciler,
    ReconcilerConfig,
    X01_RECONCILER,
    KILLER_RECONCILER,
)
from .game_modes import X01Settings, TurnPhase, TurnAccumulator, resolve_dart
from .game_state import X01Engine, PlayerLegState, PlayerMatchState
from .killer import (
    KillerSettings,
    KillerPlayerState,
    KillerGameState,
    KillerEngine,
    assign_killer_numbers,
    process_killer_throw,
    zone_accepts,
)
from .caller import Caller, CallerSettings
from .config_loader import (
    build_caller_settings,
    build_killer_settings,
    build_x01_settings,
    load_game_config,
    load_game_settings,
)

__all__ = [
    "Player",
    "DartStats",
    "FeedEvent",
    "FeedChange",
    "FeedReconciler",
    "ReconcilerConfig",
    "X01_RECONCILER",
    "KILLER_RECONCILER",
    "X01Settings",
    "TurnPhase",
    "TurnAccumulator",
    "resolve_dart",
    "X01Engine",
    "PlayerLegState",
    "PlayerMatchState",
    "KillerSettings",
    "KillerPlayerState",
    "KillerGameState",
    "KillerEngine",
    "assign_killer_numbers",
    "process_killer_throw",
    "zone_accepts",
    "Caller",
    "CallerSettings",
    "build_caller_settings",
    "build_killer_settings",
    "build_x01_settings",
    "load_game_config",
    "load_game_settings",
]
