"""
X01 checkout calculator.

Enumerates every 1, 2 and 3 dart finish for a remaining score (1-170) and
orders them by how easy they are to throw. Finishes are memoised per
(target, double_out) for the lifetime of the process.
"""
from functools import lru_cache
from typing import Callable, List, Tuple
import logging

import numpy as np

logger = logging.getLogger(__name__)

Checkout = Tuple[str, ...]

MAX_CHECKOUT = 170
MAX_DARTS = 3
MAX_SUGGESTIONS = 2


def _build_throws() -> List[Tuple[str, int]]:
    """All distinct throws as (label, points), in generation order."""
    throws = []
    for n in range(1, 21):
        throws.append((f"S{n}", n))
        throws.append((f"D{n}", n * 2))
        throws.append((f"T{n}", n * 3))
    throws.append(("S25", 25))  # Outer bull
    throws.append(("Bull", 50))  # Inner bull, counts as a double
    return throws


THROWS = _build_throws()
LABELS: Tuple[str, ...] = tuple(label for label, _ in THROWS)
POINTS = np.array([points for _, points in THROWS], dtype=np.int32)

DOUBLE_FINISH_IDX = np.array(
    [i for i, label in enumerate(LABELS) if label.startswith("D") or label == "Bull"],
    dtype=np.intp,
)
ANY_FINISH_IDX = np.arange(len(LABELS), dtype=np.intp)


def throw_priority_double_out(label: str) -> int:
    """Sort rank of a throw for double-out finishes (lower is preferred)."""
    if label == "T20":
        return 0
    if label == "T19":
        return 1
    if label == "T18":
        return 2
    if label == "T17":
        return 3
    if label.startswith("S"):
        return 4
    if label == "Bull":
        return 5
    if label.startswith("D"):
        return 6
    if label.startswith("T"):
        return 7
    return 8


def throw_priority_single_out(label: str) -> int:
    """Sort rank of a throw for single-out finishes; singles are easiest."""
    if label.startswith("S"):
        return 0
    if label.startswith("D"):
        return 1
    if label == "T20":
        return 2
    if label == "T19":
        return 3
    if label == "T18":
        return 4
    if label == "Bull":
        return 5
    if label.startswith("T"):
        return 6
    return 7


def _generate_checkouts(target: int, double_out: bool) -> List[Checkout]:
    """
    Generate all checkout combinations for a target score.

    Args:
        target: Score to check out
        double_out: If True, the last dart must be a double (or Bull)

    Returns:
        Combinations, shortest first, then by per-dart priority
    """
    finish_idx = DOUBLE_FINISH_IDX if double_out else ANY_FINISH_IDX
    finish_points = POINTS[finish_idx]
    get_priority: Callable[[str], int] = (
        throw_priority_double_out if double_out else throw_priority_single_out
    )

    results: List[Checkout] = []
    seen = set()

    def add_result(combo: Checkout) -> None:
        if combo not in seen:
            seen.add(combo)
            results.append(combo)

    # 1 dart
    for k in np.flatnonzero(finish_points == target):
        add_result((LABELS[finish_idx[k]],))

    # 2 darts - argwhere walks first dart, then finishing dart
    two_dart = np.add.outer(POINTS, finish_points) == target
    for i, k in np.argwhere(two_dart):
        add_result((LABELS[i], LABELS[finish_idx[k]]))

    # 3 darts
    three_dart = np.add.outer(np.add.outer(POINTS, POINTS), finish_points) == target
    for i, j, k in np.argwhere(three_dart):
        add_result((LABELS[i], LABELS[j], LABELS[finish_idx[k]]))

    # Stable sort keeps generation order among equal priorities
    results.sort(key=lambda combo: (len(combo), tuple(get_priority(t) for t in combo)))
    return results


def _in_domain(target: int, double_out: bool) -> bool:
    if target < 1 or target > MAX_CHECKOUT:
        return False
    # Double out can't check out from 1
    if double_out and target == 1:
        return False
    return True


@lru_cache(maxsize=None)
def get_all_checkouts(target: int, double_out: bool = True) -> Tuple[Checkout, ...]:
    """
    All checkout combinations for a target, ordered best first.

    Out-of-domain targets yield an empty tuple.
    """
    if not _in_domain(target, double_out):
        return ()

    combos = tuple(_generate_checkouts(target, double_out))
    logger.debug(f"Generated {len(combos)} checkouts for {target} (double_out={double_out})")
    return combos


def suggest_checkouts(
        target: int,
        darts_remaining: int = MAX_DARTS,
        double_out: bool = True
) -> List[Checkout]:
    """
    Get checkout suggestions for a remaining score.

    Args:
        target: Current remaining score
        darts_remaining: Darts left in the turn (1-3)
        double_out: If True, must finish on a double

    Returns:
        Up to two combinations, shortest first; empty if no checkout exists
    """
    if darts_remaining < 1:
        return []

    combos = get_all_checkouts(int(target), bool(double_out))
    fitting = [combo for combo in combos if len(combo) <= darts_remaining]
    return fitting[:MAX_SUGGESTIONS]


def is_checkable(target: int, darts_remaining: int = MAX_DARTS, double_out: bool = True) -> bool:
    """Check if a score can be finished with the given number of darts."""
    return len(suggest_checkouts(target, darts_remaining, double_out)) > 0


def format_checkout(combo: Checkout) -> str:
    """Format a checkout as a readable string, e.g. 'T20 → T20 → Bull'."""
    return " → ".join(combo)
