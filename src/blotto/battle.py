"""
Battle scoring between two strategies.

Castle i is worth i + 1 points. The side sending more troops to a castle takes
all of its points; equal troops split the points evenly. Scores are 32-bit
floats and the two scores of a battle always sum to TOTAL_POINTS.
"""
import math
from typing import Optional, Tuple

import numpy as np

from src.blotto.strategy import Strategy
from src.utils.constants import CASTLE_WEIGHTS

# Castle weights as float32, shared with the vectorized round-robin
WEIGHTS = np.asarray(CASTLE_WEIGHTS, dtype=np.float32)


def check_same_scale(a: Strategy, b: Strategy):
    """Raise ValueError unless both strategies use the same fixed-point scale."""
    if a.scale != b.scale:
        raise ValueError(f"Cannot battle strategies with different scales ({a.scale} vs {b.scale})")


def battle(a: Strategy, b: Strategy) -> Tuple[float, float]:
    """
    Score a single battle.

    Args:
        a: First strategy
        b: Second strategy

    Returns:
        Tuple of (score_a, score_b)
    """
    check_same_scale(a, b)
    troops_a = np.asarray(a.troops)
    troops_b = np.asarray(b.troops)

    ties = WEIGHTS[troops_a == troops_b].sum(dtype=np.float32) / np.float32(2)
    score_a = WEIGHTS[troops_a > troops_b].sum(dtype=np.float32) + ties
    score_b = WEIGHTS[troops_a < troops_b].sum(dtype=np.float32) + ties

    return float(score_a), float(score_b)


def compare_scores(score_a: float, score_b: float) -> int:
    """
    Order two battle scores.

    Returns:
        1 if a scored more, -1 if b scored more, 0 on an exact tie

    Raises:
        RuntimeError: If either score is NaN
    """
    if math.isnan(score_a) or math.isnan(score_b):
        raise RuntimeError(f"Unorderable battle score ({score_a}, {score_b})")
    if score_a > score_b:
        return 1
    if score_b > score_a:
        return -1
    return 0


def battle_winner(a: Strategy, b: Strategy) -> Optional[Strategy]:
    """Return the winning strategy, or None if the battle is an exact tie."""
    outcome = compare_scores(*battle(a, b))
    if outcome > 0:
        return a
    if outcome < 0:
        return b
    return None
