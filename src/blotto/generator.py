"""
Random strategy generation.

Strategies are drawn by uniform stick-breaking: 9 cut points are placed
uniformly on [0, total] and the troops are the gaps between them. All
functions take an explicit ``random.Random`` so that callers control seeding.
"""
import random
from typing import List, Optional

from src.blotto.strategy import Strategy
from src.utils.constants import NUM_SPLITS, TOTAL_TROOPS


def _resolve_rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def random_split_points(rng: Optional[random.Random] = None, scale: int = 1) -> List[int]:
    """
    Draw 9 sorted split points uniformly from [0, TOTAL_TROOPS * scale].

    Args:
        rng: Source of randomness (a fresh unseeded one if None)
        scale: Fixed-point units per troop

    Returns:
        Ascending list of split points
    """
    rng = _resolve_rng(rng)
    total = TOTAL_TROOPS * scale
    return sorted(rng.randint(0, total) for _ in range(NUM_SPLITS))


def random_strategy(rng: Optional[random.Random] = None, scale: int = 1) -> Strategy:
    """Generate one uniformly random strategy."""
    return Strategy.from_split_points(random_split_points(rng, scale), scale)


def random_population(
    size: int,
    rng: Optional[random.Random] = None,
    scale: int = 1
) -> List[Strategy]:
    """
    Generate a population of random strategies.

    Args:
        size: Number of strategies
        rng: Source of randomness
        scale: Fixed-point units per troop

    Returns:
        List of ``size`` strategies (duplicates are possible)
    """
    if size < 0:
        raise ValueError(f"Population size must be non-negative, got {size}")
    rng = _resolve_rng(rng)
    return [random_strategy(rng, scale) for _ in range(size)]


def generate_children(
    parent: Strategy,
    n_children: int,
    variance: int,
    rng: Optional[random.Random] = None
) -> List[Strategy]:
    """
    Create mutated copies of a strategy.

    Each of the parent's split points is moved up or down by a random amount
    below ``variance`` and clamped to the valid range; the points are then
    re-sorted, so every child is a valid strategy.

    Args:
        parent: Strategy to mutate
        n_children: Number of children to create
        variance: Exclusive upper bound on the move of each split point,
            in fixed-point units
        rng: Source of randomness

    Returns:
        List of ``n_children`` strategies with the parent's scale
    """
    if variance < 1:
        raise ValueError(f"variance must be at least 1, got {variance}")
    rng = _resolve_rng(rng)
    total = parent.total
    split_points = parent.to_split_points()

    children = []
    for _ in range(n_children):
        child_points = []
        for point in split_points:
            delta = rng.randrange(variance)
            moved = point + delta if rng.random() < 0.5 else point - delta
            child_points.append(min(total, max(0, moved)))
        child_points.sort()
        children.append(Strategy.from_split_points(child_points, parent.scale))

    return children
