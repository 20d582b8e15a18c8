"""
Bracket seeding for single-elimination tournaments.

The seed order places a rank-ordered population so that in every round of the
bracket the two opponents' ranks sum to the same value: the best entrant
meets the worst in round one, and the top two seeds can only meet in the
final.
"""
from typing import List, Sequence, TypeVar

T = TypeVar('T')


def is_power_of_two(n: int) -> bool:
    """Check whether n is a positive power of two."""
    return n > 0 and n & (n - 1) == 0


def seed_order(n: int) -> List[int]:
    """
    Compute the bracket seed order for n entrants.

    Starts from the final (ranks 1 and 2) and works outward: at each level of
    size 2^r every rank x is expanded to the pair [x, 2^r + 1 - x].

    Args:
        n: Number of entrants, a power of two (at least 2)

    Returns:
        0-based population indices in bracket order, e.g.
        seed_order(8) == [0, 7, 3, 4, 1, 6, 2, 5]

    Raises:
        ValueError: If n is not a power of two of at least 2
    """
    if n < 2 or not is_power_of_two(n):
        raise ValueError(f"Bracket size must be a power of two >= 2, got {n}")

    seeds = [1, 2]
    level_size = 2
    while level_size < n:
        level_size *= 2
        target_sum = level_size + 1
        seeds = [s for x in seeds for s in (x, target_sum - x)]

    return [x - 1 for x in seeds]


def next_power_of_two_at_least(x: int) -> int:
    """
    Smallest bracket size that can hold x entrants.

    A bracket needs at least two entrants, so the result is never below 2.

    Raises:
        ValueError: If x < 1
    """
    if x < 1:
        raise ValueError(f"Need at least one entrant, got {x}")
    size = 2
    while size < x:
        size *= 2
    return size


def sort_by_indices(items: Sequence[T], indices: Sequence[int]) -> List[T]:
    """Reorder items by a permutation: result[k] = items[indices[k]]."""
    return [items[i] for i in indices]
