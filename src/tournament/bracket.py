"""
Single-elimination bracket.

The bracket expects its entrants already ranked by a round-robin and permuted
into seed order. Each round pairs adjacent entrants and keeps the winner of
each pair; on an exact tie the first (better seeded) entrant advances.
"""
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from src.blotto.battle import battle, compare_scores, check_same_scale
from src.blotto.generator import random_strategy
from src.blotto.strategy import Strategy
from src.tournament.round_robin import BattleScore, tally_battles, standings
from src.tournament.seeding import (
    is_power_of_two,
    next_power_of_two_at_least,
    seed_order,
    sort_by_indices,
)


@dataclass
class BracketResult:
    """Outcome of a seeded single-elimination bracket."""
    winners: List[Strategy]
    seeded: List[Strategy]
    ranking: List[Tuple[Strategy, BattleScore]] = field(default_factory=list)
    padding: int = 0

    @property
    def winner(self) -> Strategy:
        return self.winners[0]


def play_round(entrants: Sequence[Strategy]) -> List[Strategy]:
    """Play one bracket round: adjacent pairs battle, winners advance in order."""
    survivors = []
    for first, second in zip(entrants[0::2], entrants[1::2]):
        outcome = compare_scores(*battle(first, second))
        survivors.append(second if outcome < 0 else first)
    return survivors


def run_bracket(seeded: Sequence[Strategy], keep: int = 1) -> List[Strategy]:
    """
    Run a single-elimination bracket.

    Args:
        seeded: Entrants in seed order; length must be a power of two
        keep: Stop once this many entrants remain (a power of two)

    Returns:
        The ``keep`` surviving strategies in bracket order

    Raises:
        ValueError: If the bracket size or ``keep`` is invalid
        RuntimeError: If a battle score is NaN
    """
    entrants = list(seeded)
    n = len(entrants)
    if n == 0:
        raise ValueError("Cannot run a bracket with no entrants")
    if not is_power_of_two(n):
        raise ValueError(f"Bracket size must be a power of two, got {n}")
    if not is_power_of_two(keep) or keep > n:
        raise ValueError(f"keep must be a power of two between 1 and {n}, got {keep}")
    for other in entrants[1:]:
        check_same_scale(entrants[0], other)

    while len(entrants) > keep:
        entrants = play_round(entrants)
    return entrants


def seed_population(
    population: Sequence[Strategy],
    scores: Optional[Sequence[BattleScore]] = None
) -> List[Strategy]:
    """
    Rank a population by round-robin record and permute it into seed order.

    Args:
        population: Strategies, length a power of two
        scores: Index-aligned scores (computed if None)

    Returns:
        Strategies in bracket order, best seed first
    """
    ranked = [strategy for strategy, _ in standings(population, scores)]
    return sort_by_indices(ranked, seed_order(len(ranked)))


def run_seeded_bracket(
    population: Sequence[Strategy],
    keep: int = 1,
    rng: Optional[random.Random] = None
) -> BracketResult:
    """
    Rank, seed and run a bracket over an arbitrary population.

    If the population size is not a power of two it is padded with random
    strategies drawn from ``rng``.

    Args:
        population: Strategies to compete
        keep: Number of bracket survivors to return
        rng: Source of randomness for padding entrants

    Returns:
        BracketResult with the winners, the seeded field and the ranking
    """
    entrants = list(population)
    if not entrants:
        raise ValueError("Cannot run a bracket on an empty population")

    size = next_power_of_two_at_least(len(entrants))
    padding = size - len(entrants)
    if padding:
        rng = rng if rng is not None else random.Random()
        scale = entrants[0].scale
        entrants.extend(random_strategy(rng, scale) for _ in range(padding))

    scores = tally_battles(entrants)
    ranking = standings(entrants, scores)
    seeded = sort_by_indices([s for s, _ in ranking], seed_order(size))

    return BracketResult(
        winners=run_bracket(seeded, keep),
        seeded=seeded,
        ranking=ranking,
        padding=padding,
    )
