"""
Round-robin battle tallying.

Every unordered pair of strategies in a population battles exactly once.
Scores are accumulated into pre-sized numpy arrays: each strategy is scored
against all later strategies in a single vectorized comparison.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from src.blotto.battle import WEIGHTS
from src.blotto.strategy import Strategy, dedupe_population
from src.utils.constants import WIN_POINTS, TIE_POINTS


@dataclass
class BattleScore:
    """Win/tie/loss record of one strategy in one round-robin pass."""
    wins: int = 0
    ties: int = 0
    losses: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.ties + self.losses

    @property
    def victory_points(self) -> int:
        """Relegation ranking score; a win is worth two ties."""
        return WIN_POINTS * self.wins + TIE_POINTS * self.ties


def num_battles(n: int) -> int:
    """Calculate number of battles in a round-robin over n strategies."""
    return n * (n - 1) // 2


def _check_population(population: Sequence[Strategy]):
    if len(population) == 0:
        raise ValueError("Cannot run battles on an empty population")
    scales = {s.scale for s in population}
    if len(scales) > 1:
        raise ValueError(f"Population mixes strategy scales: {sorted(scales)}")


def tally_battles(population: Sequence[Strategy]) -> List[BattleScore]:
    """
    Battle every pair of strategies once and tally the results.

    Duplicated allocations are tallied as separate entrants (they tie each
    other); use run_battles for set semantics.

    Args:
        population: Strategies to compare

    Returns:
        List of BattleScore, index-aligned with ``population``

    Raises:
        ValueError: If the population is empty or mixes scales
        RuntimeError: If a battle score is NaN
    """
    population = list(population)
    _check_population(population)

    n = len(population)
    troops = np.array([s.troops for s in population], dtype=np.int64)
    wins = np.zeros(n, dtype=np.int64)
    ties = np.zeros(n, dtype=np.int64)
    losses = np.zeros(n, dtype=np.int64)

    for i in range(n - 1):
        row = troops[i]
        rest = troops[i + 1:]

        shared = (WEIGHTS * (rest == row)).sum(axis=1, dtype=np.float32) / np.float32(2)
        score_row = (WEIGHTS * (row > rest)).sum(axis=1, dtype=np.float32) + shared
        score_rest = (WEIGHTS * (row < rest)).sum(axis=1, dtype=np.float32) + shared

        if np.isnan(score_row).any() or np.isnan(score_rest).any():
            raise RuntimeError(f"Unorderable battle score for strategy {population[i]}")

        row_wins = score_row > score_rest
        row_losses = score_row < score_rest
        drawn = ~(row_wins | row_losses)

        wins[i] += row_wins.sum()
        losses[i] += row_losses.sum()
        ties[i] += drawn.sum()

        wins[i + 1:] += row_losses
        losses[i + 1:] += row_wins
        ties[i + 1:] += drawn

    return [
        BattleScore(wins=int(w), ties=int(t), losses=int(l))
        for w, t, l in zip(wins, ties, losses)
    ]


def run_battles(population: Sequence[Strategy]) -> Dict[Strategy, BattleScore]:
    """
    Round-robin the distinct strategies of a population.

    Identical allocations collapse into a single entrant before scoring.

    Args:
        population: Strategies to compare

    Returns:
        Mapping from each distinct strategy to its BattleScore
    """
    unique = dedupe_population(population)
    return dict(zip(unique, tally_battles(unique)))


def standings(
    population: Sequence[Strategy],
    scores: Optional[Sequence[BattleScore]] = None
) -> List[Tuple[Strategy, BattleScore]]:
    """
    Rank a population best-first.

    Sorted by wins, then ties, both descending. Equal records keep their
    population order.

    Args:
        population: Strategies to rank
        scores: Index-aligned scores (computed with tally_battles if None)

    Returns:
        List of (strategy, score) pairs, best first
    """
    population = list(population)
    if scores is None:
        scores = tally_battles(population)
    elif len(scores) != len(population):
        raise ValueError(f"Got {len(scores)} scores for {len(population)} strategies")

    order = sorted(
        range(len(population)),
        key=lambda i: (scores[i].wins, scores[i].ties),
        reverse=True
    )
    return [(population[i], scores[i]) for i in order]


def rank_population(
    population: Sequence[Strategy],
    scores: Optional[Sequence[BattleScore]] = None
) -> List[Strategy]:
    """Return the population ordered best-first by round-robin record."""
    return [strategy for strategy, _ in standings(population, scores)]
