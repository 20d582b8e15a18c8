"""
Relegation tournament.

Each round every surviving strategy battles every other; the strategy with
the fewest victory points (2 per win, 1 per tie) is relegated. When two
strategies remain a single battle decides first and second place.

Ties for last place cascade: equal victory points are broken by fewer wins;
what happens when wins are also equal is a configurable TieBreakPolicy.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from src.blotto.battle import battle, compare_scores
from src.blotto.strategy import Strategy, dedupe_population
from src.tournament.round_robin import BattleScore, tally_battles


class TieBreakPolicy(Enum):
    """How to relegate one of two strategies with identical records."""
    FIRST = 'first'                     # first of the two in population order
    PREVIOUS_ROUND = 'previous_round'   # lower placed in the previous round, else FIRST
    STRICT = 'strict'                   # raise AmbiguousTieError


class TieBreak(Enum):
    """Which rule decided a relegation."""
    NONE = 'none'
    WINS = 'wins'
    PREVIOUS_ROUND = 'previous_round'
    ARBITRARY = 'arbitrary'


class AmbiguousTieError(ValueError):
    """Raised under TieBreakPolicy.STRICT when no rule separates the last two."""


@dataclass
class RoundRecord:
    """
    Standings of one relegation round.

    ``standings`` is ordered worst-first by (victory points, wins).
    """
    round_number: int
    standings: List[Tuple[Strategy, BattleScore]]
    eliminated: Strategy
    tie_break: TieBreak = TieBreak.NONE


@dataclass
class RelegationResult:
    """Complete ordering produced by a relegation tournament."""
    order: List[Strategy]
    rounds: List[RoundRecord] = field(default_factory=list)
    final: Optional[Tuple[float, float]] = None
    final_tied: bool = False

    @property
    def winner(self) -> Strategy:
        return self.order[-1]

    @property
    def arbitrary_tie_breaks(self) -> List[int]:
        """Round numbers in which the first-of-two fallback picked the loser."""
        return [r.round_number for r in self.rounds if r.tie_break == TieBreak.ARBITRARY]


def rank_ascending(
    population: Sequence[Strategy],
    scores: Sequence[BattleScore]
) -> List[Tuple[Strategy, BattleScore]]:
    """Order a round's results worst-first, stable on population order."""
    order = sorted(
        range(len(population)),
        key=lambda i: (scores[i].victory_points, scores[i].wins)
    )
    return [(population[i], scores[i]) for i in order]


def _previous_place(previous: Sequence[Tuple[Strategy, BattleScore]], strategy: Strategy) -> int:
    for place, (candidate, _) in enumerate(previous):
        if candidate == strategy:
            return place
    raise ValueError(f"Strategy {strategy} missing from previous round standings")


def pick_relegated(
    ranked: Sequence[Tuple[Strategy, BattleScore]],
    policy: TieBreakPolicy = TieBreakPolicy.FIRST,
    previous: Optional[Sequence[Tuple[Strategy, BattleScore]]] = None
) -> Tuple[int, TieBreak]:
    """
    Choose which of the two lowest-ranked strategies is relegated.

    Args:
        ranked: Round standings, worst first (see rank_ascending)
        policy: Resolution when victory points and wins are both tied
        previous: Standings of the previous round, worst first

    Returns:
        Tuple of (index into ``ranked``, rule that decided it)

    Raises:
        AmbiguousTieError: If the policy is STRICT and the last two are tied
    """
    if len(ranked) < 2:
        raise ValueError("Need at least two strategies to relegate one")

    (first, first_score), (second, second_score) = ranked[0], ranked[1]
    if first_score.victory_points != second_score.victory_points:
        return 0, TieBreak.NONE
    if first_score.wins != second_score.wins:
        # ranked is sorted by wins within equal points, so the first has fewer
        return 0, TieBreak.WINS

    if policy == TieBreakPolicy.STRICT:
        raise AmbiguousTieError(
            f"Cannot separate {first} and {second}: "
            f"both have {first_score.victory_points} victory points and {first_score.wins} wins"
        )

    if policy == TieBreakPolicy.PREVIOUS_ROUND and previous:
        first_place = _previous_place(previous, first)
        second_place = _previous_place(previous, second)
        if first_place != second_place:
            return (0 if first_place < second_place else 1), TieBreak.PREVIOUS_ROUND

    return 0, TieBreak.ARBITRARY


def run_relegation_tournament(
    population: Sequence[Strategy],
    dedupe: bool = False,
    tie_policy: TieBreakPolicy = TieBreakPolicy.FIRST
) -> RelegationResult:
    """
    Reduce a population to a full ranking by repeated relegation.

    Args:
        population: Strategies to compete
        dedupe: Merge identical allocations into one entrant first
        tie_policy: Resolution of fully tied relegation candidates

    Returns:
        RelegationResult whose ``order`` runs from last place to the winner

    Raises:
        ValueError: If the population is empty
        AmbiguousTieError: Under TieBreakPolicy.STRICT, on an unresolvable tie
        RuntimeError: If a battle score is NaN
    """
    remaining = dedupe_population(population) if dedupe else list(population)
    if not remaining:
        raise ValueError("Cannot run a relegation tournament on an empty population")

    result = RelegationResult(order=[])
    previous = None
    round_number = 0

    while len(remaining) > 2:
        round_number += 1
        ranked = rank_ascending(remaining, tally_battles(remaining))
        index, rule = pick_relegated(ranked, tie_policy, previous)
        loser = ranked[index][0]

        result.rounds.append(RoundRecord(
            round_number=round_number,
            standings=ranked,
            eliminated=loser,
            tie_break=rule
        ))
        result.order.append(loser)

        # Remove by position so duplicate allocations are removed one at a time
        remaining.pop(next(i for i, s in enumerate(remaining) if s is loser))
        previous = ranked

    if len(remaining) == 2:
        first, second = remaining
        scores = battle(first, second)
        outcome = compare_scores(*scores)
        if outcome < 0:
            result.order.extend([first, second])
        else:
            result.order.extend([second, first])
        result.final = scores
        result.final_tied = outcome == 0
    else:
        result.order.append(remaining[0])

    return result
