"""
Tests for battle scoring and the round-robin engine.
"""

import math
import random
from itertools import combinations

import pytest

from src.blotto.strategy import Strategy
from src.blotto.battle import battle, battle_winner, compare_scores
from src.blotto.generator import random_population, random_strategy
from src.tournament.round_robin import (
    BattleScore,
    tally_battles,
    run_battles,
    standings,
    rank_population,
    num_battles,
)
from src.utils.constants import TOTAL_POINTS


EVEN = Strategy((10, 10, 10, 10, 10, 10, 10, 10, 10, 10))
FIRST_HEAVY = Strategy((100, 0, 0, 0, 0, 0, 0, 0, 0, 0))
FIRST_AND_LAST = Strategy((90, 0, 0, 0, 0, 0, 0, 0, 0, 10))


class TestBattle:
    """Tests for the battle scorer."""

    def test_mirror_match_splits_points(self):
        assert battle(EVEN, EVEN) == (27.5, 27.5)

    def test_close_battle(self):
        """One troop moved from castle 2 to castle 1 loses by a point."""
        nudged = Strategy((11, 9, 10, 10, 10, 10, 10, 10, 10, 10))
        assert battle(EVEN, nudged) == (28.0, 27.0)

    def test_not_close_battle(self):
        back_loaded = Strategy((0, 1, 2, 3, 4, 16, 17, 18, 19, 20))
        assert battle(EVEN, back_loaded) == (15.0, 40.0)

    def test_scores_are_symmetric(self):
        back_loaded = Strategy((0, 1, 2, 3, 4, 16, 17, 18, 19, 20))
        a, b = battle(EVEN, back_loaded)
        assert battle(back_loaded, EVEN) == (b, a)

    def test_scores_sum_to_total(self):
        """Every battle hands out exactly 55 points."""
        rng = random.Random(2024)
        for _ in range(1000):
            a, b = random_strategy(rng), random_strategy(rng)
            score_a, score_b = battle(a, b)
            assert score_a + score_b == TOTAL_POINTS

    def test_self_battle_is_tie(self):
        rng = random.Random(8)
        for _ in range(100):
            s = random_strategy(rng)
            assert battle(s, s) == (27.5, 27.5)

    def test_mixed_scale_rejected(self):
        scaled = Strategy((100,) * 10, scale=10)
        with pytest.raises(ValueError, match="different scales"):
            battle(EVEN, scaled)

    def test_battle_winner(self):
        assert battle_winner(EVEN, FIRST_HEAVY) is EVEN
        assert battle_winner(FIRST_HEAVY, EVEN) is EVEN
        assert battle_winner(EVEN, EVEN) is None

    def test_compare_scores(self):
        assert compare_scores(30.0, 25.0) == 1
        assert compare_scores(25.0, 30.0) == -1
        assert compare_scores(27.5, 27.5) == 0

    def test_nan_score_is_fatal(self):
        with pytest.raises(RuntimeError, match="Unorderable"):
            compare_scores(math.nan, 27.5)


class TestRoundRobin:
    """Tests for round-robin tallying."""

    def test_known_population(self):
        """EVEN beats both, FIRST_AND_LAST beats FIRST_HEAVY."""
        scores = tally_battles([EVEN, FIRST_HEAVY, FIRST_AND_LAST])
        assert scores[0] == BattleScore(wins=2, ties=0, losses=0)
        assert scores[1] == BattleScore(wins=0, ties=0, losses=2)
        assert scores[2] == BattleScore(wins=1, ties=0, losses=1)

    def test_rank_population_best_first(self):
        ranked = rank_population([EVEN, FIRST_HEAVY, FIRST_AND_LAST])
        assert ranked == [EVEN, FIRST_AND_LAST, FIRST_HEAVY]

    def test_totals_invariant(self):
        """Wins balance losses and every strategy plays n - 1 battles."""
        population = random_population(40, random.Random(17))
        scores = tally_battles(population)
        n = len(population)

        total_wins = sum(s.wins for s in scores)
        total_ties = sum(s.ties for s in scores)
        total_losses = sum(s.losses for s in scores)

        assert total_wins == total_losses
        assert total_wins + total_ties + total_losses == n * (n - 1)
        assert all(s.games == n - 1 for s in scores)

    def test_matches_pairwise_battles(self):
        """The vectorized tally agrees with battling each pair directly."""
        population = random_population(25, random.Random(3))
        expected = [BattleScore() for _ in population]
        for i, j in combinations(range(len(population)), 2):
            outcome = compare_scores(*battle(population[i], population[j]))
            if outcome > 0:
                expected[i].wins += 1
                expected[j].losses += 1
            elif outcome < 0:
                expected[j].wins += 1
                expected[i].losses += 1
            else:
                expected[i].ties += 1
                expected[j].ties += 1

        assert tally_battles(population) == expected

    def test_duplicates_tallied_separately(self):
        """Repeated allocations tie each other when not deduplicated."""
        copy = Strategy(EVEN.troops)
        scores = tally_battles([EVEN, copy, FIRST_HEAVY])
        assert scores[0] == BattleScore(wins=1, ties=1, losses=0)
        assert scores[1] == BattleScore(wins=1, ties=1, losses=0)

    def test_run_battles_uses_set_semantics(self):
        copy = Strategy(EVEN.troops)
        results = run_battles([EVEN, copy, FIRST_HEAVY])
        assert len(results) == 2
        assert results[EVEN] == BattleScore(wins=1, ties=0, losses=0)
        assert results[FIRST_HEAVY] == BattleScore(wins=0, ties=0, losses=1)

    def test_single_strategy(self):
        assert tally_battles([EVEN]) == [BattleScore()]

    def test_empty_population_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            tally_battles([])
        with pytest.raises(ValueError, match="empty"):
            run_battles([])

    def test_mixed_scales_rejected(self):
        with pytest.raises(ValueError, match="scales"):
            tally_battles([EVEN, Strategy((100,) * 10, scale=10)])

    def test_standings_stable_on_equal_records(self):
        """Equal records keep population order."""
        copy = Strategy(EVEN.troops)
        ranking = standings([EVEN, copy])
        assert ranking[0][0] is EVEN
        assert ranking[1][0] is copy

    def test_standings_with_precomputed_scores(self):
        scores = [BattleScore(0, 0, 2), BattleScore(2, 0, 0), BattleScore(1, 0, 1)]
        ranking = standings([FIRST_HEAVY, EVEN, FIRST_AND_LAST], scores)
        assert [s for s, _ in ranking] == [EVEN, FIRST_AND_LAST, FIRST_HEAVY]

    def test_standings_score_count_mismatch(self):
        with pytest.raises(ValueError):
            standings([EVEN, FIRST_HEAVY], [BattleScore()])

    def test_victory_points(self):
        """A win is worth two ties."""
        assert BattleScore(wins=3, ties=2, losses=1).victory_points == 8
        assert BattleScore(wins=1).victory_points == BattleScore(ties=2).victory_points

    def test_num_battles(self):
        assert num_battles(2) == 1
        assert num_battles(3) == 3
        assert num_battles(4) == 6
        assert num_battles(5) == 10
