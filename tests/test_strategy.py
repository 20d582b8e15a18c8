"""
Tests for the Strategy value type and random generation.
"""

import random

import pytest

from src.blotto.strategy import Strategy, dedupe_population
from src.blotto.generator import (
    random_split_points,
    random_strategy,
    random_population,
    generate_children,
)
from src.utils.constants import NUM_CASTLES, NUM_SPLITS, TOTAL_TROOPS


EVEN = (10, 10, 10, 10, 10, 10, 10, 10, 10, 10)


class TestStrategy:
    """Tests for Strategy validation and value semantics."""

    def test_valid_strategy(self):
        s = Strategy(EVEN)
        assert s.troops == EVEN
        assert s.total == TOTAL_TROOPS
        assert len(s) == NUM_CASTLES
        assert s[9] == 10

    def test_list_is_normalised_to_tuple(self):
        """Lists are accepted and stored as tuples."""
        s = Strategy([10] * 10)
        assert isinstance(s.troops, tuple)
        assert s == Strategy(EVEN)

    def test_structural_equality_and_hash(self):
        """Identical allocations are the same entity in sets and dicts."""
        a = Strategy(EVEN)
        b = Strategy(list(EVEN))
        assert a == b
        assert len({a, b}) == 1
        assert {a: 1}[b] == 1

    def test_immutable(self):
        s = Strategy(EVEN)
        with pytest.raises(AttributeError):
            s.troops = (100, 0, 0, 0, 0, 0, 0, 0, 0, 0)

    def test_wrong_length_rejected(self):
        with pytest.raises(ValueError, match="exactly 10"):
            Strategy((50, 50))

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            Strategy((-10, 20, 10, 10, 10, 10, 10, 10, 10, 20))

    def test_wrong_sum_rejected(self):
        with pytest.raises(ValueError, match="sum to 100"):
            Strategy((10, 10, 10, 10, 10, 10, 10, 10, 10, 11))

    def test_non_integer_rejected(self):
        with pytest.raises(ValueError, match="integers"):
            Strategy((10.5, 9.5, 10, 10, 10, 10, 10, 10, 10, 10))

    def test_scaled_total(self):
        """With scale 10 the troops must sum to 1000."""
        s = Strategy((100,) * 10, scale=10)
        assert s.total == 1000
        with pytest.raises(ValueError):
            Strategy(EVEN, scale=10)

    def test_invalid_scale_rejected(self):
        with pytest.raises(ValueError, match="scale"):
            Strategy(EVEN, scale=0)

    def test_str(self):
        assert str(Strategy(EVEN)) == "[10, 10, 10, 10, 10, 10, 10, 10, 10, 10]"
        scaled = Strategy((5, 95, 100, 100, 100, 100, 100, 100, 100, 200), scale=10)
        assert str(scaled) == "[0.5, 9.5, 10, 10, 10, 10, 10, 10, 10, 20]"

    def test_dedupe_keeps_first_occurrence(self):
        a = Strategy(EVEN)
        a_copy = Strategy(EVEN)
        b = Strategy((100, 0, 0, 0, 0, 0, 0, 0, 0, 0))
        result = dedupe_population([a, b, a_copy])
        assert result == [a, b]
        assert result[0] is a


class TestSplitPoints:
    """Tests for the split point representation."""

    def test_from_split_points(self):
        s = Strategy.from_split_points([10, 20, 30, 40, 50, 60, 70, 80, 90])
        assert s.troops == EVEN

    def test_to_split_points(self):
        s = Strategy((0, 10, 10, 10, 10, 10, 10, 10, 10, 20))
        assert s.to_split_points() == [0, 10, 20, 30, 40, 50, 60, 70, 80]

    def test_round_trip_from_points(self):
        """Split points -> strategy -> split points is exact."""
        rng = random.Random(1234)
        for _ in range(2000):
            points = random_split_points(rng)
            assert Strategy.from_split_points(points).to_split_points() == points

    def test_round_trip_from_strategy(self):
        """Strategy -> split points -> strategy is exact."""
        rng = random.Random(99)
        for _ in range(500):
            s = random_strategy(rng)
            assert Strategy.from_split_points(s.to_split_points()) == s

    def test_descending_points_rejected(self):
        with pytest.raises(ValueError, match="ascending"):
            Strategy.from_split_points([20, 10, 30, 40, 50, 60, 70, 80, 90])

    def test_out_of_range_points_rejected(self):
        with pytest.raises(ValueError):
            Strategy.from_split_points([10, 20, 30, 40, 50, 60, 70, 80, 101])

    def test_wrong_number_of_points_rejected(self):
        with pytest.raises(ValueError, match="9 split points"):
            Strategy.from_split_points([50])


class TestFixedPoint:
    """Tests for fractional allocations stored as fixed-point integers."""

    def test_from_floats_exact(self):
        values = [0.5, 9.5, 10, 10, 10, 10, 10, 10, 10, 20]
        s = Strategy.from_floats(values, scale=10)
        assert s.troops == (5, 95, 100, 100, 100, 100, 100, 100, 100, 200)
        assert s.as_floats() == values

    def test_round_trip_within_epsilon(self):
        """Arbitrary fractional allocations survive within one fixed-point unit."""
        rng = random.Random(7)
        scale = 10
        for _ in range(500):
            raw = [rng.random() for _ in range(NUM_CASTLES)]
            values = [100 * r / sum(raw) for r in raw]
            s = Strategy.from_floats(values, scale)
            assert sum(s.troops) == 1000
            for original, restored in zip(values, s.as_floats()):
                assert abs(original - restored) <= 1.0 / scale + 1e-9

    def test_fixed_point_round_trip_is_exact(self):
        s = random_strategy(random.Random(3), scale=100)
        assert Strategy.from_floats(s.as_floats(), scale=100) == s

    def test_from_floats_rejects_bad_total(self):
        with pytest.raises(ValueError, match="sum to 100"):
            Strategy.from_floats([10] * 9 + [20], scale=10)


class TestGenerator:
    """Tests for random strategy generation."""

    def test_random_strategy_is_valid(self):
        rng = random.Random(0)
        for _ in range(1000):
            s = random_strategy(rng)
            assert len(s.troops) == NUM_CASTLES
            assert sum(s.troops) == TOTAL_TROOPS
            assert all(t >= 0 for t in s.troops)

    def test_split_points_sorted(self):
        points = random_split_points(random.Random(5))
        assert len(points) == NUM_SPLITS
        assert points == sorted(points)

    def test_seeded_generation_is_reproducible(self):
        a = random_population(20, random.Random(42))
        b = random_population(20, random.Random(42))
        assert a == b

    def test_scaled_generation(self):
        s = random_strategy(random.Random(1), scale=10)
        assert s.scale == 10
        assert sum(s.troops) == 1000

    def test_negative_population_size_rejected(self):
        with pytest.raises(ValueError):
            random_population(-1)

    def test_children_are_valid_and_close(self):
        """Each child's split points stay within the variance of the parent's."""
        rng = random.Random(11)
        parent = random_strategy(rng)
        parent_points = parent.to_split_points()
        children = generate_children(parent, 50, 5, rng)

        assert len(children) == 50
        for child in children:
            assert sum(child.troops) == TOTAL_TROOPS
            for p, c in zip(parent_points, child.to_split_points()):
                assert abs(p - c) < 5

    def test_children_variance_one_copies_parent(self):
        """A variance of 1 allows no movement at all."""
        parent = Strategy((0, 10, 10, 10, 10, 10, 10, 10, 10, 20))
        children = generate_children(parent, 5, 1, random.Random(2))
        assert children == [parent] * 5

    def test_invalid_variance_rejected(self):
        with pytest.raises(ValueError, match="variance"):
            generate_children(Strategy(EVEN), 3, 0)
