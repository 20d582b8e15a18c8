"""
Strategy value type for the Riddler Blotto game.

A strategy is an allocation of troops across the ten castles. Allocations are
stored as integers; fractional allocations use a fixed-point ``scale`` (for
example ``scale=10`` stores tenths of a troop) so that totals never drift.
"""
import math
import operator
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from src.utils.constants import NUM_CASTLES, NUM_SPLITS, TOTAL_TROOPS


@dataclass(frozen=True)
class Strategy:
    """
    Immutable troop allocation over the castles.

    Equality and hashing are structural, so two strategies with the same
    allocation are the same entity when used as dictionary keys.

    Attributes:
        troops: Troops per castle, castle 0 first
        scale: Fixed-point units per troop (1 = whole troops)
    """
    troops: Tuple[int, ...]
    scale: int = 1

    def __post_init__(self):
        if isinstance(self.scale, bool) or not isinstance(self.scale, int) or self.scale < 1:
            raise ValueError(f"scale must be a positive integer, got {self.scale!r}")

        try:
            troops = tuple(operator.index(t) for t in self.troops)
        except TypeError:
            raise ValueError(f"Troop counts must be integers, got {self.troops!r}")

        if len(troops) != NUM_CASTLES:
            raise ValueError(f"Strategy needs exactly {NUM_CASTLES} castles, got {len(troops)}")
        if any(t < 0 for t in troops):
            raise ValueError(f"Troop counts must be non-negative, got {list(troops)}")
        if sum(troops) != self.total:
            raise ValueError(f"Troops must sum to {self.total}, got {sum(troops)}")

        # Normalise lists and numpy integers to a plain tuple of ints
        object.__setattr__(self, 'troops', troops)

    @property
    def total(self) -> int:
        """Total troops in fixed-point units."""
        return TOTAL_TROOPS * self.scale

    def __iter__(self):
        return iter(self.troops)

    def __len__(self) -> int:
        return len(self.troops)

    def __getitem__(self, index):
        return self.troops[index]

    def __str__(self) -> str:
        if self.scale == 1:
            return "[" + ", ".join(str(t) for t in self.troops) + "]"
        return "[" + ", ".join(f"{t:g}" for t in self.as_floats()) + "]"

    # ------------------------------------------------------------------
    # Split point representation
    # ------------------------------------------------------------------

    @classmethod
    def from_split_points(cls, split_points: Sequence[int], scale: int = 1) -> 'Strategy':
        """
        Build a strategy from its split points.

        The split points are the 9 cut positions along a stick of length
        ``TOTAL_TROOPS * scale``; the troops are the lengths of the pieces.

        Args:
            split_points: 9 ascending integers in [0, total]
            scale: Fixed-point units per troop

        Returns:
            Strategy whose castle allocations are the gaps between split points

        Raises:
            ValueError: If there are not 9 points or they are not ascending
                within range
        """
        points = list(split_points)
        total = TOTAL_TROOPS * scale
        if len(points) != NUM_SPLITS:
            raise ValueError(f"Need exactly {NUM_SPLITS} split points, got {len(points)}")
        if points[0] < 0 or points[-1] > total:
            raise ValueError(f"Split points must lie within [0, {total}], got {points}")
        if any(b < a for a, b in zip(points, points[1:])):
            raise ValueError(f"Split points must be ascending, got {points}")

        troops = [points[0]]
        troops.extend(b - a for a, b in zip(points, points[1:]))
        troops.append(total - points[-1])
        return cls(tuple(troops), scale)

    def to_split_points(self) -> List[int]:
        """Cumulative troop counts at each of the 9 cuts."""
        points = []
        running = 0
        for t in self.troops[:NUM_SPLITS]:
            running += t
            points.append(running)
        return points

    # ------------------------------------------------------------------
    # Fixed-point conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_floats(cls, values: Iterable[float], scale: int = 10) -> 'Strategy':
        """
        Convert a fractional allocation to a fixed-point strategy.

        Cumulative sums are rounded rather than individual castles, so the
        total is preserved exactly and each castle moves by less than one
        fixed-point unit.

        Args:
            values: Ten non-negative troop amounts summing to 100
            scale: Fixed-point units per troop

        Returns:
            Strategy with ``scale`` units per troop
        """
        values = [float(v) for v in values]
        if len(values) != NUM_CASTLES:
            raise ValueError(f"Strategy needs exactly {NUM_CASTLES} castles, got {len(values)}")
        if any(v < 0 or math.isnan(v) for v in values):
            raise ValueError(f"Troop amounts must be non-negative numbers, got {values}")
        if abs(sum(values) - TOTAL_TROOPS) > 1.0 / scale:
            raise ValueError(f"Troops must sum to {TOTAL_TROOPS}, got {sum(values)}")

        total = TOTAL_TROOPS * scale
        points = []
        running = 0.0
        for v in values[:NUM_SPLITS]:
            running += v
            points.append(min(total, math.floor(running * scale + 0.5)))
        return cls.from_split_points(points, scale)

    def as_floats(self) -> List[float]:
        """Troops per castle in whole-troop units."""
        return [t / self.scale for t in self.troops]


def dedupe_population(population: Iterable[Strategy]) -> List[Strategy]:
    """Drop repeated allocations, keeping the first occurrence of each."""
    return list(dict.fromkeys(population))
