"""
Main script to score a Blotto battle between two troop allocations.
"""
import argparse
import random
import sys

from src.blotto.strategy import Strategy
from src.blotto.battle import battle
from src.blotto.generator import random_strategy
from src.tournament.display import format_battle


def parse_strategy_spec(spec: str, scale: int = 1, rng: random.Random = None) -> Strategy:
    """
    Parse a strategy specification string.

    Formats:
        '10,10,10,10,10,10,10,10,10,10'  -> whole-troop allocation
        '0.5,9.5,10,10,10,10,10,10,10,20' -> fractional allocation (needs scale > 1)
        'random'                          -> uniformly random allocation

    Returns:
        Strategy

    Raises:
        ValueError: If the specification is not a valid allocation
    """
    if spec.strip().lower() == 'random':
        return random_strategy(rng, scale)

    parts = [p.strip() for p in spec.split(',') if p.strip()]
    if scale == 1:
        try:
            troops = tuple(int(p) for p in parts)
        except ValueError:
            raise ValueError(f"Allocation must be comma-separated integers, got '{spec}'")
        return Strategy(troops)

    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise ValueError(f"Allocation must be comma-separated numbers, got '{spec}'")
    return Strategy.from_floats(values, scale)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Score one Blotto battle between two allocations.')
    parser.add_argument('a', type=str, help="First allocation, e.g. '10,10,10,10,10,10,10,10,10,10' or 'random'")
    parser.add_argument('b', type=str, help='Second allocation')
    parser.add_argument('--scale', type=int, default=1,
                        help='Fixed-point units per troop for fractional allocations (default: 1)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for random allocations')
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    try:
        a = parse_strategy_spec(args.a, args.scale, rng)
        b = parse_strategy_spec(args.b, args.scale, rng)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(format_battle(a, b, battle(a, b)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
