#!/usr/bin/env python3
"""
Blotto tournament over a random population of strategies.

Usage:
    python scripts/tournament.py --mode relegation --size 64

Examples:
    # Quick relegation tournament
    python scripts/tournament.py --size 16 --seed 1

    # Seeded single-elimination bracket keeping the top 4
    python scripts/tournament.py --mode bracket --size 1000 --keep 4

    # Eight independent relegations on four processes, winners reduced at the end
    python scripts/tournament.py --size 100 --instances 8 --workers 4 --progress

    # Feed the last five stored winners back into the population
    python scripts/tournament.py --size 64 --previous-winners 5
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.tournament.runner import TournamentRunner, TournamentConfig
from src.tournament.relegation import TieBreakPolicy
from src.tournament.storage import TournamentStorage
from src.tournament.display import format_tournament_list
from src.utils.constants import TOURNAMENT_MODES, RELEGATION


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Rank random Blotto strategies with a relegation tournament or a seeded bracket.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Tie policies (when two relegation candidates have equal victory points and wins):
  first            Relegate the first of the two in population order
  previous_round   Relegate the one placed lower in the previous round
  strict           Stop with an error
'''
    )

    parser.add_argument(
        '--mode', '-m',
        type=str, choices=TOURNAMENT_MODES, default=RELEGATION,
        help='Tournament format (default: relegation)'
    )
    parser.add_argument(
        '--size', '-s',
        type=int, default=64,
        help='Random strategies per instance (default: 64)'
    )
    parser.add_argument(
        '--instances', '-n',
        type=int, default=1,
        help='Independent tournaments whose winners are reduced at the end (default: 1)'
    )
    parser.add_argument(
        '--workers', '-w',
        type=int, default=1,
        help='Worker processes for independent relegation tournaments (default: 1)'
    )
    parser.add_argument(
        '--keep', '-k',
        type=int, default=1,
        help='Bracket survivors to keep, a power of two (default: 1)'
    )
    parser.add_argument(
        '--seed',
        type=int, default=None,
        help='Random seed for reproducible populations'
    )
    parser.add_argument(
        '--scale',
        type=int, default=1,
        help='Fixed-point units per troop, e.g. 10 for tenths (default: 1)'
    )
    parser.add_argument(
        '--dedupe',
        action='store_true',
        help='Merge identical allocations into a single entrant'
    )
    parser.add_argument(
        '--tie-policy',
        type=str, choices=[p.value for p in TieBreakPolicy], default=TieBreakPolicy.FIRST.value,
        help='Resolution of fully tied relegation candidates (default: first)'
    )
    parser.add_argument(
        '--previous-winners',
        type=int, default=0,
        help='Add this many stored winners of earlier tournaments to each population'
    )
    parser.add_argument(
        '--save-top',
        type=int, default=10,
        help='Number of placings to store (default: 10)'
    )
    parser.add_argument(
        '--no-save',
        action='store_true',
        help='Do not store the results'
    )
    parser.add_argument(
        '--progress',
        action='store_true',
        help='Show a progress bar over independent instances'
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Minimal output (only the winner)'
    )
    parser.add_argument(
        '--output', '-o',
        type=str, default=None,
        help='Tournament ID/name (auto-generated if not specified)'
    )
    parser.add_argument(
        '--data-dir',
        type=str, default='data',
        help='Directory for storing results (default: data)'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List stored tournaments and exit'
    )

    return parser.parse_args(argv)


def config_from_args(args) -> TournamentConfig:
    """Build a TournamentConfig from parsed arguments."""
    return TournamentConfig(
        mode=args.mode,
        population_size=args.size,
        instances=args.instances,
        workers=args.workers,
        keep=args.keep,
        seed=args.seed,
        dedupe=args.dedupe,
        tie_policy=args.tie_policy,
        previous_winners=args.previous_winners,
        save_top=args.save_top,
        scale=args.scale,
        save=not args.no_save,
        data_dir=args.data_dir
    )


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Handle --list
    if args.list:
        storage = TournamentStorage(args.data_dir)
        print(format_tournament_list(storage.list_tournaments()))
        return 0

    config = config_from_args(args)
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}")
        return 1

    runner = TournamentRunner(
        config=config,
        verbose=not args.quiet,
        show_progress=args.progress
    )

    try:
        result = runner.run(tournament_id=args.output)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(f"\nWinner: {result.winner}")
    if config.save:
        print(f"Tournament ID: {result.tournament_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
