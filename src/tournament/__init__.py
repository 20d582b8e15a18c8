"""
Tournament module for ranking Blotto strategies.

Provides:
- Round-robin tallying of every pair in a population
- Seeded single-elimination brackets
- Relegation tournaments with a cascading tie-break
- TournamentRunner: Orchestrates tournament execution
- TournamentStorage: Persists tournament winners
"""

from src.tournament.round_robin import (
    BattleScore,
    tally_battles,
    run_battles,
    standings,
    rank_population,
    num_battles,
)
from src.tournament.seeding import (
    seed_order,
    next_power_of_two_at_least,
    sort_by_indices,
    is_power_of_two,
)
from src.tournament.bracket import run_bracket, seed_population, run_seeded_bracket, BracketResult
from src.tournament.relegation import (
    run_relegation_tournament,
    pick_relegated,
    RelegationResult,
    RoundRecord,
    TieBreak,
    TieBreakPolicy,
    AmbiguousTieError,
)
from src.tournament.storage import TournamentStorage, TournamentResult
from src.tournament.runner import TournamentRunner, TournamentConfig, run_parallel_relegation
from src.tournament.display import format_standings, format_placings

__all__ = [
    'BattleScore',
    'tally_battles',
    'run_battles',
    'standings',
    'rank_population',
    'num_battles',
    'seed_order',
    'next_power_of_two_at_least',
    'sort_by_indices',
    'is_power_of_two',
    'run_bracket',
    'seed_population',
    'run_seeded_bracket',
    'BracketResult',
    'run_relegation_tournament',
    'pick_relegated',
    'RelegationResult',
    'RoundRecord',
    'TieBreak',
    'TieBreakPolicy',
    'AmbiguousTieError',
    'TournamentStorage',
    'TournamentResult',
    'TournamentRunner',
    'TournamentConfig',
    'run_parallel_relegation',
    'format_standings',
    'format_placings',
]
