"""
Blotto game module: strategies, random generation and battle scoring.
"""
from src.blotto.strategy import Strategy, dedupe_population
from src.blotto.battle import battle, battle_winner, compare_scores
from src.blotto.generator import (
    random_split_points,
    random_strategy,
    random_population,
    generate_children,
)

__all__ = [
    'Strategy',
    'dedupe_population',
    'battle',
    'battle_winner',
    'compare_scores',
    'random_split_points',
    'random_strategy',
    'random_population',
    'generate_children',
]
