"""
Utilities module for the Riddler Blotto implementation.
"""
from src.utils.constants import (
    NUM_CASTLES, NUM_SPLITS, TOTAL_TROOPS,
    CASTLE_WEIGHTS, TOTAL_POINTS, HALF_POINTS,
    WIN_POINTS, TIE_POINTS,
    RELEGATION, BRACKET, TOURNAMENT_MODES
)

__all__ = [
    'NUM_CASTLES', 'NUM_SPLITS', 'TOTAL_TROOPS',
    'CASTLE_WEIGHTS', 'TOTAL_POINTS', 'HALF_POINTS',
    'WIN_POINTS', 'TIE_POINTS',
    'RELEGATION', 'BRACKET', 'TOURNAMENT_MODES',
]
