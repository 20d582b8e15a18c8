"""
Constants for the Riddler Blotto game.
"""

# Battlefields ("castles") and troops
NUM_CASTLES = 10
NUM_SPLITS = NUM_CASTLES - 1
TOTAL_TROOPS = 100

# Castle i (0-indexed) is worth i + 1 points
CASTLE_WEIGHTS = tuple(range(1, NUM_CASTLES + 1))
TOTAL_POINTS = sum(CASTLE_WEIGHTS)  # 55
HALF_POINTS = TOTAL_POINTS / 2      # 27.5

# Victory points for the relegation ranking.
# Wins count double so that a win outranks two ties without fractions.
WIN_POINTS = 2
TIE_POINTS = 1

# Tournament modes
RELEGATION = 'relegation'
BRACKET = 'bracket'
TOURNAMENT_MODES = [RELEGATION, BRACKET]
