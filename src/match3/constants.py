GRID_ROWS = 8
GRID_COLS = 8
TILE_TYPES = 5
# Level progression stops adding tile types past this count.
MAX_TILE_TYPES = 8
MATCH_MIN_LENGTH = 3

BASE_SCORE = 10
COMBO_STEP = 0.1
SPECIAL_TILE_CHANCE = 0.1
BOMB_RADIUS = 1

TARGET_SCORE = 1000

RESHUFFLE_MAX_ATTEMPTS = 100
GENERATE_MAX_ATTEMPTS = 200

# Star thresholds, best first.
SCORE_STAR_RATIOS = (1.5, 1.2, 1.0)
MOVE_STAR_EFFICIENCY = (1.3, 1.1, 0.9)
TIME_STAR_FRACTIONS = (0.5, 0.3, 0.1)
