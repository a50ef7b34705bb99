BOARD_WIDTH = 8
BOARD_HEIGHT = 8

# Minimum number of same-colored tiles in a row or column that forms a match.
MIN_MATCH = 3

# Scoring reference values. Runs of four or more all score the flat bonus.
THREE_MATCH_POINTS = 10
FOUR_PLUS_MATCH_POINTS = 20
# Applied as CASCADE_MULTIPLIER ** (cascade_level - 1).
CASCADE_MULTIPLIER = 1.5

# Upper bound on automatic cascade cycles after one swap; hitting it means the
# color supplier keeps producing matches (e.g. a single-color palette).
MAX_CASCADE_DEPTH = 1000
