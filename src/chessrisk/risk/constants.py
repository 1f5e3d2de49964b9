"""
Risk engine constants.

DECAY_RATE: Controls how fast old games lose influence
  - weight = exp(-DECAY_RATE * age_in_days)
  - 0.4 means a game from yesterday counts ~67%, one from a week ago ~6%

K_FACTOR: Maximum rating swing for a single game
  - Expected loss if beaten  = K * P(win)
  - Expected gain if winning = K * P(loss)

RATING_SCALE: Spread of the logistic rating model
  - 400 is the standard chess value (a 400-point gap means 10:1 odds)
"""

# Recency decay rate (per day of game age)
DECAY_RATE = 0.4

# Stake size used for expected point swing
K_FACTOR = 15.0

# How many recent games feed the performance index
GAMES_WINDOW = 10

# Logistic spread
RATING_SCALE = 400.0

# Value substituted for a performance index when a player has no history.
# Sits at the midpoint of [-1, 1], i.e. "average / unknown".
NEUTRAL_INDEX = 0.0

# Signed outcomes from a player's perspective
LOSS, DRAW, WIN = -1, 0, 1
VALID_RESULTS = frozenset({LOSS, DRAW, WIN})

# Rating categories counted towards a player's overall rating.
# Keys match the chess.com stats payload.
RATING_CATEGORIES = ("chess_bullet", "chess_blitz", "chess_rapid")

# Labels used at the two performance index call sites
DEFENSE_LABEL = "defense"
THREAT_LABEL = "threat"
