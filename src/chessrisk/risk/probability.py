"""
Logistic win probability from a rating difference.

    P(self beats opponent) = 1 / (1 + 10^((R_opponent - R_self) / 400))

P(a, b) + P(b, a) == 1 exactly and P(a, a) == 0.5.
"""

import math

from chessrisk.risk.constants import RATING_SCALE

# Bound for absurd rating gaps where the favourite's odds round to exactly 1
_MAX_PROBABILITY = math.nextafter(1.0, 0.0)


def win_probability(
    rating_self: float,
    rating_opponent: float,
    scale: float = RATING_SCALE,
) -> float:
    """
    Probability that `rating_self` beats `rating_opponent`.

    Only the favourite's side is evaluated with the logistic; the underdog
    gets its exact complement, so both directions always sum to 1.

    Args:
        rating_self: Rating of the player whose perspective we take
        rating_opponent: Rating of the other player
        scale: Logistic spread (400 for chess)

    Returns:
        Probability in (0, 1)

    Example:
        win_probability(1000, 1400)  # → ~0.0909
        win_probability(1500, 1500)  # → 0.5
    """
    if rating_self < rating_opponent:
        return 1.0 - win_probability(rating_opponent, rating_self, scale=scale)

    # Exponent <= 0 here, so 10**exponent underflows towards 0 instead of overflowing
    exponent = (rating_opponent - rating_self) / scale
    prob = 1.0 / (1.0 + 10.0 ** exponent)
    return min(_MAX_PROBABILITY, prob)


def loss_probability(rating_self: float, rating_opponent: float, scale: float = RATING_SCALE) -> float:
    """Complement of win_probability."""
    return 1.0 - win_probability(rating_self, rating_opponent, scale=scale)
