"""
Performance index: a recency-weighted summary of a player's recent results.

    index = sum(result_i * weight_i) / len(games)

The divisor is the number of games, NOT the sum of weights. An index built
from stale games is therefore pulled towards zero, so old form counts for
less than recent form even when every game was a win.

The same calculation serves both sides of an assessment. It is labelled
"defense" for the player we assess for and "threat" for the opponent.

Empty history returns NEUTRAL_INDEX (0.0) instead of dividing by zero; the
result is flagged as not known so the overlay can say so.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from chessrisk.risk.constants import NEUTRAL_INDEX
from chessrisk.risk.models import GameRecord
from chessrisk.risk.recency import game_weight


@dataclass(frozen=True)
class PerformanceIndex:
    """A performance index value and how it was derived."""

    value: float
    label: str  # "defense" or "threat"
    games_counted: int

    @property
    def known(self) -> bool:
        """False when the value is the neutral stand-in for no history."""
        return self.games_counted > 0


def performance_index(
    games: Sequence[GameRecord],
    now: datetime,
    decay_rate: Optional[float] = None,
) -> float:
    """
    Recency-weighted mean of signed outcomes.

    Args:
        games: Recent games, any order
        now: Evaluation instant used for every game's weight
        decay_rate: Decay per day for the recency weights

    Returns:
        Index in [-1, 1], or NEUTRAL_INDEX when `games` is empty

    Example:
        # Two wins that ended right now, one loss a day ago
        performance_index([win_now, win_now, loss_1d], now)
        # → (1 + 1 - 0.670) / 3 ≈ 0.443
    """
    if not games:
        return NEUTRAL_INDEX

    total = sum(game.result * game_weight(game.timestamp, now, decay_rate=decay_rate) for game in games)
    return total / len(games)


def evaluate_performance(
    games: Sequence[GameRecord],
    now: datetime,
    label: str,
    decay_rate: Optional[float] = None,
) -> PerformanceIndex:
    """Compute a labelled performance index for one side."""
    return PerformanceIndex(
        value=performance_index(games, now, decay_rate=decay_rate),
        label=label,
        games_counted=len(games),
    )
