"""
Recency weighting for historical games.

Recent games say more about a player's current form than old ones, so each
game's outcome is scaled by an exponential decay on its age.

Formula:
    weight = exp(-decay_rate * age_days)

Where age_days = (now - game_end) in (fractional) days. A game that ended
"now" has weight 1.0; weight shrinks towards (but never reaches) 0.0 as the
game recedes into the past.

Games timestamped after `now` (clock skew between us and the game server)
are clamped to age 0 rather than failing the whole assessment. Pass
strict=True to raise InvalidTimestampError instead.
"""

import logging
import math
import sys
from datetime import datetime, timezone

from chessrisk.errors import InvalidTimestampError
from chessrisk.risk.constants import DECAY_RATE

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0

# exp() underflows to 0.0 for ages beyond a few years; keep weights positive
_MIN_WEIGHT = sys.float_info.min


def age_in_days(game_timestamp: datetime, now: datetime) -> float:
    """Signed age of a game in days (negative if it ends after `now`)."""
    return (_as_utc(now) - _as_utc(game_timestamp)).total_seconds() / SECONDS_PER_DAY


def weight_for_age(days: float, decay_rate: float | None = None) -> float:
    """
    Decay weight for a game `days` old.

    Args:
        days: Age of the game in days, must be >= 0
        decay_rate: Decay per day. Default from DECAY_RATE.

    Returns:
        Weight in (0, 1]

    Examples:
        weight_for_age(0.0)  # → 1.0
        weight_for_age(1.0)  # → ~0.670
        weight_for_age(7.0)  # → ~0.061
    """
    if decay_rate is None:
        decay_rate = DECAY_RATE
    if days < 0:
        raise ValueError(f"days must be >= 0, got {days}")

    return max(_MIN_WEIGHT, math.exp(-decay_rate * days))


def game_weight(
    game_timestamp: datetime,
    now: datetime,
    decay_rate: float | None = None,
    strict: bool = False,
) -> float:
    """
    Recency weight for a game that ended at `game_timestamp`.

    Args:
        game_timestamp: When the game ended
        now: The evaluation instant (shared by every game in one assessment)
        decay_rate: Decay per day. Default from DECAY_RATE.
        strict: Raise InvalidTimestampError for future games instead of clamping

    Returns:
        Weight in (0, 1]
    """
    days = age_in_days(game_timestamp, now)

    if days < 0:
        if strict:
            raise InvalidTimestampError(
                f"Game ended at {game_timestamp.isoformat()}, after evaluation time {now.isoformat()}"
            )
        logger.debug("Clamping future game timestamp %s to age 0", game_timestamp.isoformat())
        days = 0.0

    return weight_for_age(days, decay_rate=decay_rate)


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are treated as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
