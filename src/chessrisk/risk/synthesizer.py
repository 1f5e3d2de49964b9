"""
Risk synthesis: turn ratings and performance indices into a game risk.

Steps:
  1. P_win from overall ratings; P_loss = 1 - P_win
  2. P_win_cat from the live category ratings
  3. Stakes: points_loss = K * P_win_cat, points_gain = K * (1 - P_win_cat)
     (losing while favoured costs more, as in an Elo update)
  4. Map indices from [-1, 1] to [0, 1]
  5. risk_factor = threat_norm * (1 - defense_norm)
  6. adjusted = P_loss * (1 + risk_factor) * (points_loss / K)
  7. risk = clamp(adjusted, 0, 1)

Step 6 multiplies the overall-rating loss probability by the category-rating
stake ratio (points_loss / K == P_win_cat).
Overall ratings set the odds and category ratings set the stake.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from chessrisk.errors import MissingRatingError
from chessrisk.risk.constants import (
    DECAY_RATE,
    DEFENSE_LABEL,
    GAMES_WINDOW,
    K_FACTOR,
    THREAT_LABEL,
)
from chessrisk.risk.models import PlayerSnapshot, RiskAssessment
from chessrisk.risk.performance import evaluate_performance
from chessrisk.risk.probability import win_probability

logger = logging.getLogger(__name__)


def _normalize_index(index: float) -> float:
    """Map a performance index from [-1, 1] to [0, 1]."""
    return (index + 1.0) / 2.0


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def synthesize(
    rating_self_overall: float,
    defense_index: float,
    rating_opponent_overall: float,
    threat_index: float,
    rating_self_category: float,
    rating_opponent_category: float,
    k_factor: float = K_FACTOR,
    defense_known: bool = True,
    threat_known: bool = True,
) -> RiskAssessment:
    """
    Combine ratings and performance indices into a RiskAssessment.

    Args:
        rating_self_overall: Our best rating across categories
        defense_index: Our performance index, [-1, 1]
        rating_opponent_overall: Opponent's best rating across categories
        threat_index: Opponent's performance index, [-1, 1]
        rating_self_category: Our live rating for this time control
        rating_opponent_category: Opponent's live rating for this time control
        k_factor: Maximum rating swing for one game
        defense_known: False if defense_index is the no-history stand-in
        threat_known: False if threat_index is the no-history stand-in

    Returns:
        RiskAssessment with risk clamped to [0, 1]

    Raises:
        ValueError: If any input is not finite or k_factor <= 0

    Example:
        # Equal players, no history, equal category ratings
        result = synthesize(1500, 0.0, 1500, 0.0, 1200, 1200)
        result.win_probability       # → 0.5
        result.potential_point_loss  # → 7.5
        result.risk                  # → 0.3125
    """
    inputs = {
        "rating_self_overall": rating_self_overall,
        "defense_index": defense_index,
        "rating_opponent_overall": rating_opponent_overall,
        "threat_index": threat_index,
        "rating_self_category": rating_self_category,
        "rating_opponent_category": rating_opponent_category,
        "k_factor": k_factor,
    }
    for name, value in inputs.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value!r}")
    if k_factor <= 0:
        raise ValueError(f"k_factor must be > 0, got {k_factor}")

    # 1-2. Overall odds and category odds
    win_prob = win_probability(rating_self_overall, rating_opponent_overall)
    loss_prob = 1.0 - win_prob

    category_win_prob = win_probability(rating_self_category, rating_opponent_category)
    category_loss_prob = 1.0 - category_win_prob

    # 3. Stakes in category-rating points
    potential_point_loss = k_factor * category_win_prob
    potential_point_gain = k_factor * category_loss_prob

    # 4-5. Form differential
    normalized_threat = _normalize_index(threat_index)
    normalized_defense = _normalize_index(defense_index)
    risk_factor = normalized_threat * (1.0 - normalized_defense)

    # 6-7. Overall odds scaled by the category stake ratio
    adjusted_risk = loss_prob * (1.0 + risk_factor) * (potential_point_loss / k_factor)
    risk = _clamp(adjusted_risk)

    return RiskAssessment(
        win_probability=win_prob,
        potential_point_gain=potential_point_gain,
        potential_point_loss=potential_point_loss,
        risk=risk,
        threat_index=threat_index,
        defense_index=defense_index,
        threat_known=threat_known,
        defense_known=defense_known,
    )


class RiskCalculator:
    """
    Game risk calculator.

    Holds the tunable constants and runs the full pipeline
    (recency weights -> performance indices -> synthesis) for two snapshots.

    Usage:
        calculator = RiskCalculator()

        result = calculator.assess(
            self_snapshot=PlayerSnapshot("alice", 1650, 1580, games_a),
            opponent_snapshot=PlayerSnapshot("bob", 1720, 1610, games_b),
            now=datetime.now(timezone.utc),
        )

        print(f"Risk: {result.risk:.1%}")
    """

    def __init__(
        self,
        decay_rate: Optional[float] = None,
        k_factor: Optional[float] = None,
        games_window: Optional[int] = None,
    ):
        """
        Initialize the calculator.

        Args:
            decay_rate: Recency decay per day. Default DECAY_RATE.
            k_factor: Maximum rating swing per game. Default K_FACTOR.
            games_window: Recent games per side fed to the index. Default GAMES_WINDOW.
        """
        self.decay_rate = DECAY_RATE if decay_rate is None else decay_rate
        self.k_factor = K_FACTOR if k_factor is None else k_factor
        self.games_window = GAMES_WINDOW if games_window is None else games_window

        if self.decay_rate <= 0:
            raise ValueError(f"decay_rate must be > 0, got {self.decay_rate}")
        if self.k_factor <= 0:
            raise ValueError(f"k_factor must be > 0, got {self.k_factor}")
        if self.games_window < 1:
            raise ValueError(f"games_window must be >= 1, got {self.games_window}")

    @classmethod
    def from_settings(cls, settings) -> "RiskCalculator":
        """Build a calculator from a chessrisk.config.Settings instance."""
        return cls(
            decay_rate=settings.decay_rate,
            k_factor=settings.k_factor,
            games_window=settings.games_window,
        )

    def assess(
        self,
        self_snapshot: PlayerSnapshot,
        opponent_snapshot: PlayerSnapshot,
        now: datetime,
    ) -> RiskAssessment:
        """
        Assess the risk of the current game for `self_snapshot`.

        Args:
            self_snapshot: The player we assess for
            opponent_snapshot: The player across the board
            now: Evaluation instant, shared by both sides' recency weights

        Returns:
            RiskAssessment

        Raises:
            MissingRatingError: If any overall or category rating is missing
        """
        for side, snapshot in (("self", self_snapshot), ("opponent", opponent_snapshot)):
            if snapshot.overall_rating is None:
                raise MissingRatingError(f"No overall rating for '{snapshot.username}'", side=side)
            if snapshot.category_rating is None:
                raise MissingRatingError(f"No category rating for '{snapshot.username}'", side=side)

        defense = evaluate_performance(
            self_snapshot.recent_games[: self.games_window],
            now,
            label=DEFENSE_LABEL,
            decay_rate=self.decay_rate,
        )
        threat = evaluate_performance(
            opponent_snapshot.recent_games[: self.games_window],
            now,
            label=THREAT_LABEL,
            decay_rate=self.decay_rate,
        )

        logger.debug(
            "%s defense=%.4f (%d games), %s threat=%.4f (%d games)",
            self_snapshot.username, defense.value, defense.games_counted,
            opponent_snapshot.username, threat.value, threat.games_counted,
        )

        return synthesize(
            rating_self_overall=float(self_snapshot.overall_rating),
            defense_index=defense.value,
            rating_opponent_overall=float(opponent_snapshot.overall_rating),
            threat_index=threat.value,
            rating_self_category=float(self_snapshot.category_rating),
            rating_opponent_category=float(opponent_snapshot.category_rating),
            k_factor=self.k_factor,
            defense_known=defense.known,
            threat_known=threat.known,
        )
