"""
Data structures flowing through the risk engine.

GameRecord -> (recency weight) -> performance index
PlayerSnapshot bundles one side's ratings and recent games.
RiskAssessment is the immutable result handed to presentation sinks.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from chessrisk.risk.constants import VALID_RESULTS
from chessrisk.risk.recency import game_weight


@dataclass(frozen=True)
class GameRecord:
    """
    One finished game from one player's perspective.

    The recency weight is deliberately not stored: it depends on the
    evaluation instant and is recomputed for every assessment.
    """

    timestamp: datetime  # when the game ended (UTC)
    result: int  # -1 loss, 0 draw/unresolved, +1 win

    def __post_init__(self) -> None:
        if self.result not in VALID_RESULTS:
            raise ValueError(f"result must be -1, 0 or 1, got {self.result!r}")
        if self.timestamp.tzinfo is None:
            # Naive datetimes are taken to be UTC
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))

    @classmethod
    def from_epoch(cls, end_time: float, result: int) -> "GameRecord":
        return cls(timestamp=datetime.fromtimestamp(end_time, tz=timezone.utc), result=result)

    def weight(self, now: datetime, decay_rate: Optional[float] = None) -> float:
        """Recency weight of this game as seen from `now`."""
        return game_weight(self.timestamp, now, decay_rate=decay_rate)


@dataclass(frozen=True)
class PlayerSnapshot:
    """Everything the engine needs to know about one side."""

    username: str
    overall_rating: Optional[float]  # best of bullet/blitz/rapid
    category_rating: Optional[float]  # live rating for the current time control
    recent_games: tuple[GameRecord, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence, store a tuple so the snapshot stays immutable
        if not isinstance(self.recent_games, tuple):
            object.__setattr__(self, "recent_games", tuple(self.recent_games))

    def __repr__(self) -> str:
        return (
            f"<PlayerSnapshot({self.username}, overall={self.overall_rating}, "
            f"category={self.category_rating}, games={len(self.recent_games)})>"
        )


@dataclass(frozen=True)
class RiskAssessment:
    """
    Result of one risk evaluation, from the "self" player's perspective.

    Probabilities are in (0, 1), points are category-rating points,
    indices are in [-1, 1] and risk is clamped to [0, 1].
    """

    win_probability: float
    potential_point_gain: float
    potential_point_loss: float
    risk: float
    threat_index: float
    defense_index: float

    # False when the index is the neutral stand-in for an empty history
    threat_known: bool = True
    defense_known: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"<RiskAssessment(risk={self.risk:.3f}, win={self.win_probability:.3f}, "
            f"+{self.potential_point_gain:.2f}/-{self.potential_point_loss:.2f})>"
        )
