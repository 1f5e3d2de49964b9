"""
Assessment service - runs one risk assessment end to end.

Workflow:
1. Identities: usernames + live category ratings for both sides
   (passed in, or read off a rendered game page)
2. Snapshots: overall rating and recent games per side, fetched
   concurrently (both sides at once, and both requests per side at once)
3. Engine: RiskCalculator.assess() with a single evaluation instant

Failure policy:
- Missing username                → MissingIdentityError (fatal)
- Unknown player                  → UnknownPlayerError (fatal)
- Missing overall/category rating → MissingRatingError (fatal)
- Transport failure after retries → DataUnavailableError (fatal)
- No games for a player           → index falls back to neutral, flagged unknown

Usage:
    async with ChessComClient() as client:
        service = GameRiskService(client, RiskCalculator.from_settings(settings))
        assessment = await service.assess(me, opponent)
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Union

from bs4 import BeautifulSoup

from chessrisk.errors import MissingIdentityError, MissingRatingError, NoHistoryError
from chessrisk.risk.constants import DEFENSE_LABEL, THREAT_LABEL
from chessrisk.risk.models import GameRecord, PlayerSnapshot, RiskAssessment
from chessrisk.risk.synthesizer import RiskCalculator
from chessrisk.sources.page import OPPONENT, SELF, PlayerIdentity, resolve_players

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HistoryProvider(Protocol):
    """What the service needs from a game-history source."""

    async def overall_rating(self, username: str, side: Optional[str] = None) -> int:
        ...

    async def recent_games(self, username: str, count: int, side: Optional[str] = None) -> list[GameRecord]:
        ...


@dataclass(frozen=True)
class GameAssessment:
    """An assessment together with the players it was made for."""

    self_identity: PlayerIdentity
    opponent_identity: PlayerIdentity
    assessment: RiskAssessment

    def summary(self) -> str:
        return (
            f"{self.self_identity.username} vs {self.opponent_identity.username}: "
            f"risk={self.assessment.risk:.3f} win={self.assessment.win_probability:.3f}"
        )


class GameRiskService:
    """Fetches both players' data and runs the risk engine."""

    def __init__(
        self,
        provider: HistoryProvider,
        calculator: Optional[RiskCalculator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.provider = provider
        self.calculator = calculator or RiskCalculator()
        self.clock = clock

    async def assess(self, self_identity: PlayerIdentity, opponent_identity: PlayerIdentity) -> RiskAssessment:
        """
        Assess the current game for `self_identity`.

        Raises:
            MissingIdentityError: If either username is empty
            MissingRatingError: If any rating can't be resolved
            DataUnavailableError: If the API keeps failing
        """
        for side, identity in ((SELF, self_identity), (OPPONENT, opponent_identity)):
            if not identity.username:
                raise MissingIdentityError("Username is empty", side=side)
            if identity.category_rating is None:
                raise MissingRatingError(
                    f"No live category rating for '{identity.username}'", side=side
                )

        self_snapshot, opponent_snapshot = await asyncio.gather(
            self._load_snapshot(self_identity, SELF),
            self._load_snapshot(opponent_identity, OPPONENT),
        )

        # One instant for both sides so their weights are comparable
        now = self.clock()
        assessment = self.calculator.assess(self_snapshot, opponent_snapshot, now)

        logger.info(
            "Assessed %s (%s/%s) vs %s (%s/%s): risk=%.3f win=%.3f gain=%.2f loss=%.2f",
            self_snapshot.username, self_snapshot.overall_rating, self_snapshot.category_rating,
            opponent_snapshot.username, opponent_snapshot.overall_rating, opponent_snapshot.category_rating,
            assessment.risk, assessment.win_probability,
            assessment.potential_point_gain, assessment.potential_point_loss,
        )
        return assessment

    async def assess_page(self, page: Union[str, BeautifulSoup]) -> GameAssessment:
        """Resolve both players from a rendered game page and assess."""
        self_identity, opponent_identity = resolve_players(page)
        assessment = await self.assess(self_identity, opponent_identity)
        return GameAssessment(self_identity, opponent_identity, assessment)

    async def _load_snapshot(self, identity: PlayerIdentity, side: str) -> PlayerSnapshot:
        rating, games = await asyncio.gather(
            self.provider.overall_rating(identity.username, side=side),
            self.provider.recent_games(identity.username, self.calculator.games_window, side=side),
            return_exceptions=True,
        )

        if isinstance(rating, BaseException):
            raise rating
        if isinstance(games, NoHistoryError):
            logger.warning("%s; using neutral %s index", games, DEFENSE_LABEL if side == SELF else THREAT_LABEL)
            games = []
        elif isinstance(games, BaseException):
            raise games

        return PlayerSnapshot(
            username=identity.username,
            overall_rating=rating,
            category_rating=identity.category_rating,
            recent_games=games,
        )
