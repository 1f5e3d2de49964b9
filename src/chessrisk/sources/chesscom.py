"""
chess.com published-data API client.

Fetches the two things the risk engine needs per player:
- Recent games: walked backwards through the monthly archives
    GET /player/{username}/games/archives  → {"archives": [url, ...]}  (oldest first)
    GET {archive_url}                      → {"games": [...]}          (oldest first)
- Overall rating: best "last" rating across bullet, blitz and rapid
    GET /player/{username}/stats

Failure mapping:
- HTTP 404                       → UnknownPlayerError (not retried)
- No archives / no games         → NoHistoryError
- No rated category in stats     → MissingRatingError
- Timeouts, 429, 5xx, bad JSON   → retried, then DataUnavailableError
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from chessrisk.config import settings
from chessrisk.errors import (
    DataUnavailableError,
    MissingRatingError,
    NoHistoryError,
    UnknownPlayerError,
)
from chessrisk.risk.constants import DRAW, LOSS, RATING_CATEGORIES, WIN
from chessrisk.risk.models import GameRecord
from chessrisk.sources.retry import with_retry

logger = logging.getLogger(__name__)


class TransientHTTPError(Exception):
    """A response worth retrying (rate limit or server error)."""

    def __init__(self, status: int, url: str):
        super().__init__(f"HTTP {status} from {url}")
        self.status = status


# Errors that trigger another attempt
RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, TransientHTTPError)


# =============================================================================
# Payload parsing
# =============================================================================


def parse_game_result(game: dict, username: str) -> int:
    """
    Signed result of a game from `username`'s perspective.

    Only a "win" result on either colour decides the game; draws, aborts,
    timeouts vs insufficient material etc. all count as 0.

    Args:
        game: One entry of an archive's "games" list
        username: Player whose perspective we take (case-insensitive)

    Returns:
        1 for a win, -1 for a loss, 0 otherwise
    """
    username = username.lower()
    for colour in ("white", "black"):
        side = game.get(colour) or {}
        if side.get("result") == "win":
            winner = (side.get("username") or "").lower()
            return WIN if winner == username else LOSS
    return DRAW


def parse_game(game: dict, username: str) -> Optional[GameRecord]:
    """Build a GameRecord from an archive entry, or None if it has no end time."""
    end_time = game.get("end_time")
    if end_time is None:
        return None
    return GameRecord.from_epoch(end_time, parse_game_result(game, username))


def parse_overall_rating(stats: dict) -> Optional[int]:
    """
    Best current rating across bullet, blitz and rapid.

    Returns:
        The highest "last.rating", or None if the player has none of these categories
    """
    ratings = []
    for category in RATING_CATEGORIES:
        rating = ((stats.get(category) or {}).get("last") or {}).get("rating")
        if rating is not None:
            ratings.append(int(rating))
    return max(ratings) if ratings else None


# =============================================================================
# Client
# =============================================================================


class ChessComClient:
    """
    Async client for the chess.com published-data API.

    Usage:
        async with ChessComClient() as client:
            rating = await client.overall_rating("hikaru")
            games = await client.recent_games("hikaru", 10)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_base_delay: Optional[float] = None,
        user_agent: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root. Default from settings.api_base_url
            timeout_s: Total timeout per request. Default from settings.http_timeout_s
            max_retries: Attempts per request. Default from settings.http_max_retries
            retry_base_delay: First backoff delay. Default from settings.http_retry_base_delay
            user_agent: User-Agent header. Default from settings.user_agent
            session: Existing aiohttp session to reuse (not closed on exit)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else settings.http_timeout_s
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.retry_base_delay = (
            retry_base_delay if retry_base_delay is not None else settings.http_retry_base_delay
        )
        self.user_agent = user_agent or settings.user_agent

        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "ChessComClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_s),
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def player_url(self, username: str, *parts: str) -> str:
        path = "/".join([quote(username.lower()), *parts])
        return f"{self.base_url}/player/{path}"

    async def archives(self, username: str, side: Optional[str] = None) -> list[str]:
        """
        Monthly archive URLs for a player, oldest first.

        Raises:
            NoHistoryError: If the player has no archives
        """
        payload = await self._get_json(self.player_url(username, "games", "archives"), username, side)
        archives = payload.get("archives") or []
        if not archives:
            raise NoHistoryError(username, side=side)
        return list(archives)

    async def recent_games(
        self,
        username: str,
        count: int,
        side: Optional[str] = None,
    ) -> list[GameRecord]:
        """
        Up to `count` most recent games for a player.

        Walks archives newest month first, taking the tail of each month
        until enough games are collected. Within a month, games keep the
        order the API returns them in.

        Raises:
            NoHistoryError: If no games could be found at all
        """
        pending = await self.archives(username, side=side)
        games: list[GameRecord] = []

        while len(games) < count and pending:
            archive_url = pending.pop()
            payload = await self._get_json(archive_url, username, side)
            needed = count - len(games)
            for game in (payload.get("games") or [])[-needed:]:
                record = parse_game(game, username)
                if record is not None:
                    games.append(record)

        if not games:
            raise NoHistoryError(username, side=side)

        logger.debug("Fetched %d recent games for %s", len(games), username)
        return games

    async def overall_rating(self, username: str, side: Optional[str] = None) -> int:
        """
        Best current rating across bullet, blitz and rapid.

        Raises:
            MissingRatingError: If the player has no rating in those categories
        """
        stats = await self._get_json(self.player_url(username, "stats"), username, side)
        rating = parse_overall_rating(stats)
        if rating is None:
            raise MissingRatingError(f"No bullet/blitz/rapid rating for '{username}'", side=side)
        return rating

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _get_json(self, url: str, username: str, side: Optional[str] = None) -> dict[str, Any]:
        """
        GET a JSON document with retries.

        Raises:
            UnknownPlayerError: On HTTP 404
            DataUnavailableError: On other client errors, or when retries run out
        """
        try:
            return await self.with_retry(
                lambda: self._fetch(url, username, side),
                description=f"GET {url}",
            )
        except RETRYABLE_ERRORS as e:
            raise DataUnavailableError(f"{url} unavailable: {e}", side=side) from e

    async def _fetch(self, url: str, username: str, side: Optional[str]) -> dict[str, Any]:
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        async with self._session.get(url) as response:
            if response.status == 404:
                raise UnknownPlayerError(username, side=side)
            if response.status == 429 or response.status >= 500:
                raise TransientHTTPError(response.status, url)
            if response.status >= 400:
                raise DataUnavailableError(f"HTTP {response.status} from {url}", side=side)

            try:
                payload = await response.json(content_type=None)
            except ValueError as e:
                raise DataUnavailableError(f"Malformed JSON from {url}", side=side) from e

        if not isinstance(payload, dict):
            raise DataUnavailableError(f"Unexpected payload from {url}", side=side)
        return payload

    async def with_retry(self, coro_func, description: str = "Operation"):
        """Retry `coro_func` on RETRYABLE_ERRORS using this client's backoff settings."""
        return await with_retry(
            coro_func,
            max_attempts=self.max_retries,
            base_delay=self.retry_base_delay,
            description=description,
            retry_on=RETRYABLE_ERRORS,
        )
