"""
Unit tests for the chess.com API client.

No network access: payload parsing is tested directly, the archive walk
against an in-memory URL → payload map, and the transport against a fake
aiohttp session.
"""

import aiohttp
import pytest

from chessrisk.errors import DataUnavailableError, MissingRatingError, NoHistoryError, UnknownPlayerError
from chessrisk.sources.chesscom import ChessComClient, parse_game, parse_game_result, parse_overall_rating

BASE = "https://api.test/pub"


def _game(white: str, white_result: str, black: str, black_result: str, end_time: int = 1_700_000_000) -> dict:
    return {
        "end_time": end_time,
        "white": {"username": white, "result": white_result},
        "black": {"username": black, "result": black_result},
    }


class TestParseGameResult:
    """Tests for parse_game_result()."""

    def test_win_as_white(self):
        assert parse_game_result(_game("Alice", "win", "bob", "resigned"), "alice") == 1

    def test_loss_as_black(self):
        assert parse_game_result(_game("bob", "win", "Alice", "checkmated"), "alice") == -1

    def test_win_as_black(self):
        assert parse_game_result(_game("bob", "timeout", "alice", "win"), "ALICE") == 1

    def test_draw(self):
        assert parse_game_result(_game("alice", "agreed", "bob", "agreed"), "alice") == 0

    def test_unresolved(self):
        assert parse_game_result({"white": {}, "black": {}}, "alice") == 0

    def test_parse_game_without_end_time(self):
        assert parse_game({"white": {}, "black": {}}, "alice") is None

    def test_parse_game(self):
        record = parse_game(_game("alice", "win", "bob", "resigned", end_time=1_700_000_123), "alice")

        assert record.result == 1
        assert record.timestamp.timestamp() == 1_700_000_123


class TestParseOverallRating:
    """Tests for parse_overall_rating()."""

    def test_max_across_categories(self):
        stats = {
            "chess_bullet": {"last": {"rating": 1400}},
            "chess_blitz": {"last": {"rating": 1620}},
            "chess_rapid": {"last": {"rating": 1555}},
            "chess_daily": {"last": {"rating": 2100}},  # not counted
        }
        assert parse_overall_rating(stats) == 1620

    def test_single_category(self):
        assert parse_overall_rating({"chess_rapid": {"last": {"rating": 900}}}) == 900

    def test_no_categories(self):
        assert parse_overall_rating({"fide": 0}) is None


class MapClient(ChessComClient):
    """ChessComClient serving payloads from a dict instead of HTTP."""

    def __init__(self, payloads: dict):
        super().__init__(base_url=BASE, retry_base_delay=0)
        self.payloads = payloads
        self.requested: list[str] = []

    async def _get_json(self, url, username, side=None):
        self.requested.append(url)
        if url not in self.payloads:
            raise UnknownPlayerError(username, side=side)
        return self.payloads[url]


class TestRecentGames:
    """Tests for the archive walk."""

    @pytest.fixture
    def payloads(self):
        jan = [_game("alice", "win", "x", "resigned", end_time=1_704_100_000 + i) for i in range(10)]
        feb = [
            _game("alice", "checkmated", "y", "win", end_time=1_706_800_000),
            _game("alice", "agreed", "z", "agreed", end_time=1_706_800_100),
            _game("w", "resigned", "alice", "win", end_time=1_706_800_200),
        ]
        return {
            f"{BASE}/player/alice/games/archives": {
                "archives": [f"{BASE}/player/alice/games/2024/01", f"{BASE}/player/alice/games/2024/02"],
            },
            f"{BASE}/player/alice/games/2024/01": {"games": jan},
            f"{BASE}/player/alice/games/2024/02": {"games": feb},
            f"{BASE}/player/alice/stats": {"chess_blitz": {"last": {"rating": 1500}}},
            f"{BASE}/player/ghost/games/archives": {"archives": []},
            f"{BASE}/player/ghost/stats": {},
        }

    @pytest.mark.asyncio
    async def test_newest_month_first_then_older(self, payloads):
        client = MapClient(payloads)
        games = await client.recent_games("alice", 5)

        assert len(games) == 5
        # All of February (loss, draw, win) then the last two January wins
        assert [g.result for g in games] == [-1, 0, 1, 1, 1]
        assert games[3].timestamp.timestamp() == 1_704_100_008
        assert games[4].timestamp.timestamp() == 1_704_100_009

    @pytest.mark.asyncio
    async def test_stops_once_enough_games(self, payloads):
        client = MapClient(payloads)
        games = await client.recent_games("alice", 2)

        assert [g.result for g in games] == [0, 1]
        assert f"{BASE}/player/alice/games/2024/01" not in client.requested

    @pytest.mark.asyncio
    async def test_fewer_games_than_requested(self, payloads):
        client = MapClient(payloads)
        games = await client.recent_games("alice", 50)
        assert len(games) == 13

    @pytest.mark.asyncio
    async def test_username_is_case_insensitive(self, payloads):
        client = MapClient(payloads)
        games = await client.recent_games("Alice", 3)
        assert [g.result for g in games] == [-1, 0, 1]

    @pytest.mark.asyncio
    async def test_no_archives_raises_no_history(self, payloads):
        client = MapClient(payloads)
        with pytest.raises(NoHistoryError):
            await client.recent_games("ghost", 10, side="opponent")

    @pytest.mark.asyncio
    async def test_empty_months_raise_no_history(self):
        client = MapClient({
            f"{BASE}/player/quiet/games/archives": {"archives": [f"{BASE}/player/quiet/games/2024/01"]},
            f"{BASE}/player/quiet/games/2024/01": {"games": []},
        })
        with pytest.raises(NoHistoryError):
            await client.recent_games("quiet", 10)

    @pytest.mark.asyncio
    async def test_overall_rating(self, payloads):
        assert await MapClient(payloads).overall_rating("alice") == 1500

    @pytest.mark.asyncio
    async def test_overall_rating_missing(self, payloads):
        with pytest.raises(MissingRatingError):
            await MapClient(payloads).overall_rating("ghost")

    @pytest.mark.asyncio
    async def test_unknown_player(self, payloads):
        with pytest.raises(UnknownPlayerError):
            await MapClient(payloads).overall_rating("nobody")


# =============================================================================
# Transport
# =============================================================================


class FakeResponse:
    def __init__(self, status: int, payload=None, bad_json: bool = False):
        self.status = status
        self._payload = payload
        self._bad_json = bad_json

    async def json(self, content_type=None):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


class FakeSession:
    """Returns queued responses in order; a queued exception is raised instead."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0

    def get(self, url):
        self.calls += 1
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(session: FakeSession, max_retries: int = 3) -> ChessComClient:
    return ChessComClient(base_url=BASE, max_retries=max_retries, retry_base_delay=0, session=session)


class TestTransport:
    """Tests for _get_json() status mapping and retries."""

    @pytest.mark.asyncio
    async def test_ok(self):
        session = FakeSession([FakeResponse(200, {"archives": []})])
        assert await _client(session)._get_json(f"{BASE}/x", "alice") == {"archives": []}

    @pytest.mark.asyncio
    async def test_404_is_unknown_player_and_not_retried(self):
        session = FakeSession([FakeResponse(404)])
        with pytest.raises(UnknownPlayerError) as exc_info:
            await _client(session)._get_json(f"{BASE}/x", "ghost", side="opponent")

        assert exc_info.value.side == "opponent"
        assert session.calls == 1

    @pytest.mark.asyncio
    async def test_server_error_retried_then_succeeds(self):
        session = FakeSession([FakeResponse(503), FakeResponse(200, {"ok": True})])
        assert await _client(session)._get_json(f"{BASE}/x", "alice") == {"ok": True}
        assert session.calls == 2

    @pytest.mark.asyncio
    async def test_connection_error_retried(self):
        session = FakeSession([aiohttp.ClientConnectionError("reset"), FakeResponse(200, {"ok": True})])
        assert await _client(session)._get_json(f"{BASE}/x", "alice") == {"ok": True}

    @pytest.mark.asyncio
    async def test_retries_exhausted(self):
        session = FakeSession([FakeResponse(500), FakeResponse(429), FakeResponse(502)])
        with pytest.raises(DataUnavailableError):
            await _client(session)._get_json(f"{BASE}/x", "alice", side="self")
        assert session.calls == 3

    @pytest.mark.asyncio
    async def test_other_client_error_not_retried(self):
        session = FakeSession([FakeResponse(410)])
        with pytest.raises(DataUnavailableError):
            await _client(session)._get_json(f"{BASE}/x", "alice")
        assert session.calls == 1

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        session = FakeSession([FakeResponse(200, bad_json=True)])
        with pytest.raises(DataUnavailableError):
            await _client(session)._get_json(f"{BASE}/x", "alice")

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        client = ChessComClient(base_url=BASE)
        with pytest.raises(RuntimeError):
            await client._fetch(f"{BASE}/x", "alice", None)

    def test_player_url_lowercases_and_quotes(self):
        client = ChessComClient(base_url=BASE + "/")
        assert client.player_url("Some User", "stats") == f"{BASE}/player/some%20user/stats"
