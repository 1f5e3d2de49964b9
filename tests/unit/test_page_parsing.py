"""
Unit tests for reading player identities off a game page.
"""

import pytest
from bs4 import BeautifulSoup

from chessrisk.errors import MissingIdentityError
from chessrisk.sources.page import parse_rating, resolve_players, resolve_side

GAME_PAGE = """
<html><body>
  <div id="board-layout-player-top">
    <div class="user-tagline-component">
      <a class="user-username-link" href="https://www.chess.com/member/MagnusCarlsen">
        MagnusCarlsen
      </a>
      <span class="user-tagline-rating">(2882)</span>
    </div>
  </div>
  <div id="board-layout-chessboard"></div>
  <div id="board-layout-player-bottom">
    <div class="user-tagline-component">
      <a class="user-username-link" href="https://www.chess.com/member/Some_Patzer">Some_Patzer</a>
      <span class="user-tagline-rating">(1203)</span>
    </div>
  </div>
</body></html>
"""


def test_resolve_players_reads_both_sides():
    me, opponent = resolve_players(GAME_PAGE)

    assert me.username == "some_patzer"
    assert me.category_rating == 1203
    assert me.side == "self"
    assert opponent.username == "magnuscarlsen"
    assert opponent.category_rating == 2882
    assert opponent.side == "opponent"


def test_resolve_side_accepts_parsed_soup():
    soup = BeautifulSoup(GAME_PAGE, "lxml")
    assert resolve_side(soup, "opponent").username == "magnuscarlsen"


def test_missing_player_block_raises():
    html = GAME_PAGE.replace("board-layout-player-top", "something-else")
    with pytest.raises(MissingIdentityError) as exc_info:
        resolve_players(html)
    assert exc_info.value.side == "opponent"


def test_missing_username_link_raises():
    html = """
    <div id="board-layout-player-bottom">
      <span class="user-tagline-rating">(1500)</span>
    </div>
    """
    with pytest.raises(MissingIdentityError) as exc_info:
        resolve_side(html, "self")
    assert exc_info.value.side == "self"


def test_missing_rating_returns_none():
    html = """
    <div id="board-layout-player-bottom">
      <a class="user-username-link">NewPlayer</a>
    </div>
    """
    identity = resolve_side(html, "self")

    assert identity.username == "newplayer"
    assert identity.category_rating is None


def test_invalid_side_rejected():
    with pytest.raises(ValueError):
        resolve_side(GAME_PAGE, "left")


class TestParseRating:
    """Tests for tagline rating parsing."""

    def test_parenthesised(self):
        assert parse_rating("(1523)") == 1523

    def test_bare_number(self):
        assert parse_rating(" 987 ") == 987

    def test_no_number(self):
        assert parse_rating("(?)") is None
