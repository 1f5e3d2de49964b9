"""
Data sources feeding the risk engine.

- page: Reads usernames and live category ratings off a rendered game page
- chesscom: Async chess.com API client (recent games, overall rating)
- browser: Playwright session that opens live game pages
"""

from chessrisk.sources.browser import GameBrowser
from chessrisk.sources.chesscom import ChessComClient, parse_game_result, parse_overall_rating
from chessrisk.sources.page import OPPONENT, SELF, PlayerIdentity, resolve_players, resolve_side

__all__ = [
    "GameBrowser",
    "ChessComClient",
    "parse_game_result",
    "parse_overall_rating",
    "OPPONENT",
    "SELF",
    "PlayerIdentity",
    "resolve_players",
    "resolve_side",
]
