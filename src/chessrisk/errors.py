"""
Failure taxonomy for risk assessments.

Every error carries the side it relates to ("self", "opponent" or None)
so log lines can tell "no game on this page" apart from
"data temporarily unavailable".

Fatal (no assessment is produced):
- MissingIdentityError / UnknownPlayerError
- MissingRatingError
- DataUnavailableError

Recoverable (handled before the engine runs):
- NoHistoryError: player index falls back to neutral
- InvalidTimestampError: only raised in strict mode; default policy clamps
"""

from typing import Optional


class ChessRiskError(Exception):
    """Base class for all chessrisk errors."""

    def __init__(self, message: str, side: Optional[str] = None):
        super().__init__(message)
        self.side = side

    def __str__(self) -> str:
        message = super().__str__()
        if self.side:
            return f"[{self.side}] {message}"
        return message


class MissingIdentityError(ChessRiskError):
    """A player's username could not be resolved from the page."""


class UnknownPlayerError(MissingIdentityError):
    """The stats service does not know this username."""

    def __init__(self, username: str, side: Optional[str] = None):
        super().__init__(f"Player '{username}' not found", side=side)
        self.username = username


class NoHistoryError(ChessRiskError):
    """The history provider found no games for a player."""

    def __init__(self, username: str, side: Optional[str] = None):
        super().__init__(f"No games found for '{username}'", side=side)
        self.username = username


class MissingRatingError(ChessRiskError):
    """An overall or category rating could not be resolved."""


class InvalidTimestampError(ChessRiskError):
    """A game timestamp lies after the evaluation instant."""


class DataUnavailableError(ChessRiskError):
    """A remote request kept failing after all retries."""
