"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from chessrisk.risk.models import GameRecord


@pytest.fixture
def now():
    """
    Fixed evaluation instant.

    Every engine call takes `now` explicitly, so tests never depend
    on the wall clock.
    """
    return datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_game(now):
    """
    Factory for GameRecords relative to `now`.

    Usage:
        make_game(days_ago=2, result=1)   # a win two days ago
        make_game(days_ago=-1, result=0)  # a draw "tomorrow" (clock skew)
    """

    def _make(days_ago: float = 0.0, result: int = 1) -> GameRecord:
        return GameRecord(timestamp=now - timedelta(days=days_ago), result=result)

    return _make
