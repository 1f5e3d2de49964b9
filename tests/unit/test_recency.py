"""
Unit tests for recency weighting.

Tests that:
- A game finishing "now" has full weight
- Weight strictly decreases with age and stays in (0, 1]
- Future timestamps are clamped (or rejected in strict mode)
"""

import math
from datetime import datetime, timedelta

import pytest

from chessrisk.errors import InvalidTimestampError
from chessrisk.risk.models import GameRecord
from chessrisk.risk.recency import age_in_days, game_weight, weight_for_age


class TestWeightForAge:
    """Tests for weight_for_age()."""

    def test_zero_age_is_full_weight(self):
        assert weight_for_age(0.0) == 1.0

    def test_one_day_old(self):
        assert weight_for_age(1.0) == pytest.approx(math.exp(-0.4))

    def test_strictly_decreasing(self):
        ages = [0.0, 0.01, 0.5, 1.0, 3.0, 7.0, 30.0, 365.0]
        weights = [weight_for_age(age) for age in ages]

        for younger, older in zip(weights, weights[1:]):
            assert older < younger

    def test_bounds(self):
        for age in [0.0, 0.1, 1.0, 10.0, 100.0, 1000.0, 100000.0]:
            weight = weight_for_age(age)
            assert 0.0 < weight <= 1.0

    def test_ancient_game_never_reaches_zero(self):
        """exp() underflows for multi-year ages; weight must stay positive."""
        assert weight_for_age(10 * 365.0) > 0.0

    def test_custom_decay_rate(self):
        assert weight_for_age(2.0, decay_rate=0.1) == pytest.approx(math.exp(-0.2))

    def test_negative_age_rejected(self):
        with pytest.raises(ValueError):
            weight_for_age(-1.0)


class TestGameWeight:
    """Tests for game_weight() with explicit evaluation instants."""

    def test_fractional_days(self, now):
        six_hours_ago = now - timedelta(hours=6)
        assert age_in_days(six_hours_ago, now) == pytest.approx(0.25)
        assert game_weight(six_hours_ago, now) == pytest.approx(math.exp(-0.1))

    def test_future_game_clamped_to_full_weight(self, now):
        """A game one day after `now` is treated as finishing now."""
        tomorrow = now + timedelta(days=1)
        assert game_weight(tomorrow, now) == weight_for_age(0.0) == 1.0

    def test_future_game_strict_mode_raises(self, now):
        with pytest.raises(InvalidTimestampError):
            game_weight(now + timedelta(days=1), now, strict=True)

    def test_naive_timestamps_treated_as_utc(self, now):
        naive = datetime(2026, 3, 1, 12, 0, 0)
        assert game_weight(naive, now) == 1.0

    def test_game_record_weight_uses_supplied_now(self, now, make_game):
        game = make_game(days_ago=1, result=1)

        assert game.weight(now) == pytest.approx(math.exp(-0.4))
        # Same game seen a day later weighs less
        assert game.weight(now + timedelta(days=1)) == pytest.approx(math.exp(-0.8))


class TestGameRecord:
    """Tests for GameRecord construction."""

    def test_invalid_result_rejected(self, now):
        with pytest.raises(ValueError):
            GameRecord(timestamp=now, result=2)

    def test_from_epoch(self):
        game = GameRecord.from_epoch(1_700_000_000, -1)

        assert game.result == -1
        assert game.timestamp.tzinfo is not None
        assert game.timestamp.timestamp() == 1_700_000_000
