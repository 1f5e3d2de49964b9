"""
chessrisk services - orchestration around the pure risk engine.

Usage:
    from chessrisk.services import GameRiskService
"""

from chessrisk.services.assessment import GameAssessment, GameRiskService, HistoryProvider, utc_now

__all__ = [
    "GameAssessment",
    "GameRiskService",
    "HistoryProvider",
    "utc_now",
]
