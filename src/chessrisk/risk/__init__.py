"""
Risk assessment engine.

Pure, stateless calculations that turn game history and ratings into a
bounded game risk:
- Recency weighting of past games (exponential decay on age)
- Performance index per side ("defense" for self, "threat" for opponent)
- Logistic win probability from rating differences
- Risk synthesis with expected rating-point swing
"""

from chessrisk.risk.models import GameRecord, PlayerSnapshot, RiskAssessment
from chessrisk.risk.performance import PerformanceIndex, evaluate_performance, performance_index
from chessrisk.risk.probability import win_probability
from chessrisk.risk.recency import game_weight, weight_for_age
from chessrisk.risk.synthesizer import RiskCalculator, synthesize

__all__ = [
    "GameRecord",
    "PlayerSnapshot",
    "RiskAssessment",
    "PerformanceIndex",
    "evaluate_performance",
    "performance_index",
    "win_probability",
    "game_weight",
    "weight_for_age",
    "RiskCalculator",
    "synthesize",
]
