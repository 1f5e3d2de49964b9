"""
chessrisk - Live game risk for chess.com

Estimates how much a player stands to lose in the game they are playing,
from both players' ratings and recent results.

Main components:
- risk: Pure risk engine (recency weights, performance index, win probability, synthesis)
- sources: Page identity resolver, chess.com API client, Playwright browser session
- overlay: Presentation sinks (in-page overlay, console)
- services: Assessment orchestration
"""

__version__ = "1.0.0"
