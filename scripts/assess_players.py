#!/usr/bin/env python3
"""
Assess the risk of a game between two chess.com players.

The live category ratings (the ratings shown next to the names for the time
control being played) must be given explicitly; everything else is fetched
from the chess.com API.

Basic usage:
    python scripts/assess_players.py alice bob --self-category 1580 --opponent-category 1610

JSON output (for piping into other tools):
    python scripts/assess_players.py alice bob --self-category 1580 --opponent-category 1610 --json

Override engine constants for one run:
    python scripts/assess_players.py alice bob --self-category 1580 --opponent-category 1610 \\
        --k-factor 20 --games-window 20
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chessrisk.config import settings
from chessrisk.errors import ChessRiskError
from chessrisk.overlay import render_summary
from chessrisk.risk.synthesizer import RiskCalculator
from chessrisk.services.assessment import GameRiskService
from chessrisk.sources.chesscom import ChessComClient
from chessrisk.sources.page import OPPONENT, SELF, PlayerIdentity

logger = logging.getLogger("assess_players")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Assess the risk of a chess.com game between two players.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("self_username", help="Player to assess for.")
    parser.add_argument("opponent_username", help="Player across the board.")
    parser.add_argument(
        "--self-category",
        type=int,
        required=True,
        help="Your live rating for the current time control.",
    )
    parser.add_argument(
        "--opponent-category",
        type=int,
        required=True,
        help="Opponent's live rating for the current time control.",
    )
    parser.add_argument("--decay-rate", type=float, default=None, help="Override recency decay per day.")
    parser.add_argument("--k-factor", type=float, default=None, help="Override maximum rating swing.")
    parser.add_argument("--games-window", type=int, default=None, help="Override recent games per side.")
    parser.add_argument("--json", action="store_true", help="Print the assessment as JSON.")
    return parser


async def _run(args: argparse.Namespace) -> int:
    calculator = RiskCalculator(
        decay_rate=args.decay_rate if args.decay_rate is not None else settings.decay_rate,
        k_factor=args.k_factor if args.k_factor is not None else settings.k_factor,
        games_window=args.games_window if args.games_window is not None else settings.games_window,
    )
    me = PlayerIdentity(args.self_username.lower(), args.self_category, side=SELF)
    opponent = PlayerIdentity(args.opponent_username.lower(), args.opponent_category, side=OPPONENT)

    async with ChessComClient() as client:
        service = GameRiskService(client, calculator)
        try:
            assessment = await service.assess(me, opponent)
        except ChessRiskError as e:
            logger.error("Assessment failed (%s): %s", type(e).__name__, e)
            return 1

    if args.json:
        payload = {
            "self": me.username,
            "opponent": opponent.username,
            **assessment.to_dict(),
        }
        print(json.dumps(payload, indent=2))
    else:
        print(render_summary(assessment, me.username, opponent.username))
    return 0


def main() -> int:
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
