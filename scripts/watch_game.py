#!/usr/bin/env python3
"""
Open a live chess.com game and keep a risk overlay on the page.

Reads both players off the board, fetches their history from the chess.com
API, and draws the assessment in the bottom-right corner of the page. The
overlay is re-rendered in place every --interval seconds.

Watch a game (visible browser):
    python scripts/watch_game.py https://www.chess.com/game/live/123456 --headed

Single assessment, then exit:
    python scripts/watch_game.py https://www.chess.com/game/live/123456 --once
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from playwright.async_api import Error as PlaywrightError

from chessrisk.config import settings
from chessrisk.errors import ChessRiskError, DataUnavailableError
from chessrisk.overlay import PageOverlaySink, PresentationSink
from chessrisk.risk.synthesizer import RiskCalculator
from chessrisk.services.assessment import GameRiskService
from chessrisk.sources.browser import GameBrowser
from chessrisk.sources.chesscom import ChessComClient

logger = logging.getLogger("watch_game")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Keep a risk overlay on a live chess.com game page.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("url", help="chess.com game URL.")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.watch_interval_s,
        help=f"Seconds between assessments (default {settings.watch_interval_s}).",
    )
    parser.add_argument("--once", action="store_true", help="Assess once and exit.")
    parser.add_argument("--headed", action="store_true", help="Show the browser window.")
    parser.add_argument(
        "--slot-id",
        default=settings.overlay_slot_id,
        help="DOM id of the overlay element.",
    )
    return parser


async def _assess_once(page, service: GameRiskService, sink: PresentationSink, slot_id: str) -> bool:
    """
    Assess the page once and update the overlay.

    Returns True if an assessment was shown. Assessment failures and page
    errors (navigation in progress, page closed) clear the overlay where
    possible and return False so the watch loop keeps going.
    """
    try:
        html = await GameBrowser.page_html(page)
        try:
            result = await service.assess_page(html)
        except DataUnavailableError as e:
            logger.error("Data temporarily unavailable: %s", e)
            await sink.clear(slot_id)
            return False
        except ChessRiskError as e:
            logger.error("Cannot assess this page (%s): %s", type(e).__name__, e)
            await sink.clear(slot_id)
            return False

        await sink.show(result.assessment, slot_id)
    except PlaywrightError as e:
        logger.warning("Page unavailable: %s", e)
        return False

    logger.info(result.summary())
    return True


async def _run(args: argparse.Namespace) -> int:
    calculator = RiskCalculator.from_settings(settings)

    async with GameBrowser(headless=not args.headed) as browser, ChessComClient() as client:
        page = await browser.open_game(args.url)
        service = GameRiskService(client, calculator)
        sink: PresentationSink = PageOverlaySink(page)

        ok = await _assess_once(page, service, sink, args.slot_id)
        if args.once:
            return 0 if ok else 1

        while not page.is_closed():
            await asyncio.sleep(args.interval)
            await _assess_once(page, service, sink, args.slot_id)

    return 0


def main() -> int:
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
