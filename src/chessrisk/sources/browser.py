"""
Browser session for live chess.com game pages.

Uses Playwright to open the game page (the board and player blocks are
rendered client-side, so plain HTTP won't do) and hands the rendered HTML to
the identity resolver. The same page is used by PageOverlaySink to draw
the risk overlay.

Key features:
- Async context manager for proper resource cleanup
- Navigation with retry and exponential backoff
- Stealth mode to avoid bot detection
"""

import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright_stealth import Stealth

from chessrisk.config import settings
from chessrisk.sources.retry import with_retry

logger = logging.getLogger(__name__)

# Stealth configuration to avoid bot detection
_stealth = Stealth()

# Player blocks appear once the board has rendered
PLAYER_BLOCK_SELECTOR = "#board-layout-player-bottom a.user-username-link"


class GameBrowser:
    """
    Playwright-managed Chromium session.

    Usage:
        async with GameBrowser(headless=False) as browser:
            page = await browser.open_game("https://www.chess.com/game/live/123")
            html = await browser.page_html(page)
    """

    def __init__(
        self,
        headless: Optional[bool] = None,
        max_attempts: int = 3,
        retry_base_delay: float = 2.0,
    ):
        """
        Initialize the browser session.

        Args:
            headless: Whether to run browser in headless mode.
                     If None, uses settings.browser_headless
            max_attempts: Navigation attempts before giving up
            retry_base_delay: First backoff delay between navigation attempts
        """
        self.headless = headless if headless is not None else settings.browser_headless
        self.timeout = settings.browser_timeout
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay

        # Playwright objects (initialized in __aenter__)
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> "GameBrowser":
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless)
        self._context = await self._browser.new_context(
            user_agent=(
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                "AppleWebKit/537.36 (KHTML, like Gecko) "
                "Chrome/120.0.0.0 Safari/537.36"
            ),
            viewport={"width": 1920, "height": 1080},
            locale="en-US",
        )
        self._context.set_default_timeout(self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Always closes browser and Playwright, even if an exception occurred."""
        if self._context:
            await self._context.close()
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

    async def new_page(self) -> Page:
        """Create a new browser page with stealth mode enabled."""
        if not self._context:
            raise RuntimeError("Browser not initialized. Use 'async with' context manager.")

        page = await self._context.new_page()
        await _stealth.apply_stealth_async(page)
        return page

    async def open_game(self, url: str) -> Page:
        """
        Open a game page and wait for the player blocks to render.

        Raises:
            Exception: The last navigation error if all attempts fail
        """
        page = await self.new_page()
        await self.navigate(page, url)
        await page.wait_for_selector(PLAYER_BLOCK_SELECTOR, timeout=self.timeout)
        logger.info("Opened game %s", url)
        return page

    async def navigate(self, page: Page, url: str, wait_for: str = "domcontentloaded") -> None:
        """Navigate to a URL, retrying with exponential backoff."""
        # Use lambda to create a fresh coroutine on each retry attempt
        await with_retry(
            lambda: page.goto(url, wait_until=wait_for, timeout=self.timeout),
            max_attempts=self.max_attempts,
            base_delay=self.retry_base_delay,
            description=f"Navigate to {url}",
        )

    @staticmethod
    async def page_html(page: Page) -> str:
        """Current rendered HTML of the page."""
        return await page.content()
