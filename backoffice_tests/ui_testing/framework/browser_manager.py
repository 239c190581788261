"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for the back-office UI suites.

One BrowserManager owns one Playwright driver, one browser, one context and
one page. A suite shares that page sequentially; it is never handed to two
tests at once.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)


WINDOW_SIZE = {"width": 1920, "height": 1080}


class BrowserManager:
    """
    Manages the browser session of a UI suite.

    Usage:
        async with BrowserManager(headless=True) as manager:
            await manager.page.goto("https://example.com")
    """

    # Sandboxing and rendering flags for CI containers
    LAUNCH_ARGS: List[str] = [
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
        f"--window-size={WINDOW_SIZE['width']},{WINDOW_SIZE['height']}",
        "--disable-features=VizDisplayCompositor",
        "--disable-features=IsolateOrigins,site-per-process",
    ]

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": WINDOW_SIZE,
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: bool = False,
        browser_type: str = "chromium",
        default_timeout_ms: int = 10000,
        navigation_timeout_ms: int = 60000,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode
            browser_type: Browser to use - 'chromium', 'firefox', 'webkit'
            default_timeout_ms: Default timeout for Playwright actions
            navigation_timeout_ms: Page load timeout (staging can be slow)
        """
        self.headless = headless
        self.browser_type = browser_type
        self.default_timeout_ms = default_timeout_ms
        self.navigation_timeout_ms = navigation_timeout_ms

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> Page:
        """Start Playwright, launch the browser and open the session page."""
        self._playwright = await async_playwright().start()

        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options: Dict[str, Any] = {"headless": self.headless}
        if browser_launcher is self._playwright.chromium:
            launch_options["args"] = self.LAUNCH_ARGS

        self._browser = await browser_launcher.launch(**launch_options)
        self._context = await self._browser.new_context(**self.DEFAULT_CONTEXT_OPTIONS)
        self._context.set_default_timeout(self.default_timeout_ms)
        self._context.set_default_navigation_timeout(self.navigation_timeout_ms)
        self._page = await self._context.new_page()

        logger.debug(
            f"Browser started: {self.browser_type} (headless={self.headless})"
        )
        return self._page

    async def close(self) -> None:
        """Close context, browser and Playwright."""
        if self._context:
            try:
                await self._context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")
            self._context = None
            self._page = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def clear_cookies(self) -> None:
        """Drop every cookie of the session (forces a fresh login)."""
        if not self._context:
            raise RuntimeError("Browser not started. Call start() first.")
        await self._context.clear_cookies()
        logger.info("Session cookies cleared")

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._page

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "BrowserManager",
    "WINDOW_SIZE",
]
