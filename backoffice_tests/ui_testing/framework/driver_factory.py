"""
================================================================================
Driver Factory
================================================================================

Session creation plus the explicit-wait primitives every page object uses.

Each wait takes a page, a target and a timeout in milliseconds, and raises
WaitTimeoutError when the condition never holds; any other browser error,
such as a closed page, propagates unchanged. A target is one of:
    - a selector string ("#code", "xpath=//button[@type='submit']")
    - a SmartLocator (ordered fallback strategies)
    - a Playwright Locator

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Union

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .browser_manager import BrowserManager
from .config_loader import BackOfficeSettings
from .smart_locator import SmartLocator, visible
from .wait_helpers import WaitTimeoutError, playwright_wait


Target = Union[str, SmartLocator, Locator]

DEFAULT_TIMEOUT_MS = 10000


def describe(target: Target) -> str:
    if isinstance(target, SmartLocator):
        return target.element_name
    return str(target)


class DriverFactory:
    """
    Browser session factory and wait helpers.

    Usage:
        manager = await DriverFactory.create_driver(settings)
        page = manager.page
        await DriverFactory.safe_click(page, "button[type='submit']")
    """

    @staticmethod
    async def create_driver(settings: Optional[BackOfficeSettings] = None) -> BrowserManager:
        """
        Create a started browser session configured from `settings`.

        Returns:
            BrowserManager with an open page
        """
        settings = settings or BackOfficeSettings.from_config()
        manager = BrowserManager(
            headless=settings.headless,
            browser_type=settings.browser_type,
            default_timeout_ms=settings.default_timeout_ms,
            navigation_timeout_ms=settings.navigation_timeout_ms,
        )
        await manager.start()
        return manager

    @staticmethod
    async def wait_for_visible(
        page: Page,
        target: Target,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> Locator:
        """
        Wait for an element to be located and visible.

        Returns:
            Locator of the first visible match
        """
        if isinstance(target, SmartLocator):
            return await target.locate(timeout=timeout)

        if isinstance(target, str):
            candidate = page.locator(visible(target)).first
        else:
            candidate = target.first

        await playwright_wait(
            candidate.wait_for(state="visible", timeout=timeout),
            f"{describe(target)} visible",
            timeout,
        )
        return candidate

    @staticmethod
    async def wait_for_gone(
        page: Page,
        target: Target,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> bool:
        """
        Wait for an element to go stale or disappear.

        The first match at call time is tracked; it is gone once it is
        detached from the DOM or no longer rendered. No match at call time
        counts as gone.

        Returns:
            True once the element is gone
        """
        if isinstance(target, SmartLocator):
            current = await target.presence()
        elif isinstance(target, str):
            current = page.locator(target).first
        else:
            current = target.first

        if current is None or not await current.count():
            return True

        try:
            handle = await current.element_handle(timeout=min(timeout, 1000))
            await playwright_wait(
                handle.wait_for_element_state("hidden", timeout=timeout),
                f"{describe(target)} gone",
                timeout,
            )
        except PlaywrightError:
            if page.is_closed():
                raise
            # Detached before tracking, or the handle was disposed
            logger.debug(f"{describe(target)} handle disposed, treating as gone")
        return True

    @staticmethod
    async def wait_for_url(
        page: Page,
        predicate: Callable[[str], bool],
        timeout: int = DEFAULT_TIMEOUT_MS,
        description: str = "URL",
    ) -> str:
        """Wait until `predicate` accepts the current URL; returns the URL."""
        await playwright_wait(
            page.wait_for_url(predicate, timeout=timeout, wait_until="commit"),
            description,
            timeout,
        )
        return page.url

    @classmethod
    async def wait_url_contains(
        cls,
        page: Page,
        text: str,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> str:
        """Wait for the current URL to contain `text`; returns the URL."""
        if not text:
            raise ValueError("wait_url_contains needs a non-empty URL fragment")
        return await cls.wait_for_url(
            page, lambda url: text in url, timeout, f"URL contains '{text}'"
        )

    @classmethod
    async def wait_url_not_contains(
        cls,
        page: Page,
        text: str,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> str:
        """Wait for the current URL to stop containing `text`; returns the URL."""
        if not text:
            raise ValueError("wait_url_not_contains needs a non-empty URL fragment")
        return await cls.wait_for_url(
            page, lambda url: text not in url, timeout, f"URL does not contain '{text}'"
        )

    @classmethod
    async def wait_for_clickable(
        cls,
        page: Page,
        target: Target,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> Locator:
        """Wait for an element to be visible and enabled."""
        started = time.monotonic()
        element = await cls.wait_for_visible(page, target, timeout)
        remaining = max(int(timeout - (time.monotonic() - started) * 1000), 1)

        handle = await element.element_handle(timeout=remaining)
        await playwright_wait(
            handle.wait_for_element_state("enabled", timeout=remaining),
            f"{describe(target)} enabled",
            timeout,
        )
        return element

    @classmethod
    async def safe_click(
        cls,
        page: Page,
        target: Target,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """Click once the element is clickable."""
        element = await cls.wait_for_clickable(page, target, timeout)
        await element.click()
        logger.debug(f"Clicked: {describe(target)}")


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "DriverFactory",
    "Target",
    "WaitTimeoutError",
]
