"""
================================================================================
Smart Locator
================================================================================

Element location with ordered fallback strategies.

A locator is a strategy plus a pattern, written as a Playwright selector with
an engine prefix:
    - "xpath=//input[@id='code']"     structural path
    - "css=button[type='submit']"     attribute match
    - "#loginForm_username"           id shorthand (css)

Several structural paths for the same element can be joined into a single
union with `xpath_any()`; several strategies are tried in order by
`SmartLocator.locate()`.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional

from loguru import logger
from playwright.async_api import Locator, Page

from .wait_helpers import WaitTimeoutError, playwright_wait


# Suffix restricting a selector to rendered elements
VISIBLE = " >> visible=true"


class ElementNotFoundError(WaitTimeoutError):
    """Raised when all locator strategies fail to find element."""
    pass


def xpath_any(*paths: str) -> str:
    """Join alternative XPath expressions into one `xpath=` union selector."""
    return "xpath=" + " | ".join(paths)


def visible(selector: str) -> str:
    """Restrict `selector` to visible matches."""
    return selector if selector.endswith(VISIBLE) else f"{selector}{VISIBLE}"


@dataclass
class LocatorHealth:
    """
    Tracks which strategy resolved an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_name: Name of fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_name: Optional[str] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    One named element with an ordered map of locator strategies.

    Strategies are waited on together as one `or_` locator bounded by a
    single timeout; once something is visible, the first strategy in
    declaration order with a visible match wins.

    Usage:
        >>> code = SmartLocator(page, "Discount Code", {
        ...     "primary": "#code",
        ...     "fallback_1": "xpath=//input[@name='discountCode']",
        ... })
        >>> element = await code.locate(timeout=5000)
    """

    # element name -> last fallback resolution, shared across instances
    _fallback_used: ClassVar[Dict[str, LocatorHealth]] = {}

    def __init__(
        self,
        page: Page,
        element_name: str = "custom_element",
        locators: Optional[Dict[str, str]] = None,
    ):
        self.page = page
        self.element_name = element_name
        self.locators: Dict[str, str] = dict(locators or {})

    def __repr__(self) -> str:
        return f"SmartLocator({self.element_name!r}, {list(self.locators.values())!r})"

    @property
    def primary_selector(self) -> str:
        return self.locators.get("primary") or next(iter(self.locators.values()), "")

    def combined(self) -> Locator:
        """All strategies as one locator matching any visible candidate."""
        selectors = iter(self.locators.values())
        combined = self.page.locator(visible(next(selectors)))
        for selector in selectors:
            combined = combined.or_(self.page.locator(visible(selector)))
        return combined

    async def locate(self, timeout: int = 10000) -> Locator:
        """
        Locate the element using the fallback strategies.

        Args:
            timeout: Timeout in milliseconds for the whole lookup

        Returns:
            Playwright Locator for the first visible match

        Raises:
            ElementNotFoundError: When no strategy matched a visible element
        """
        if not self.locators:
            raise ElementNotFoundError(
                f"No locators defined for element: {self.element_name}"
            )

        combined = self.combined().first
        try:
            await playwright_wait(
                combined.wait_for(state="visible", timeout=timeout),
                f"'{self.element_name}' visible",
                timeout,
            )
        except WaitTimeoutError as e:
            tried = "\n".join(f"  - {name}: {sel}" for name, sel in self.locators.items())
            error_msg = (
                f"All locators failed for '{self.element_name}' within {timeout}ms:\n{tried}"
            )
            logger.error(error_msg)
            raise ElementNotFoundError(error_msg) from e

        for strategy_name, selector in self.locators.items():
            candidate = self.page.locator(visible(selector)).first
            if await candidate.count() > 0:
                self._record(strategy_name, selector)
                return candidate

        # Re-rendered between the wait and the lookup
        return combined

    async def presence(self) -> Optional[Locator]:
        """
        Non-waiting lookup: first strategy with at least one match in the DOM,
        visible or not.
        """
        for selector in self.locators.values():
            candidate = self.page.locator(selector).first
            if await candidate.count() > 0:
                return candidate
        return None

    async def is_present(self) -> bool:
        return await self.presence() is not None

    def _record(self, strategy_name: str, selector: str) -> None:
        if strategy_name == "primary":
            logger.debug(f"Element '{self.element_name}' found: {selector}")
            return

        logger.warning(
            f"Element '{self.element_name}' used fallback: {strategy_name} -> {selector}"
        )
        self._fallback_used[self.element_name] = LocatorHealth(
            element_name=self.element_name,
            primary_selector=self.primary_selector,
            used_fallback=True,
            fallback_name=strategy_name,
            fallback_selector=selector,
        )

    @classmethod
    def get_health_report(cls) -> str:
        """
        Report the elements that needed a fallback strategy during the run.

        Returns:
            Formatted health report string
        """
        if not cls._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
            "Consider promoting these selectors (or adding a data-testid):",
            "",
        ]
        for element_name, health in cls._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: {health.fallback_name} -> {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)

    @classmethod
    def reset_health(cls) -> None:
        cls._fallback_used.clear()


__all__ = [
    "ElementNotFoundError",
    "LocatorHealth",
    "SmartLocator",
    "VISIBLE",
    "visible",
    "xpath_any",
]
