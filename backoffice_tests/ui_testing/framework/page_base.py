"""
================================================================================
Base Page Object
================================================================================

Foundation class for the back-office Page Objects.

Provides:
    - Navigation helpers
    - Smart element declaration (primary + fallback selectors)
    - Interaction primitives: clear+type, read value, switch state
    - Stale-tolerant text collection
    - Screenshot utilities

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import inspect
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .config_loader import BackOfficeSettings
from .driver_factory import DEFAULT_TIMEOUT_MS, DriverFactory, Target
from .smart_locator import SmartLocator
from .wait_helpers import CheckFn, WaitTimeoutError, playwright_wait, poll_until


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"

# Ant Design inputs keep their own state; clearing the DOM value is not enough
_RESET_INPUT_JS = """
element => {
    element.value = '';
    element.dispatchEvent(new Event('input', { bubbles: true }));
    element.dispatchEvent(new Event('change', { bubbles: true }));
}
"""


class UnexpectedPageStateError(Exception):
    """Raised when the browser is not on the screen a page object expects."""
    pass


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class LoginPage(BasePage):
            @property
            def username_input(self) -> SmartLocator:
                return self.smart_locator("#loginForm_username", name="Username")

            async def fill_username(self, value: str) -> None:
                await self.clear_and_type(self.username_input, value)
    """

    PAGE_NAME: str = ""

    def __init__(
        self,
        page: Page,
        settings: Optional[BackOfficeSettings] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page shared by the suite
            settings: Deployment settings; loaded from the environment if omitted
        """
        self.page = page
        self.settings = settings or BackOfficeSettings.from_config()

    def smart_locator(
        self,
        primary: str,
        fallbacks: Optional[List[str]] = None,
        name: str = "custom_element",
    ) -> SmartLocator:
        """
        Build a SmartLocator with primary + fallback selectors.

        Args:
            primary: Primary selector
            fallbacks: Fallback selectors to try when primary fails
            name: Human-readable element name for logging/Allure
        """
        locators: Dict[str, str] = {"primary": primary}
        for i, fb in enumerate(fallbacks or [], start=1):
            locators[f"fallback_{i}"] = fb
        return SmartLocator(self.page, element_name=name, locators=locators)

    @property
    def url(self) -> str:
        return self.page.url

    async def navigate(self, url: str, wait_for: str = "domcontentloaded") -> None:
        """
        Navigate to `url`.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        with allure.step(f"Navigate to {url}"):
            await self.page.goto(url, wait_until=wait_for)
            logger.debug(f"Navigated to: {url}")

    # =========================================================================
    # Waits (thin delegation so page objects never pass the page around)
    # =========================================================================

    async def wait_for_visible(self, target: Target, timeout: int = DEFAULT_TIMEOUT_MS) -> Locator:
        return await DriverFactory.wait_for_visible(self.page, target, timeout)

    async def wait_for_clickable(self, target: Target, timeout: int = DEFAULT_TIMEOUT_MS) -> Locator:
        return await DriverFactory.wait_for_clickable(self.page, target, timeout)

    async def wait_for_gone(self, target: Target, timeout: int = DEFAULT_TIMEOUT_MS) -> bool:
        return await DriverFactory.wait_for_gone(self.page, target, timeout)

    async def safe_click(self, target: Target, timeout: int = DEFAULT_TIMEOUT_MS) -> None:
        await DriverFactory.safe_click(self.page, target, timeout)

    async def wait_for_url(
        self,
        predicate: Callable[[str], bool],
        timeout: int = DEFAULT_TIMEOUT_MS,
        description: str = "URL",
    ) -> str:
        return await DriverFactory.wait_for_url(self.page, predicate, timeout, description)

    async def wait_url_contains(self, text: str, timeout: int = DEFAULT_TIMEOUT_MS) -> str:
        return await DriverFactory.wait_url_contains(self.page, text, timeout)

    async def wait_url_not_contains(self, text: str, timeout: int = DEFAULT_TIMEOUT_MS) -> str:
        return await DriverFactory.wait_url_not_contains(self.page, text, timeout)

    async def is_displayed(self, target: Target, timeout: int = 3000) -> bool:
        """True if `target` becomes visible within `timeout`; browser errors propagate."""
        try:
            await self.wait_for_visible(target, timeout)
            return True
        except WaitTimeoutError:
            return False

    async def poll(self, check: CheckFn, timeout: int, description: str) -> Any:
        """
        Poll a condition Playwright cannot wait on directly (text matches,
        several elements at once).

        Transient browser errors count as "not yet"; a closed page fails
        immediately.

        Raises:
            WaitTimeoutError: The condition never held
            UnexpectedPageStateError: The page was closed while waiting
        """
        async def attempt() -> Tuple[bool, Any]:
            try:
                outcome = check()
                return await outcome if inspect.isawaitable(outcome) else outcome
            except PlaywrightError as e:
                if self.page.is_closed():
                    raise UnexpectedPageStateError(
                        f"Page closed while waiting for: {description}"
                    ) from e
                raise

        return await poll_until(
            attempt,
            timeout=timeout / 1000,
            description=description,
            retry_on=(PlaywrightError,),
        )

    # =========================================================================
    # Interactions
    # =========================================================================

    async def clear_and_type(
        self,
        target: Target,
        value: Union[str, int, float],
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> Locator:
        """
        Clear a field and type `value` key by key.

        Typing (rather than setting the value) lets the application apply
        its own input transforms such as upper-casing and maxlength.
        """
        element = await self.wait_for_clickable(target, timeout)
        await element.fill("")
        text = str(value)
        if text:
            await element.press_sequentially(text)
        return element

    async def aggressive_clear(self, element: Locator) -> None:
        """Clear a controlled input: focus, select-all + delete, reset events."""
        await element.click()
        await element.fill("")
        await element.press("Control+a")
        await element.press("Delete")
        await element.press("Backspace")
        await element.evaluate(_RESET_INPUT_JS)

    async def read_value(self, target: Target) -> Optional[str]:
        """Current value of an input, or None when the field is not in the DOM."""
        element = await self._present(target)
        if element is None:
            return None
        return await element.input_value()

    async def is_enabled(self, target: Target) -> bool:
        element = await self._present(target)
        if element is None:
            raise UnexpectedPageStateError(f"{target} is not on the page")
        return await element.is_enabled()

    async def is_switch_on(self, target: Target) -> bool:
        """Switch state as reported by its aria-checked attribute."""
        element = await self._present(target)
        if element is None:
            raise UnexpectedPageStateError(f"Switch {target} is not on the page")
        return (await element.get_attribute("aria-checked")) == "true"

    async def set_switch(
        self,
        target: Target,
        on: bool,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> bool:
        """
        Bring a switch to the requested state, clicking only when needed.

        Returns:
            The final state read back from aria-checked
        """
        element = await self.wait_for_clickable(target, timeout)
        current = (await element.get_attribute("aria-checked")) == "true"
        if current == on:
            logger.debug(f"Switch {target} already {'on' if on else 'off'}")
            return current

        await element.click()

        handle = await element.element_handle(timeout=timeout)
        await playwright_wait(
            handle.wait_for_element_state("checked" if on else "unchecked", timeout=timeout),
            f"switch {target} -> {'on' if on else 'off'}",
            timeout,
        )
        return (await element.get_attribute("aria-checked")) == "true"

    async def collect_texts(self, target: Union[str, SmartLocator]) -> List[str]:
        """
        Non-empty texts of every element matching `target`.

        Elements that go stale between lookup and read are skipped; a closed
        page is not.
        """
        selectors = list(target.locators.values()) if isinstance(target, SmartLocator) else [target]
        texts: List[str] = []
        for selector in selectors:
            for element in await self.page.locator(selector).all():
                try:
                    text = (await element.inner_text()).strip()
                except PlaywrightError as e:
                    if self.page.is_closed():
                        raise
                    logger.debug(f"Skipping stale element for {selector}: {e}")
                    continue
                if text and text not in texts:
                    texts.append(text)
        return texts

    async def _present(self, target: Target) -> Optional[Locator]:
        if isinstance(target, SmartLocator):
            return await target.presence()
        element = self.page.locator(target).first if isinstance(target, str) else target.first
        return element if await element.count() > 0 else None

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Returns:
            Path to saved screenshot
        """
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = SCREENSHOT_DIR / f"{name}_{timestamp}.png"

        png = await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach(png, name=name, attachment_type=allure.attachment_type.PNG)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath


__all__ = [
    "BasePage",
    "SCREENSHOT_DIR",
    "UnexpectedPageStateError",
]
