"""
================================================================================
Dashboard Page Object
================================================================================

Landing screen after a successful sign-in.

The dashboard shares its URL with the application root, so "loaded" is
decided from the DOM: at least one of the known navigation entries (or the
side bar itself) must become visible.

================================================================================
"""

from __future__ import annotations

from urllib.parse import urlparse

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError

from backoffice_tests.ui_testing.framework.page_base import BasePage, UnexpectedPageStateError
from backoffice_tests.ui_testing.framework.smart_locator import (
    ElementNotFoundError,
    SmartLocator,
    xpath_any,
)
from backoffice_tests.ui_testing.framework.wait_helpers import WaitTimeoutError

from .login_page import LoginPage


class DashboardPage(BasePage):
    """Dashboard page object (async)."""

    PAGE_NAME = "Dashboard"
    LOGOUT_PATH = "/auth/logout"

    SIDEBAR = xpath_any("//aside", "//div[contains(@class,'ant-layout-sider')]")
    USER_DROPDOWN = xpath_any("//*[contains(@class, 'ant-dropdown')]", "//*[@role='menu']")
    DIRECT_LOGOUT = xpath_any(
        "//a[contains(text(), 'Logout')]",
        "//button[contains(text(), 'Logout')]",
    )

    # ============================================================
    # Page Elements
    # ============================================================

    @property
    def navigation(self) -> SmartLocator:
        """Any navigation entry proving the authenticated layout rendered."""
        return self.smart_locator(
            primary="xpath=//*[contains(text(), 'System Management')]",
            fallbacks=[
                "xpath=//*[contains(text(), 'Discount')]",
                "xpath=//*[contains(text(), 'Quest')]",
                "xpath=//*[contains(text(), 'Blind Box')]",
                self.SIDEBAR,
            ],
            name="Dashboard Navigation",
        )

    @property
    def user_menu_button(self) -> SmartLocator:
        return self.smart_locator(
            primary=xpath_any(
                "//header//*[contains(@class,'avatar') or contains(@class,'user')]",
                "//header//*[contains(text(),'SuperAdmin') or contains(text(),'Admin')]",
            ),
            fallbacks=[
                xpath_any("//img[contains(@class, 'avatar')]", "//*[contains(@class, 'user-menu')]"),
            ],
            name="User Menu",
        )

    @property
    def logout_menu_item(self) -> SmartLocator:
        return self.smart_locator(
            primary=xpath_any(
                "//a[normalize-space()='Logout' or normalize-space()='Log out']",
                "//button[normalize-space()='Logout']",
            ),
            fallbacks=["xpath=//*[contains(text(), 'Logout')]"],
            name="Logout Menu Item",
        )

    # ============================================================
    # Page Actions
    # ============================================================

    @allure.step("Verify dashboard loaded")
    async def expect_loaded(self, timeout: int = 15000) -> bool:
        """
        Wait for the authenticated layout.

        Raises:
            UnexpectedPageStateError: No navigation element became visible
        """
        logger.debug("Checking for dashboard navigation elements...")
        try:
            await self.wait_for_visible(self.navigation, timeout)
        except ElementNotFoundError as e:
            raise UnexpectedPageStateError(
                "Dashboard navigation elements not found - login may have failed"
            ) from e
        logger.info("Dashboard navigation found")
        return True

    @allure.step("Open dashboard")
    async def open(self) -> "DashboardPage":
        await self.navigate(self.settings.dashboard_url)
        await self.expect_loaded()
        return self

    @allure.step("Open user menu")
    async def open_user_menu(self) -> None:
        """
        Open the avatar/profile dropdown.

        Some layouts render the logout entry without a dropdown; in that case
        the menu is not required and the call returns quietly.
        """
        try:
            await self.safe_click(self.user_menu_button)
            await self.wait_for_visible(self.USER_DROPDOWN, 5000)
        except WaitTimeoutError as e:
            if await self.page.locator(self.DIRECT_LOGOUT).count() > 0:
                logger.debug("Logout is reachable without the user menu")
                return
            logger.warning(f"Could not open user menu: {e}")
            raise

    @allure.step("Logout")
    async def logout(self) -> bool:
        """
        Sign out through the user menu, then fall back to the logout route.

        Best-effort: failures are logged, never raised, because callers use
        it to reset the session between tests.

        Returns:
            True if a signed-out URL was reached
        """
        try:
            try:
                item = await self.wait_for_visible(self.logout_menu_item, 3000)
            except WaitTimeoutError:
                await self.open_user_menu()
                item = await self.wait_for_visible(self.logout_menu_item, 5000)
            await item.click()
            await self.wait_for_url(self.is_logged_out_url, 10000, "signed-out URL")
            return True
        except (WaitTimeoutError, PlaywrightError) as e:
            if self.page.is_closed():
                raise
            logger.warning(f"Logout via menu failed, trying {self.LOGOUT_PATH}: {e}")

        parsed = urlparse(self.url)
        try:
            await self.page.goto(f"{parsed.scheme}://{parsed.netloc}{self.LOGOUT_PATH}")
            await self.wait_for_url(self.is_logged_out_url, 5000, "signed-out URL")
            return True
        except (WaitTimeoutError, PlaywrightError) as e:
            if self.page.is_closed():
                raise
            logger.warning(f"Logout failed with all methods: {e}")
            return False

    # ============================================================
    # Verification
    # ============================================================

    def is_logged_out_url(self, url: str) -> bool:
        """LOGOUT_SUCCESS_URL when configured, otherwise any login route."""
        success_url = self.settings.logout_success_url
        if success_url:
            return success_url in url
        return any(path in url for path in LoginPage.LOGIN_PATHS)

    async def is_loaded(self) -> bool:
        return bool(self.settings.dashboard_url) and self.settings.dashboard_url in self.url

    async def is_user_logged_in(self, timeout: int = 3000) -> bool:
        return await self.is_displayed(self.SIDEBAR, timeout)
