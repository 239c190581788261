"""
================================================================================
Forgot Password Page Object
================================================================================

Password-reset request screen reached from the login form.

================================================================================
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

import allure
from loguru import logger

from backoffice_tests.ui_testing.framework.page_base import BasePage
from backoffice_tests.ui_testing.framework.smart_locator import SmartLocator, xpath_any
from backoffice_tests.ui_testing.framework.wait_helpers import WaitTimeoutError


class ForgotPasswordPage(BasePage):
    """Forgot-password page object (async)."""

    PAGE_NAME = "Forgot Password"
    URL_PATH = "/auth/forgot-password"

    ERROR_MESSAGE = xpath_any(
        "//*[contains(@class, 'ant-message')]",
        "//*[contains(text(), 'User not found')]",
        "//*[contains(text(), 'not found')]",
        "//*[contains(text(), 'Error')]",
        "//*[contains(@class, 'error')]",
        "//*[contains(text(), 'Please enter a valid email')]",
    )
    VALIDATION_ERROR = xpath_any(
        "//*[contains(text(), 'Please enter a valid email')]",
        "//*[contains(@class, 'ant-form-item-explain')]",
        "//*[contains(@class, 'error')]",
        "//*[contains(text(), 'valid email')]",
    )
    SUCCESS_MESSAGE = xpath_any(
        "//*[contains(@class, 'ant-message')]",
        "//*[contains(text(), 'sent')]",
        "//*[contains(text(), 'reset')]",
    )
    LOADING_INDICATOR = ".ant-spin-spinning, .ant-btn-loading"

    @property
    def email_input(self) -> SmartLocator:
        return self.smart_locator(
            primary=xpath_any(
                "//input[@placeholder='Email']",
                "//input[@name='email']",
                "//input[@type='email']",
            ),
            fallbacks=["xpath=//input[contains(@placeholder,'mail')]", "xpath=//form//input"],
            name="Email Input",
        )

    @property
    def submit_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//button[text()='Submit']",
            fallbacks=["button[type='submit']"],
            name="Submit Button",
        )

    @property
    def login_now_link(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//a[text()='Login now']",
            fallbacks=[
                "a[href*='/auth/login']",
                "xpath=//a[contains(text(), 'Login')]",
            ],
            name="Login Now Link",
        )

    # ============================================================
    # Page Actions
    # ============================================================

    @allure.step("Open forgot password page")
    async def open(self) -> "ForgotPasswordPage":
        # FORGOT_PASSWORD_URL may be a path relative to the login URL
        await self.navigate(urljoin(self.settings.login_url or "", self.settings.forgot_password_url))
        await self.wait_for_visible(self.email_input)
        await self.wait_for_visible(self.submit_button)
        return self

    @allure.step("Fill email: {email}")
    async def fill_email(self, email: str) -> None:
        await self.clear_and_type(self.email_input, email)

    @allure.step("Submit reset request")
    async def submit(self, timeout: int = 10000) -> None:
        await self.safe_click(self.submit_button, timeout)

    async def wait_for_loading_complete(self, timeout: int = 10000) -> None:
        """Wait for the request spinner, if any, to disappear."""
        await self.wait_for_gone(self.LOADING_INDICATOR, timeout)

    @allure.step("Request password reset for {email}")
    async def request_reset(self, email: str) -> None:
        await self.fill_email(email)
        await self.submit()
        await self.wait_for_loading_complete()

    @allure.step("Click 'Login now'")
    async def click_login_now(self) -> None:
        await self.safe_click(self.login_now_link)

    # ============================================================
    # Verification
    # ============================================================

    async def expect_error_visible(self, timeout: int = 10000) -> bool:
        try:
            await self.wait_for_visible(self.ERROR_MESSAGE, timeout)
        except WaitTimeoutError as e:
            raise AssertionError("Expected error message to be visible but was not found") from e
        return True

    async def has_success_message(self, timeout: int = 5000) -> bool:
        return await self.is_displayed(self.SUCCESS_MESSAGE, timeout)

    async def _visible_text(self, selector: str, timeout: int) -> Optional[str]:
        try:
            element = await self.wait_for_visible(selector, timeout)
        except WaitTimeoutError:
            return None
        return (await element.inner_text()).strip()

    async def get_error_message(self, timeout: int = 5000) -> Optional[str]:
        return await self._visible_text(self.ERROR_MESSAGE, timeout)

    async def get_success_message(self, timeout: int = 5000) -> Optional[str]:
        return await self._visible_text(self.SUCCESS_MESSAGE, timeout)

    async def has_validation_error(self) -> bool:
        """Non-waiting check for any email validation message in the DOM."""
        return await self.page.locator(self.VALIDATION_ERROR).count() > 0

    async def get_validation_error(self, timeout: int = 3000) -> Optional[str]:
        return await self._visible_text(self.VALIDATION_ERROR, timeout)

    @allure.step("Verify forgot password page")
    async def expect_at_forgot_password(self) -> bool:
        """
        Assert the reset form is rendered and the URL is the reset route.

        Raises:
            WaitTimeoutError: A control or the URL never showed up
        """
        await self.wait_for_visible(self.email_input)
        await self.wait_for_clickable(self.submit_button)
        await self.wait_url_contains(self.URL_PATH)
        logger.debug(f"On forgot password page: {self.url}")
        return True
