"""
================================================================================
Login Page Object
================================================================================

Back-office sign-in screen (Ant Design form `#loginForm`).

The form inputs are controlled components: a plain clear does not always
reset their internal state, so fields are cleared with select-all + delete
and synthetic input/change events before typing.

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError

from backoffice_tests.ui_testing.framework.page_base import BasePage
from backoffice_tests.ui_testing.framework.smart_locator import SmartLocator
from backoffice_tests.ui_testing.framework.wait_helpers import WaitTimeoutError, playwright_wait


class LoginPage(BasePage):
    """Login page object (async)."""

    PAGE_NAME = "Login"
    LOGIN_PATHS = ("/auth/login", "/admin/login")

    VALIDATION_ERRORS = ".ant-form-item-explain-error"
    ERROR_MESSAGE = ".ant-message, .ant-notification"

    # ============================================================
    # Page Elements
    # ============================================================

    @property
    def login_form(self) -> SmartLocator:
        return self.smart_locator(
            primary="#loginForm",
            fallbacks=["form:has(input[type='password'])"],
            name="Login Form",
        )

    @property
    def username_input(self) -> SmartLocator:
        return self.smart_locator(
            primary="#loginForm_username",
            fallbacks=["input[name='username']", "input[type='email']"],
            name="Username Input",
        )

    @property
    def password_input(self) -> SmartLocator:
        return self.smart_locator(
            primary="#loginForm_password",
            fallbacks=["input[name='password']", "input[type='password']"],
            name="Password Input",
        )

    @property
    def remember_me_checkbox(self) -> SmartLocator:
        return self.smart_locator(primary=".ant-checkbox-input", name="Remember Me Checkbox")

    @property
    def remember_me_wrapper(self) -> SmartLocator:
        return self.smart_locator(primary=".ant-checkbox-wrapper", name="Remember Me Wrapper")

    @property
    def submit_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="#loginForm button[type='submit']",
            fallbacks=["button[type='submit']"],
            name="Login Button",
        )

    @property
    def forgot_password_link(self) -> SmartLocator:
        return self.smart_locator(
            primary="a[href='/auth/forgot-password']",
            fallbacks=["a[href*='forgot-password']", "a:has-text('Forgot')"],
            name="Forgot Password Link",
        )

    # ============================================================
    # Page Actions
    # ============================================================

    @allure.step("Open login page")
    async def open(self) -> "LoginPage":
        """Navigate to the login page and wait for the form."""
        await self.navigate(self.settings.login_url)
        await self.wait_for_visible(self.login_form)
        return self

    async def _fill_controlled(self, target: SmartLocator, value: Optional[str]) -> None:
        field = await self.wait_for_visible(target)
        await self.aggressive_clear(field)
        if value:
            await field.press_sequentially(value)

    @allure.step("Fill username")
    async def fill_username(self, username: Optional[str]) -> None:
        await self._fill_controlled(self.username_input, username)

    @allure.step("Fill password")
    async def fill_password(self, password: Optional[str]) -> None:
        await self._fill_controlled(self.password_input, password)

    @allure.step("Set 'Remember me' to {should_check}")
    async def toggle_remember_me(self, should_check: bool = True) -> bool:
        """
        Best-effort: bring the "Remember me" checkbox to the requested state.

        The input is visually hidden, so the click goes through the wrapper
        (or the input itself) in page JavaScript.

        Returns:
            True if the checkbox ended in the requested state
        """
        try:
            checkbox = await self.remember_me_checkbox.presence()
            if checkbox is None:
                logger.warning("Remember me checkbox not found")
                return False

            if await checkbox.is_checked() == should_check:
                logger.debug("Remember me already in desired state")
                return True

            wrapper = await self.remember_me_wrapper.presence()
            await (wrapper or checkbox).evaluate("el => el.click()")

            handle = await checkbox.element_handle(timeout=3000)
            await playwright_wait(
                handle.wait_for_element_state("checked" if should_check else "unchecked", timeout=3000),
                "remember me state",
                3000,
            )
            return True
        except (PlaywrightError, WaitTimeoutError) as e:
            if self.page.is_closed():
                raise
            logger.warning(f"Remember me checkbox could not be set: {e}")
            return False

    @allure.step("Submit login form")
    async def submit(self) -> None:
        await self.safe_click(self.submit_button)

    @allure.step("Login (username={username})")
    async def login(
        self,
        username: Optional[str],
        password: Optional[str],
        remember_me: bool = False,
    ) -> None:
        """Fill the credentials and submit. Does not wait for the outcome."""
        await self.fill_username(username)
        await self.fill_password(password)
        if remember_me:
            await self.toggle_remember_me(True)
        await self.submit()

    @allure.step("Click 'Forgot password'")
    async def click_forgot_password(self) -> None:
        await self.safe_click(self.forgot_password_link)

    async def is_form_displayed(self, timeout: int = 3000) -> bool:
        return await self.is_displayed(self.login_form, timeout)

    def is_on_login_route(self) -> bool:
        return any(path in self.url for path in self.LOGIN_PATHS)

    # ============================================================
    # Verification
    # ============================================================

    async def _wait_for_any(self, selector: str, timeout: int) -> bool:
        try:
            await playwright_wait(
                self.page.locator(selector).first.wait_for(state="attached", timeout=timeout),
                f"{selector} present",
                timeout,
            )
            return True
        except WaitTimeoutError:
            return False

    async def has_validation_errors(self, timeout: int = 3000) -> bool:
        """True once at least one inline validation error is rendered."""
        return await self._wait_for_any(self.VALIDATION_ERRORS, timeout)

    async def get_validation_errors(self) -> List[str]:
        return await self.collect_texts(self.VALIDATION_ERRORS)

    async def debug_validation_errors(self) -> None:
        """Log every visible validation message (debug aid, never raises)."""
        try:
            for text in await self.get_validation_errors():
                logger.info(f"Validation error: \"{text}\"")
        except PlaywrightError as e:
            logger.warning(f"Validation error debug failed: {e}")

    async def has_error_message(self, timeout: int = 3000) -> bool:
        """True once a toast/notification is rendered."""
        return await self._wait_for_any(self.ERROR_MESSAGE, timeout)

    async def get_error_message(self) -> Optional[str]:
        texts = await self.collect_texts(self.ERROR_MESSAGE)
        return texts[0] if texts else None

    # ============================================================
    # Cleanup
    # ============================================================

    @allure.step("Clear all login fields")
    async def clear_all_fields(self) -> None:
        """Empty both fields and re-focus the username to trigger validation."""
        await self.fill_username("")
        await self.fill_password("")
        await (await self.wait_for_visible(self.username_input)).click()

    @allure.step("Refresh login page")
    async def refresh_page(self) -> None:
        await self.page.reload()
        await self.wait_for_visible(self.login_form)
