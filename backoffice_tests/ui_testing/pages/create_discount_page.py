"""
================================================================================
Create Discount Page Object
================================================================================

Discount creation form of the back office (Ant Design).

Form layout:
    - Discount code: upper-cased by the app, 15 characters max
    - Discount type: "Percentage Discount" (percentage off + maximum amount)
      or "Fixed Amount Discount" (discount amount); the two radios are
      mutually exclusive and gate which inputs are active
    - Minimum value: initial balance or amount (radio + input)
    - Expiration date (DD/MM/YYYY), quantities, package/email/referral lists
    - Switches: public to user, auto display (trading capital / customize
      package), status. Their state is read from aria-checked.

Known inline validation messages live in INLINE_ERRORS.

================================================================================
"""

from __future__ import annotations

import re
import time
from typing import Any, Dict, List, NamedTuple, Optional, Pattern, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError

from backoffice_tests.ui_testing.framework.page_base import BasePage, UnexpectedPageStateError
from backoffice_tests.ui_testing.framework.smart_locator import (
    ElementNotFoundError,
    SmartLocator,
    visible,
    xpath_any,
)
from backoffice_tests.ui_testing.framework.wait_helpers import WaitTimeoutError


MAX_CODE_LENGTH = 15

Expected = Union[str, Pattern[str]]

# Inline validation messages rendered by the form
INLINE_ERRORS: Dict[str, Expected] = {
    "required": "Please fill out this field",
    "code_format": "Accept only latin letters, numbers, underscore",
    "code_length": "Only accepted 15 characters for code",
    "code_duplicate": "This code has already been created",
    # Lower bound is rendered as 0 or 1 depending on the build; 100 must not be 100,000
    "percentage_range": re.compile(
        r"greater than [01] and less than or equal to 100(?!,?\d)"
    ),
    "amount_range": re.compile(r"greater than [01] and less than or equal to 100,?000"),
    "quantity": "Value must be greater than 0",
    "max_per_user": "Max Quantity per user must less than Max Quantity usage",
    "past_date": "Please choose date later than current date",
    "email_format": "Please enter a valid email",
    "email_not_exist": "Email does not exist in registered users",
    "email_duplicate": "Email has already been added",
    "referral_invalid": "Invalid referral code",
    "package_not_exist": "does not exist",
    "package_duplicate": "already been added",
}

SUCCESS_TEXT = re.compile(r"success|created|added", re.IGNORECASE)
SUCCESS_BODY_TEXT = re.compile(
    r"create.*discount.*success|discount.*created|successfully.*created",
    re.IGNORECASE,
)

# Exact class token match: 'ant-form-item-control' must not count as a form item
_FORM_ITEM = "div[contains(concat(' ', normalize-space(@class), ' '), ' ant-form-item ')]"
_EXPLAIN_ERROR = "div[contains(@class,'ant-form-item-explain-error')]"


class FieldSpec(NamedTuple):
    input_id: Optional[str]
    label: str


FIELDS: Dict[str, FieldSpec] = {
    "discountCode": FieldSpec("code", "Discount Code"),
    "percentageOff": FieldSpec("percentageOff", "Percentage Off"),
    "maximumAmount": FieldSpec("maximumDiscountAmount", "Maximum amount"),
    "fixedAmount": FieldSpec(None, "Discount Amount"),
    "minInitialBalance": FieldSpec(None, "Minimum Initial Balance"),
    "minAmount": FieldSpec(None, "Minimum Amount"),
    "description": FieldSpec(None, "Description"),
    "expirationDate": FieldSpec(None, "Expiration Date"),
    "specificQuantity": FieldSpec("specificQuantity", "Specific Quantity Usage"),
    "maxPerUser": FieldSpec(None, "Max Quantity per user"),
    "email": FieldSpec(None, "Specific Email"),
    "apReferral": FieldSpec(None, "AP Referral"),
}


def xpath_literal(text: str) -> str:
    """Quote `text` for use inside an XPath expression."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


def matches(expected: Expected, text: str) -> bool:
    if isinstance(expected, str):
        return expected in text
    return expected.search(text) is not None


def unique_discount_code(prefix: str = "AT") -> str:
    """Millisecond-based code that satisfies the format and length rules."""
    digits = str(int(time.time() * 1000))
    return f"{prefix}{digits[-(MAX_CODE_LENGTH - len(prefix)):]}"


def field_error_selector(field: str) -> str:
    """Selector for the validation message(s) of one form item."""
    try:
        item = FIELDS[field]
    except KeyError:
        raise ValueError(f"Unknown field '{field}'. Known fields: {', '.join(FIELDS)}") from None

    paths = []
    if item.input_id:
        paths.append(f"//*[@id='{item.input_id}']/ancestor::{_FORM_ITEM}[1]//{_EXPLAIN_ERROR}")
    paths.append(
        f"//label[contains(text(),{xpath_literal(item.label)})]"
        f"/ancestor::{_FORM_ITEM}[1]//{_EXPLAIN_ERROR}"
    )
    return xpath_any(*paths)


class CreateDiscountPage(BasePage):
    """Create discount page object (async)."""

    PAGE_NAME = "Create Discount"
    CREATE_PATH = "/discount/create"

    TOAST = xpath_any(
        "//div[contains(@class,'ant-message')]",
        "//div[contains(@class,'ant-notification')]",
        "//div[contains(@class,'toast')]",
    )
    FORM_ERRORS = xpath_any(
        f"//{_EXPLAIN_ERROR}",
        "//div[contains(@class,'invalid-feedback')]",
        "//*[contains(@class,'field-error') or contains(@class,'validation-error')]",
    )
    SUCCESS_MESSAGES = ".ant-notification-notice-message, .ant-message-success, [class*='success']"
    PACKAGE_POPUP = xpath_any(
        "//div[contains(@class,'ant-modal-wrap')]",
        "//div[@role='dialog']",
    )

    # ============================================================
    # Page Elements
    # ============================================================

    def _switch(self, label: str, name: str) -> SmartLocator:
        text = xpath_literal(label)
        return self.smart_locator(
            primary=f"xpath=//*[contains(text(),{text})]/ancestor::{_FORM_ITEM}[1]//button[@role='switch']",
            fallbacks=[
                xpath_any(
                    f"//*[contains(text(),{text})]/following-sibling::*//button",
                    f"//*[contains(text(),{text})]/..//button",
                ),
                f"xpath=//label[contains(text(),{text})]//button",
            ],
            name=name,
        )

    def _radio(self, label: str, group: str, index: int, name: str) -> SmartLocator:
        text = xpath_literal(label)
        return self.smart_locator(
            primary=f"xpath=//span[contains(text(),{text})]/..//input[@type='radio']",
            fallbacks=[
                f"xpath=//label[contains(.,{text})]//input[@type='radio']",
                f"xpath=(//input[@type='radio' and @name='{group}'])[{index}]",
            ],
            name=name,
        )

    def _labelled_input(
        self,
        label: str,
        primary: str,
        name: str,
        extra: Optional[List[str]] = None,
        control: str = "input",
    ) -> SmartLocator:
        return self.smart_locator(
            primary=primary,
            fallbacks=list(extra or [])
            + [f"xpath=//label[contains(text(),{xpath_literal(label)})]/..//{control}"],
            name=name,
        )

    @property
    def code_input(self) -> SmartLocator:
        return self._labelled_input(
            "Discount Code",
            primary="#code",
            extra=["xpath=//input[contains(@placeholder,'510ZERO')]", "input[name='discountCode']"],
            name="Discount Code Input",
        )

    @property
    def percent_radio(self) -> SmartLocator:
        return self._radio("Percentage Discount", "«rf»", 1, "Percentage Discount Radio")

    @property
    def fixed_radio(self) -> SmartLocator:
        return self._radio("Fixed Amount Discount", "«rf»", 2, "Fixed Amount Discount Radio")

    @property
    def percentage_off_input(self) -> SmartLocator:
        return self._labelled_input(
            "Percentage Off",
            primary="#percentageOff",
            extra=["input[placeholder='Enter percentage off']", "input[name='percentageOff']"],
            name="Percentage Off Input",
        )

    @property
    def maximum_amount_input(self) -> SmartLocator:
        return self._labelled_input(
            "Maximum amount",
            primary="#maximumDiscountAmount",
            extra=["input[placeholder='Enter maximum amount']", "input[name='maximumAmount']"],
            name="Maximum Amount Input",
        )

    @property
    def fixed_amount_input(self) -> SmartLocator:
        return self._labelled_input(
            "Discount Amount",
            primary="input[placeholder='Enter discount amount']",
            extra=["input[name='fixedAmount']", "input[name='discountAmount']"],
            name="Fixed Amount Input",
        )

    @property
    def min_initial_balance_radio(self) -> SmartLocator:
        return self._radio("Minimum Initial Balance", "«rg»", 1, "Minimum Initial Balance Radio")

    @property
    def min_initial_balance_input(self) -> SmartLocator:
        return self._labelled_input(
            "Minimum Initial Balance",
            primary="input[placeholder='Enter Minimum Initial Balance']",
            extra=["input[name='minInitialBalance']"],
            name="Minimum Initial Balance Input",
        )

    @property
    def min_amount_radio(self) -> SmartLocator:
        return self._radio("Minimum Amount", "«rg»", 2, "Minimum Amount Radio")

    @property
    def min_amount_input(self) -> SmartLocator:
        return self._labelled_input(
            "Minimum Amount",
            primary="input[placeholder='Enter Minimum Amount']",
            extra=["input[name='minAmount']"],
            name="Minimum Amount Input",
        )

    @property
    def description_input(self) -> SmartLocator:
        return self._labelled_input(
            "Description",
            primary="textarea[placeholder='Enter Description']",
            extra=["textarea[name='description']", "input[name='description']"],
            name="Description Input",
            control="textarea",
        )

    @property
    def expiration_date_input(self) -> SmartLocator:
        return self._labelled_input(
            "Expiration Date",
            primary="input[placeholder='Select date']",
            extra=["input[name='expirationDate']", "input[type='date']"],
            name="Expiration Date Input",
        )

    @property
    def specify_quantity_input(self) -> SmartLocator:
        return self._labelled_input(
            "Specific Quantity Usage",
            primary="#specificQuantity",
            extra=[
                "input[placeholder='Enter Quantities']",
                "input[name='specifyQuantity']",
                "input[name='maxQuantityUsage']",
            ],
            name="Specific Quantity Input",
        )

    @property
    def max_per_user_input(self) -> SmartLocator:
        return self._labelled_input(
            "Max Quantity per user",
            primary="input[name='maxPerUser']",
            extra=["input[name='maxQuantityPerUser']"],
            name="Max Per User Input",
        )

    @property
    def add_package_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//button[contains(.,'Add New Package')]",
            fallbacks=["xpath=//button[contains(.,'Add Package')]", "button[name='addPackage']"],
            name="Add Package Button",
        )

    @property
    def package_id_input(self) -> SmartLocator:
        return self._labelled_input(
            "Package ID",
            primary="input[name='packageId']",
            extra=[
                "xpath=//input[contains(@placeholder,'Package ID')]",
                "xpath=//input[contains(@placeholder,'Challenge ID')]",
            ],
            name="Package ID Input",
        )

    @property
    def package_save_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//div[contains(@class,'modal')]//button[contains(.,'Save')]",
            fallbacks=["xpath=//div[@role='dialog']//button[contains(.,'Save')]"],
            name="Package Save Button",
        )

    @property
    def add_email_input(self) -> SmartLocator:
        return self._labelled_input(
            "Specific Email",
            primary="input[placeholder='Enter Email']",
            extra=["xpath=//input[contains(@placeholder,'email')]"],
            name="Add Email Input",
        )

    @property
    def add_email_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//input[@placeholder='Enter Email']/following-sibling::button",
            fallbacks=[
                "xpath=//label[contains(text(),'Specific Email')]/..//button[contains(.,'Add')]",
                "xpath=//button[contains(.,'Add') and preceding-sibling::*//input[@placeholder='Enter Email']]",
            ],
            name="Add Email Button",
        )

    @property
    def ap_referral_input(self) -> SmartLocator:
        return self._labelled_input(
            "AP Referral",
            primary="input[placeholder='Enter AP Referral']",
            extra=["input[name='apReferral']", "xpath=//input[contains(@placeholder,'AP Referral')]"],
            name="AP Referral Input",
        )

    @property
    def ap_referral_add_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//input[@placeholder='Enter AP Referral']/following-sibling::button",
            fallbacks=[
                "xpath=//label[contains(text(),'AP Referral')]/..//button[contains(.,'Add')]",
                "xpath=//button[contains(.,'Add') and preceding-sibling::*//input[@placeholder='Enter AP Referral']]",
            ],
            name="AP Referral Add Button",
        )

    @property
    def public_switch(self) -> SmartLocator:
        return self._switch("Public to user", "Public To User Switch")

    @property
    def auto_display_trading_switch(self) -> SmartLocator:
        return self._switch(
            "Auto Display in Checkout For Trading Capital", "Auto Display Trading Switch"
        )

    @property
    def auto_display_custom_switch(self) -> SmartLocator:
        return self._switch("Auto display in Customize Package", "Auto Display Custom Switch")

    @property
    def status_switch(self) -> SmartLocator:
        return self._switch("Active", "Status Switch")

    @property
    def submit_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//form//button[@type='submit']",
            fallbacks=[
                "xpath=//button[contains(normalize-space(),'Create')]",
                "xpath=//button[contains(.,'Save') or contains(.,'Submit')]",
            ],
            name="Create Button",
        )

    @property
    def cancel_button(self) -> SmartLocator:
        return self.smart_locator(
            primary="xpath=//button[contains(.,'Cancel')]",
            fallbacks=["button[name='cancel']"],
            name="Cancel Button",
        )

    def _field_input(self, field: str) -> SmartLocator:
        inputs = {
            "discountCode": self.code_input,
            "percentageOff": self.percentage_off_input,
            "maximumAmount": self.maximum_amount_input,
            "fixedAmount": self.fixed_amount_input,
            "minInitialBalance": self.min_initial_balance_input,
            "minAmount": self.min_amount_input,
            "description": self.description_input,
            "expirationDate": self.expiration_date_input,
            "specificQuantity": self.specify_quantity_input,
            "maxPerUser": self.max_per_user_input,
            "email": self.add_email_input,
            "apReferral": self.ap_referral_input,
        }
        if field not in inputs:
            raise ValueError(f"Unknown field '{field}'. Known fields: {', '.join(inputs)}")
        return inputs[field]

    # ============================================================
    # Navigation
    # ============================================================

    @allure.step("Open create discount page")
    async def goto(self) -> "CreateDiscountPage":
        """
        Navigate to the form and wait for the code input.

        Raises:
            UnexpectedPageStateError: The app redirected away from the form
                (typically to the login page of an unauthenticated session)
        """
        await self.navigate(self.settings.create_discount_url)
        self._expect_on_form()
        try:
            await self.wait_for_visible(self.code_input, 10000)
        except ElementNotFoundError:
            self._expect_on_form()
            raise
        return self

    def _expect_on_form(self) -> None:
        if self.CREATE_PATH not in self.url:
            raise UnexpectedPageStateError(
                f"Expected to be on discount create page, but redirected to: {self.url}. "
                "Please ensure you are authenticated before calling goto()."
            )

    async def is_form_displayed(self, timeout: int = 5000) -> bool:
        return await self.is_displayed(self.code_input, timeout)

    # ============================================================
    # Discount code
    # ============================================================

    @allure.step("Fill discount code: {value}")
    async def fill_discount_code(self, value: str) -> None:
        await self.clear_and_type(self.code_input, value)

    async def get_discount_code_value(self) -> str:
        return await self.read_value(self.code_input) or ""

    # ============================================================
    # Discount type
    # ============================================================

    async def _select_radio(self, radio: SmartLocator) -> None:
        element = await self.wait_for_clickable(radio)
        if not await element.is_checked():
            await element.click()

    @allure.step("Select percentage discount")
    async def select_percentage_discount(self) -> None:
        await self._select_radio(self.percent_radio)

    @allure.step("Select fixed amount discount")
    async def select_fixed_amount_discount(self) -> None:
        await self._select_radio(self.fixed_radio)

    async def _is_radio_selected(self, radio: SmartLocator) -> bool:
        element = await radio.presence()
        if element is None:
            raise UnexpectedPageStateError(f"{radio.element_name} is not on the page")
        return await element.is_checked()

    async def is_percentage_selected(self) -> bool:
        return await self._is_radio_selected(self.percent_radio)

    async def is_fixed_selected(self) -> bool:
        return await self._is_radio_selected(self.fixed_radio)

    async def fill_percentage_off(self, value: Union[int, float, str]) -> None:
        await self.clear_and_type(self.percentage_off_input, value)

    async def fill_maximum_amount(self, value: Union[int, float, str]) -> None:
        await self.clear_and_type(self.maximum_amount_input, value)

    async def fill_fixed_amount(self, value: Union[int, float, str]) -> None:
        await self.clear_and_type(self.fixed_amount_input, value)

    @allure.step("Percentage flow: {percent}% (max {max_amount})")
    async def choose_percentage_flow(
        self,
        percent: Union[int, float],
        max_amount: Optional[Union[int, float]] = None,
    ) -> None:
        await self.select_percentage_discount()
        await self.fill_percentage_off(percent)
        if max_amount is not None:
            await self.fill_maximum_amount(max_amount)

    @allure.step("Fixed flow: {amount}")
    async def choose_fixed_flow(self, amount: Union[int, float]) -> None:
        await self.select_fixed_amount_discount()
        await self.fill_fixed_amount(amount)

    # ============================================================
    # Minimum value, dates, quantities
    # ============================================================

    async def set_min_initial_balance(self, value: Union[int, float]) -> None:
        await self.safe_click(self.min_initial_balance_radio)
        await self.clear_and_type(self.min_initial_balance_input, value)

    async def set_min_amount(self, value: Union[int, float]) -> None:
        await self.safe_click(self.min_amount_radio)
        await self.clear_and_type(self.min_amount_input, value)

    async def fill_description(self, text: str) -> None:
        await self.clear_and_type(self.description_input, text)

    @allure.step("Set expiration date: {date_ddmmyyyy}")
    async def set_expiration(self, date_ddmmyyyy: str) -> None:
        """Type a DD/MM/YYYY date into the date picker and commit it with Enter."""
        element = await self.clear_and_type(self.expiration_date_input, date_ddmmyyyy)
        await element.press("Enter")

    async def get_expiration_value(self) -> str:
        return await self.read_value(self.expiration_date_input) or ""

    @allure.step("Set quantities (total={total}, per_user={per_user})")
    async def set_quantities(
        self,
        total: Optional[int] = None,
        per_user: Optional[int] = None,
    ) -> None:
        if total is not None:
            await self.clear_and_type(self.specify_quantity_input, total)
        if per_user is not None:
            await self.clear_and_type(self.max_per_user_input, per_user)

    # ============================================================
    # Lists: packages, emails, referrals
    # ============================================================

    @allure.step("Add package: {package_id}")
    async def add_package_id(self, package_id: str) -> None:
        await self.safe_click(self.add_package_button)
        await self.clear_and_type(self.package_id_input, package_id)
        await self.safe_click(self.package_save_button)
        await self.wait_for_gone(self.PACKAGE_POPUP)

    @allure.step("Add email: {email}")
    async def add_email(self, email: str) -> None:
        await self.clear_and_type(self.add_email_input, email)
        await self.safe_click(self.add_email_button)

    @allure.step("Add AP referral: {code}")
    async def add_ap_referral(self, code: str) -> None:
        await self.clear_and_type(self.ap_referral_input, code)
        await self.safe_click(self.ap_referral_add_button)

    # ============================================================
    # Switches
    # ============================================================

    async def toggle_public(self, on: bool) -> bool:
        return await self.set_switch(self.public_switch, on)

    async def toggle_auto_display_trading(self, on: bool) -> bool:
        return await self.set_switch(self.auto_display_trading_switch, on)

    async def toggle_auto_display_customized(self, on: bool) -> bool:
        return await self.set_switch(self.auto_display_custom_switch, on)

    async def toggle_status(self, on: bool) -> bool:
        return await self.set_switch(self.status_switch, on)

    async def _switch_state(self, switch: SmartLocator) -> bool:
        try:
            return await self.is_switch_on(switch)
        except (UnexpectedPageStateError, PlaywrightError) as e:
            if self.page.is_closed():
                raise
            logger.warning(f"Could not read {switch.element_name} state: {e}")
            return False

    async def is_public_checked(self) -> bool:
        return await self._switch_state(self.public_switch)

    async def is_auto_display_trading_checked(self) -> bool:
        return await self._switch_state(self.auto_display_trading_switch)

    async def is_auto_display_custom_checked(self) -> bool:
        return await self._switch_state(self.auto_display_custom_switch)

    async def is_status_active(self) -> bool:
        return await self._switch_state(self.status_switch)

    # ============================================================
    # Submit and feedback
    # ============================================================

    @allure.step("Submit create discount form")
    async def submit(self) -> None:
        await self.safe_click(self.submit_button)

    async def wait_until_submit_enabled(self, timeout: int = 10000) -> None:
        await self.wait_for_clickable(self.submit_button, timeout)

    async def expect_toast_contains(self, text: str, timeout: int = 10000) -> str:
        """
        Wait for a toast/notification containing `text` (case-insensitive).

        Returns:
            The matching toast text
        """
        seen: List[str] = []

        async def check() -> Tuple[bool, Any]:
            seen[:] = await self.collect_texts(self.TOAST)
            for toast in seen:
                if text.lower() in toast.lower():
                    return True, toast
            return False, None

        try:
            return await self.poll(check, timeout, f"toast '{text}'")
        except WaitTimeoutError as e:
            raise AssertionError(f'Expected toast to contain "{text}", but got: {seen}') from e

    async def has_inline_error(self, expected: Expected, timeout: int = 5000) -> bool:
        """
        True once a rendered validation message matches `expected`.

        Form error containers are checked first, then (for plain text) any
        element whose own text contains it.
        """
        text_selector = None
        if isinstance(expected, str):
            text_selector = visible(f"xpath=//*[contains(text(),{xpath_literal(expected)})]")

        async def check() -> Tuple[bool, Any]:
            for message in await self.collect_texts(self.FORM_ERRORS):
                if matches(expected, message):
                    return True, message
            if text_selector and await self.page.locator(text_selector).count() > 0:
                return True, expected
            return False, None

        try:
            found = await self.poll(check, timeout, "inline error")
        except WaitTimeoutError:
            return False
        logger.debug(f"Inline error found: {found}")
        return True

    @allure.step("Expect inline error near '{field_label}'")
    async def expect_inline_error_near(
        self,
        field_label: str,
        expected: Expected,
        timeout: int = 5000,
    ) -> None:
        """
        Raises:
            AssertionError: No matching inline error appeared within `timeout`
        """
        if not await self.has_inline_error(expected, timeout):
            shown = await self.collect_error_messages()
            pattern = expected if isinstance(expected, str) else expected.pattern
            raise AssertionError(
                f'Expected inline error "{pattern}" near field "{field_label}", '
                f"but not found. Visible errors: {shown}"
            )

    async def has_field_error(self, field: str, timeout: int = 5000) -> bool:
        """True once the form item of `field` renders a validation message."""
        selector = field_error_selector(field)

        async def check() -> Tuple[bool, Any]:
            texts = await self.collect_texts(selector)
            return bool(texts), texts

        try:
            await self.poll(check, timeout, f"{field} error")
            return True
        except WaitTimeoutError:
            return False

    async def get_field_error(self, field: str) -> Optional[str]:
        texts = await self.collect_texts(field_error_selector(field))
        return " ".join(texts) if texts else None

    async def collect_error_messages(self) -> List[str]:
        return await self.collect_texts(self.FORM_ERRORS)

    async def wait_for_success_message(self, timeout: int = 10000) -> Optional[str]:
        """
        Wait for a creation confirmation.

        Returns:
            The success text, or None when none appeared within `timeout`
        """
        async def check() -> Tuple[bool, Any]:
            for text in await self.collect_texts(self.SUCCESS_MESSAGES):
                if SUCCESS_TEXT.search(text):
                    return True, text
            body = await self.page.locator("body").inner_text()
            found = SUCCESS_BODY_TEXT.search(body)
            return found is not None, found.group(0) if found else None

        try:
            message = await self.poll(check, timeout, "discount creation success")
        except WaitTimeoutError:
            return None
        logger.info(f"Success message: \"{message}\"")
        return message

    # ============================================================
    # Composite helpers
    # ============================================================

    @allure.step("Fill required fields")
    async def fill_required_fields(
        self,
        code: Optional[str] = None,
        percent: int = 10,
        max_amount: int = 100,
    ) -> str:
        """
        Fill the minimum set of fields for a valid percentage discount.

        Returns:
            The discount code used
        """
        code = code or unique_discount_code()
        await self.fill_discount_code(code)
        await self.choose_percentage_flow(percent, max_amount)
        return code

    @allure.step("Clear all fields")
    async def clear_all_fields(self) -> None:
        """Reset every visible, enabled text input of the form."""
        for field in FIELDS:
            element = await self._field_input(field).presence()
            if element is None or not await element.is_visible():
                continue
            if await element.is_enabled():
                await self.aggressive_clear(element)

    async def is_field_enabled(self, field: str) -> bool:
        return await self.is_enabled(self._field_input(field))

    async def get_field_value(self, field: str) -> Optional[str]:
        """Value of `field`, or None when the input is not in the DOM."""
        return await self.read_value(self._field_input(field))

    # ============================================================
    # Debug helpers (log only, never raise)
    # ============================================================

    async def debug_form_elements(self) -> None:
        try:
            inputs = await self.page.locator("input").all()
            logger.info(f"Found {len(inputs)} input elements")
            for i, element in enumerate(inputs[:10], start=1):
                try:
                    attrs = {
                        attr: await element.get_attribute(attr)
                        for attr in ("type", "name", "placeholder", "id")
                    }
                    logger.info(f"Input {i}: {attrs}")
                except PlaywrightError as e:
                    logger.info(f"Input {i}: error getting attributes - {e}")

            buttons = await self.page.locator("button").all()
            logger.info(f"Found {len(buttons)} button elements")
            for i, element in enumerate(buttons[:5], start=1):
                try:
                    text = (await element.inner_text()).strip()
                    logger.info(f"Button {i}: text=\"{text}\", type=\"{await element.get_attribute('type')}\"")
                except PlaywrightError as e:
                    logger.info(f"Button {i}: error getting attributes - {e}")
        except PlaywrightError as e:
            logger.warning(f"Debug failed: {e}")

    async def debug_toggles(self) -> None:
        switches = [
            self.public_switch,
            self.auto_display_trading_switch,
            self.auto_display_custom_switch,
            self.status_switch,
        ]
        for switch in switches:
            try:
                element = await switch.presence()
                if element is None:
                    logger.info(f"{switch.element_name}: not found")
                    continue
                logger.info(
                    f"{switch.element_name}: class=\"{await element.get_attribute('class')}\", "
                    f"aria-checked=\"{await element.get_attribute('aria-checked')}\""
                )
            except PlaywrightError as e:
                logger.warning(f"{switch.element_name}: {e}")


__all__ = [
    "CreateDiscountPage",
    "FIELDS",
    "INLINE_ERRORS",
    "MAX_CODE_LENGTH",
    "field_error_selector",
    "matches",
    "unique_discount_code",
    "xpath_literal",
]
