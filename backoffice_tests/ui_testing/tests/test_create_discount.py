"""
================================================================================
Create Discount UI Tests
================================================================================

Validation rules and creation of discounts in the back office.

Every test starts from a freshly loaded form of an authenticated session
(`create_discount_form`). Tests that need pre-provisioned data (a registered
email, a referral code, a package id) skip when it is not configured.

================================================================================
"""

import re
import time
from typing import Any, Tuple

import allure
import pytest

from backoffice_tests.ui_testing.framework.config_loader import BackOfficeSettings
from backoffice_tests.ui_testing.framework.page_base import UnexpectedPageStateError
from backoffice_tests.ui_testing.pages.create_discount_page import (
    INLINE_ERRORS,
    MAX_CODE_LENGTH,
    CreateDiscountPage,
    matches,
)


pytestmark = pytest.mark.asyncio(loop_scope="session")

REQUIRED_SETTINGS = (
    "login_url",
    "create_discount_url",
    "admin_email",
    "admin_password",
)


async def wait_cleared_or_disabled(form: CreateDiscountPage, field: str) -> str:
    """
    Wait until `field` is removed, disabled or empty.

    Returns:
        "removed", "disabled" or "" (the cleared value)
    """
    async def check() -> Tuple[bool, Any]:
        value = await form.get_field_value(field)
        if value is None:
            return True, "removed"
        try:
            enabled = await form.is_field_enabled(field)
        except UnexpectedPageStateError:
            return True, "removed"
        if not enabled:
            return True, "disabled"
        return value == "", value

    return await form.poll(check, 3000, f"{field} cleared or disabled")


@allure.epic("Back Office")
@allure.feature("Create Discount")
@pytest.mark.discount
class TestDiscountCode:
    """Discount code input rules."""

    @allure.story("Form")
    @allure.title("Create discount form loads")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    async def test_form_loads(self, create_discount_form: CreateDiscountPage):
        assert await create_discount_form.is_form_displayed()
        assert create_discount_form.CREATE_PATH in create_discount_form.url

    @allure.story("Form Validation")
    @allure.title("Invalid discount code format shows an inline error")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_invalid_code_format(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.fill_discount_code("invalid code!")
        await form.submit()

        assert await form.has_field_error("discountCode")
        error = await form.get_field_error("discountCode")
        assert error is not None
        assert re.search(r"accept only latin letters.*underscore.*no space", error, re.IGNORECASE), error

    @allure.story("Input Transform")
    @allure.title("Valid code keeps its value")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_valid_code_and_percentage_fill(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.fill_discount_code("TESTCODE123")
        await form.choose_percentage_flow(10, 100)

        assert await form.get_discount_code_value() == "TESTCODE123"
        assert await form.is_percentage_selected()
        assert await form.get_field_value("percentageOff") == "10"
        assert await form.get_field_value("maximumAmount") == "100"

    @allure.story("Input Transform")
    @allure.title("Lower-case code is upper-cased")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_code_is_uppercased(self, create_discount_form: CreateDiscountPage):
        await create_discount_form.fill_discount_code("test123")

        assert await create_discount_form.get_discount_code_value() == "TEST123"

    @allure.story("Input Transform")
    @allure.title("Code longer than 15 characters is truncated")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_code_is_limited_to_15_characters(self, create_discount_form: CreateDiscountPage):
        await create_discount_form.fill_discount_code("lowercasecode123")

        value = await create_discount_form.get_discount_code_value()
        assert value == "LOWERCASECODE12"
        assert len(value) == MAX_CODE_LENGTH

    @allure.story("Form Validation")
    @allure.title("Duplicate discount code is rejected")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_duplicate_code_rejected(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        with allure.step("Create a discount"):
            code = await form.fill_required_fields()
            await form.wait_until_submit_enabled()
            await form.submit()
            assert await form.wait_for_success_message(timeout=15000), (
                f"Could not create the first discount: {await form.collect_error_messages()}"
            )

        with allure.step("Reuse its code"):
            await form.goto()
            await form.fill_required_fields(code=code)
            await form.submit()

        await form.expect_inline_error_near(
            "Discount Code", INLINE_ERRORS["code_duplicate"], timeout=10000
        )


@allure.epic("Back Office")
@allure.feature("Create Discount")
@pytest.mark.discount
class TestDiscountType:
    """Percentage vs fixed amount discount."""

    @allure.story("Form Validation")
    @allure.title("Percentage off of 0 is out of range")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_percentage_off_range(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.select_percentage_discount()
        await form.fill_percentage_off(0)
        await form.submit()

        assert await form.has_field_error("percentageOff")
        error = await form.get_field_error("percentageOff")
        assert error is not None and matches(INLINE_ERRORS["percentage_range"], error), error

    @allure.story("Form Validation")
    @allure.title("Maximum amount of 0 is out of range")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_maximum_amount_range(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.select_percentage_discount()
        await form.fill_maximum_amount(0)
        await form.submit()

        assert await form.has_field_error("maximumAmount")
        error = await form.get_field_error("maximumAmount")
        assert error is not None and matches(INLINE_ERRORS["amount_range"], error), error

    @allure.story("Discount Type")
    @allure.title("Fixed amount discount can be selected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_select_fixed_amount(self, create_discount_form: CreateDiscountPage):
        await create_discount_form.select_fixed_amount_discount()

        assert await create_discount_form.is_fixed_selected()
        assert not await create_discount_form.is_percentage_selected()

    @allure.story("Discount Type")
    @allure.title("Switching to fixed clears or disables the percentage inputs")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_fixed_clears_percentage_inputs(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.choose_percentage_flow(15, 1200)
        await form.select_fixed_amount_discount()

        for field in ("percentageOff", "maximumAmount"):
            state = await wait_cleared_or_disabled(form, field)
            allure.attach(f"{field}: {state or 'cleared'}", name=field)

    @allure.story("Discount Type")
    @allure.title("Switching to percentage clears or disables the fixed amount input")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_percentage_clears_fixed_input(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.choose_fixed_flow(50)
        await form.select_percentage_discount()

        state = await wait_cleared_or_disabled(form, "fixedAmount")
        allure.attach(f"fixedAmount: {state or 'cleared'}", name="fixedAmount")


@allure.epic("Back Office")
@allure.feature("Create Discount")
@pytest.mark.discount
class TestSwitches:
    """Visibility and status switches (read through aria-checked)."""

    @allure.story("Switches")
    @allure.title("Public and status switches are on by default")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_default_switch_states(self, create_discount_form: CreateDiscountPage):
        assert await create_discount_form.is_public_checked()
        assert await create_discount_form.is_status_active()

    @allure.story("Switches")
    @allure.title("Public and status switches can be turned off")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_switches_turn_off(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        assert await form.toggle_public(False) is False
        assert await form.toggle_status(False) is False

        assert not await form.is_public_checked()
        assert not await form.is_status_active()

    @allure.story("Switches")
    @allure.title("Auto display switches flip both ways")
    @allure.severity(allure.severity_level.MINOR)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_auto_display_switches(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form
        await form.debug_toggles()

        trading = await form.is_auto_display_trading_checked()
        await form.toggle_auto_display_trading(not trading)
        assert await form.is_auto_display_trading_checked() is not trading

        custom = await form.is_auto_display_custom_checked()
        await form.toggle_auto_display_customized(not custom)
        assert await form.is_auto_display_custom_checked() is not custom


@allure.epic("Back Office")
@allure.feature("Create Discount")
@pytest.mark.discount
class TestLimits:
    """Expiration date and usage quantities."""

    @allure.story("Expiration Date")
    @allure.title("A future expiration date is accepted")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_future_expiration_accepted(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.set_expiration("31/12/2099")

        assert await form.get_expiration_value() == "31/12/2099"
        assert not await form.has_inline_error(INLINE_ERRORS["past_date"], timeout=2000)

    @allure.story("Expiration Date")
    @allure.title("A past expiration date is rejected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    async def test_past_expiration_rejected(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.fill_required_fields()
        await form.set_expiration("01/01/2020")
        await form.submit()

        await form.expect_inline_error_near("Expiration Date", INLINE_ERRORS["past_date"])

    @allure.story("Quantities")
    @allure.title("Quantity usage of 0 is rejected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_zero_quantity_rejected(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.set_quantities(total=0)
        await form.submit()

        await form.expect_inline_error_near("Specific Quantity Usage", INLINE_ERRORS["quantity"])

    @allure.story("Quantities")
    @allure.title("Per-user quantity above total usage is rejected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_per_user_above_total_rejected(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        await form.set_quantities(total=5, per_user=10)
        await form.submit()

        await form.expect_inline_error_near("Max Quantity per user", INLINE_ERRORS["max_per_user"])


@allure.epic("Back Office")
@allure.feature("Create Discount")
@pytest.mark.discount
class TestTargeting:
    """Specific emails, AP referrals and packages."""

    @allure.story("Specific Email")
    @allure.title("Malformed email is rejected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_malformed_email_rejected(self, create_discount_form: CreateDiscountPage):
        await create_discount_form.add_email("not-an-email")

        await create_discount_form.expect_inline_error_near(
            "Specific Email", INLINE_ERRORS["email_format"]
        )

    @allure.story("Specific Email")
    @allure.title("Unregistered email is rejected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_unregistered_email_rejected(self, create_discount_form: CreateDiscountPage):
        await create_discount_form.add_email(f"nobody{int(time.time())}@example.com")

        await create_discount_form.expect_inline_error_near(
            "Specific Email", INLINE_ERRORS["email_not_exist"], timeout=10000
        )

    @allure.story("Specific Email")
    @allure.title("Registered email is accepted once")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_registered_email_accepted_once(
        self,
        create_discount_form: CreateDiscountPage,
        settings: BackOfficeSettings,
    ):
        if not settings.registered_email:
            pytest.skip("REGISTERED_EMAIL not configured")
        form = create_discount_form

        await form.add_email(settings.registered_email)
        assert not await form.has_inline_error(INLINE_ERRORS["email_not_exist"], timeout=3000)

        await form.add_email(settings.registered_email)
        await form.expect_inline_error_near("Specific Email", INLINE_ERRORS["email_duplicate"])

    @allure.story("AP Referral")
    @allure.title("Unknown referral code is rejected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_invalid_referral_rejected(self, create_discount_form: CreateDiscountPage):
        await create_discount_form.add_ap_referral(f"NOREF{int(time.time())}")

        await create_discount_form.expect_inline_error_near(
            "AP Referral", INLINE_ERRORS["referral_invalid"], timeout=10000
        )

    @allure.story("AP Referral")
    @allure.title("Valid referral code is accepted")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_valid_referral_accepted(
        self,
        create_discount_form: CreateDiscountPage,
        settings: BackOfficeSettings,
    ):
        if not settings.valid_referral_code:
            pytest.skip("VALID_REFERRAL_CODE not configured")

        await create_discount_form.add_ap_referral(settings.valid_referral_code)

        assert not await create_discount_form.has_inline_error(
            INLINE_ERRORS["referral_invalid"], timeout=3000
        )

    @allure.story("Packages")
    @allure.title("Valid package id is added")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    async def test_valid_package_added(
        self,
        create_discount_form: CreateDiscountPage,
        settings: BackOfficeSettings,
    ):
        if not settings.valid_package_id:
            pytest.skip("VALID_PACKAGE_ID not configured")

        await create_discount_form.add_package_id(settings.valid_package_id)

        assert not await create_discount_form.has_inline_error(
            INLINE_ERRORS["package_not_exist"], timeout=3000
        )


@allure.epic("Back Office")
@allure.feature("Create Discount")
@pytest.mark.discount
class TestCreateDiscount:
    """End-to-end creation."""

    @allure.story("Happy Path")
    @allure.title("Discount with required fields is created")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    async def test_create_discount(self, create_discount_form: CreateDiscountPage):
        form = create_discount_form

        with allure.step("Fill required fields"):
            code = await form.fill_required_fields()

        with allure.step("Submit"):
            await form.wait_until_submit_enabled()
            await form.submit()

        with allure.step("Verify success message"):
            message = await form.wait_for_success_message(timeout=15000)
            assert message, (
                f"Discount {code} was not created. Errors: {await form.collect_error_messages()}"
            )
