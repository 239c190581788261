import pytest

from backoffice_tests.ui_testing.framework.smart_locator import (
    ElementNotFoundError,
    SmartLocator,
    visible,
    xpath_any,
)
from backoffice_tests.ui_testing.framework.wait_helpers import WaitTimeoutError
from backoffice_tests.unit.fakes import FakePage


@pytest.fixture(autouse=True)
def clean_health():
    SmartLocator.reset_health()
    yield
    SmartLocator.reset_health()


@pytest.fixture
def page():
    return FakePage("https://bo.example.com/discount/create")


def code_locator(page):
    return SmartLocator(page, "Discount Code", {
        "primary": "#code",
        "fallback_1": "xpath=//input[@name='discountCode']",
    })


@pytest.mark.asyncio
async def test_primary_strategy_wins(page):
    primary = page.add("#code", value="PRIMARY")
    page.add("xpath=//input[@name='discountCode']", value="FALLBACK")

    element = await code_locator(page).locate(timeout=500)

    assert await element.input_value() == primary.value
    assert "No maintenance needed" in SmartLocator.get_health_report()


@pytest.mark.asyncio
async def test_fallback_is_recorded_in_health_report(page):
    page.add("#code", visible=False)
    page.add("xpath=//input[@name='discountCode']", value="FALLBACK")

    element = await code_locator(page).locate(timeout=500)

    assert await element.input_value() == "FALLBACK"
    report = SmartLocator.get_health_report()
    assert "[Discount Code]" in report
    assert "Failed primary: #code" in report
    assert "fallback_1 -> xpath=//input[@name='discountCode']" in report


@pytest.mark.asyncio
async def test_element_appearing_later_is_found(page):
    page.later(0.1, lambda: page.add("#code", value="LATE"))

    element = await code_locator(page).locate(timeout=1000)

    assert await element.input_value() == "LATE"


@pytest.mark.asyncio
async def test_not_found_lists_every_strategy(page):
    with pytest.raises(ElementNotFoundError) as exc_info:
        await code_locator(page).locate(timeout=200)

    message = str(exc_info.value)
    assert "Discount Code" in message
    assert "primary: #code" in message
    assert "fallback_1: xpath=//input[@name='discountCode']" in message
    assert isinstance(exc_info.value, WaitTimeoutError)


@pytest.mark.asyncio
async def test_no_strategies_raises_immediately(page):
    with pytest.raises(ElementNotFoundError, match="No locators defined"):
        await SmartLocator(page, "Empty").locate(timeout=200)


@pytest.mark.asyncio
async def test_presence_ignores_visibility(page):
    locator = code_locator(page)
    assert await locator.presence() is None
    assert await locator.is_present() is False

    page.add("xpath=//input[@name='discountCode']", visible=False, value="HIDDEN")

    found = await locator.presence()
    assert await found.input_value() == "HIDDEN"
    assert await locator.is_present() is True


def test_primary_selector_defaults_to_first_strategy(page):
    locator = SmartLocator(page, "Submit", {"by_text": "text=Submit", "by_css": "button"})
    assert locator.primary_selector == "text=Submit"


def test_xpath_any_joins_paths():
    assert xpath_any("//a", "//b") == "xpath=//a | //b"


def test_visible_suffix_is_added_once():
    assert visible("#code") == "#code >> visible=true"
    assert visible(visible("#code")) == "#code >> visible=true"
