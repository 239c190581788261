"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for the browser-driven suites.

Key Features:
- One browser session per test module, shared sequentially by its tests
- Page Object fixtures bound to that session
- Per-test precondition fixtures that re-derive the required screen state
  (at login page / authenticated / on the create discount form)
- Page state (screenshot, URL, DOM) attached to Allure on failure
- Modules declare REQUIRED_SETTINGS; the suite skips when any is unset

================================================================================
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from loguru import logger
from playwright.async_api import Page

from backoffice_tests.ui_testing.framework.browser_manager import BrowserManager
from backoffice_tests.ui_testing.framework.config_loader import BackOfficeSettings
from backoffice_tests.ui_testing.framework.driver_factory import DriverFactory
from backoffice_tests.ui_testing.framework.smart_locator import SmartLocator
from backoffice_tests.ui_testing.pages.create_discount_page import CreateDiscountPage
from backoffice_tests.ui_testing.pages.dashboard_page import DashboardPage
from backoffice_tests.ui_testing.pages.forgot_password_page import ForgotPasswordPage
from backoffice_tests.ui_testing.pages.login_page import LoginPage
from backoffice_tests.ui_testing.tests.preconditions import (
    ensure_at_login,
    ensure_authenticated,
    open_create_discount_form,
)
from backoffice_tools.report_tools import attach_page_state


# ================================================================================
# Settings and Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def settings() -> BackOfficeSettings:
    """Deployment settings resolved from env / .env / config.yaml."""
    return BackOfficeSettings.from_config()


@pytest_asyncio.fixture(scope="module", loop_scope="session")
async def browser_session(
    request: pytest.FixtureRequest,
    settings: BackOfficeSettings,
) -> AsyncGenerator[BrowserManager, None]:
    """
    Module-scoped browser session.

    Skips the whole module when a setting listed in its REQUIRED_SETTINGS
    is not configured.
    """
    missing = settings.missing(*getattr(request.module, "REQUIRED_SETTINGS", ()))
    if missing:
        pytest.skip(f"Environment not configured: {', '.join(missing)}")

    manager = await DriverFactory.create_driver(settings)
    yield manager
    await manager.close()


@pytest.fixture
def page(browser_session: BrowserManager) -> Page:
    return browser_session.page


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page, settings: BackOfficeSettings) -> LoginPage:
    return LoginPage(page, settings)


@pytest.fixture
def dashboard_page(page: Page, settings: BackOfficeSettings) -> DashboardPage:
    return DashboardPage(page, settings)


@pytest.fixture
def forgot_password_page(page: Page, settings: BackOfficeSettings) -> ForgotPasswordPage:
    return ForgotPasswordPage(page, settings)


@pytest.fixture
def create_discount_page(page: Page, settings: BackOfficeSettings) -> CreateDiscountPage:
    return CreateDiscountPage(page, settings)


# ================================================================================
# Precondition Fixtures
# ================================================================================

@pytest_asyncio.fixture(loop_scope="session")
async def at_login_page(
    login_page: LoginPage,
    dashboard_page: DashboardPage,
    browser_session: BrowserManager,
) -> LoginPage:
    """Login form visible, session not authenticated."""
    await ensure_at_login(login_page, dashboard_page, browser_session)
    return login_page


@pytest_asyncio.fixture(loop_scope="session")
async def authenticated(
    login_page: LoginPage,
    dashboard_page: DashboardPage,
    browser_session: BrowserManager,
) -> DashboardPage:
    """Admin session established, dashboard layout rendered."""
    await ensure_authenticated(login_page, dashboard_page, browser_session)
    return dashboard_page


@pytest_asyncio.fixture(loop_scope="session")
async def create_discount_form(
    login_page: LoginPage,
    dashboard_page: DashboardPage,
    create_discount_page: CreateDiscountPage,
    browser_session: BrowserManager,
) -> CreateDiscountPage:
    """Freshly loaded create discount form of an authenticated session."""
    return await open_create_discount_form(
        login_page, dashboard_page, create_discount_page, browser_session
    )


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase report on the item (rep_setup / rep_call / rep_teardown)."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest_asyncio.fixture(autouse=True, loop_scope="session")
async def _attach_page_state_on_failure(
    request: pytest.FixtureRequest,
    page: Page,
) -> AsyncGenerator[None, None]:
    """Attach screenshot, URL and DOM to Allure when the test body failed."""
    yield
    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        await attach_page_state(page, name=request.node.name)


def pytest_sessionfinish(session, exitstatus):
    report = SmartLocator.get_health_report()
    logger.info(f"\n{report}")
