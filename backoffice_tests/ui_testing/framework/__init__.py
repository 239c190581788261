"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based framework behind the back-office page objects.

Components:
    - config_loader: Deployment URLs and credentials (env / .env / YAML)
    - wait_helpers: Polling primitives and WaitTimeoutError
    - smart_locator: Named elements with fallback locator strategies
    - browser_manager: Browser lifecycle management
    - driver_factory: Session creation and explicit waits
    - page_base: Base page object

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .config_loader import BackOfficeSettings, ConfigLoader, ConfigurationError
from .driver_factory import DriverFactory
from .page_base import BasePage, UnexpectedPageStateError
from .smart_locator import ElementNotFoundError, SmartLocator, xpath_any
from .wait_helpers import WaitConfig, WaitTimeoutError, playwright_wait, poll_until

__all__ = [
    "BackOfficeSettings",
    "BasePage",
    "BrowserManager",
    "ConfigLoader",
    "ConfigurationError",
    "DriverFactory",
    "ElementNotFoundError",
    "SmartLocator",
    "UnexpectedPageStateError",
    "WaitConfig",
    "WaitTimeoutError",
    "playwright_wait",
    "poll_until",
    "xpath_any",
]
