"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the back-office screens.

Each page class encapsulates:
    - Element locators (primary + fallback strategies)
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .create_discount_page import CreateDiscountPage
from .dashboard_page import DashboardPage
from .forgot_password_page import ForgotPasswordPage
from .login_page import LoginPage

__all__ = [
    "CreateDiscountPage",
    "DashboardPage",
    "ForgotPasswordPage",
    "LoginPage",
]
