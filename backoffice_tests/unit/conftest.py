import pytest

from backoffice_tests.ui_testing.framework.config_loader import BackOfficeSettings
from backoffice_tests.unit.fakes import FakePage


BASE_URL = "https://bo.example.com"


@pytest.fixture
def settings():
    return BackOfficeSettings(
        login_url=f"{BASE_URL}/auth/login",
        dashboard_url=f"{BASE_URL}/dashboard",
        logout_success_url="/auth/login",
        forgot_password_url=f"{BASE_URL}/auth/forgot-password",
        create_discount_url=f"{BASE_URL}/discount/create",
        admin_email="admin@example.com",
        admin_password="secret",
    )


@pytest.fixture
def page():
    return FakePage(f"{BASE_URL}/dashboard")
