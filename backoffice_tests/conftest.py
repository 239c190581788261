"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the project markers, tags tests by location and refuses
configurations the UI suites cannot run under.

================================================================================
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests driving a real browser"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests that run without a browser"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "auth: Tests related to login, logout and password reset"
    )
    config.addinivalue_line(
        "markers", "discount: Tests related to discount creation"
    )

    # The UI suites share one browser page per module; it cannot be split
    # across workers.
    workers = getattr(config.option, "numprocesses", None)
    if workers not in (None, 0, 1):
        raise pytest.UsageError(
            f"UI suites run sequentially on a shared browser session; "
            f"got -n {workers}. Run without pytest-xdist workers."
        )


def pytest_collection_modifyitems(config, items):
    """Tag tests by directory: ui_testing -> ui + e2e, unit -> unit."""
    for item in items:
        parts = Path(item.path).parts
        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.e2e)
        elif "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Back-Office E2E Suite",
        "=" * 60,
        "",
    ]
