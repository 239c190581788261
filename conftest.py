"""
Repository-level pytest configuration.

  - Configures the loguru sinks once per run from config/config.yaml
  - Exposes the repository root to tests
"""

from __future__ import annotations

from pathlib import Path

import pytest

from backoffice_tools.common import init_logger


def pytest_configure(config):
    init_logger()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
