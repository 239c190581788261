"""
================================================================================
Back-Office Tools
================================================================================

Infrastructure helpers used by the back-office test suites.

Modules:
    - common: Shared configuration and logging utilities
    - report_tools: Allure attachment helpers

Author: Automation Team
License: MIT
================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
