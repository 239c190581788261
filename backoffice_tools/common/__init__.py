"""
================================================================================
Back-Office Tools Common Utilities
================================================================================

Shared configuration and logging setup.

Usage:
    from backoffice_tools.common import get_config, init_logger

    init_logger()
    level = get_config("logging.level", "INFO")

Author: Automation Team
License: MIT
================================================================================
"""

from .global_config import get_config, get_logger, init_logger, reload_config

__all__ = [
    "get_config",
    "get_logger",
    "init_logger",
    "reload_config",
]
