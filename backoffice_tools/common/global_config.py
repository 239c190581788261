"""
================================================================================
Global Configuration for Automation Tools
================================================================================

This module provides the logging setup shared by the test suites and the
runner script, driven by the `logging` section of `config/config.yaml`.

Features:
    - YAML-based configuration loading
    - Environment variable overrides (LOGGING__LEVEL=DEBUG)
    - Centralized Loguru logging configuration

Author: Automation Team
License: MIT
================================================================================
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger

# Global configuration storage
_config: Dict[str, Any] = {}
_logger_initialized: bool = False

DEFAULT_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
)

# Top-level sections that accept SECTION__KEY environment overrides
ENV_OVERRIDE_SECTIONS = ("logging",)


def init_logger(level: str = None, format_str: str = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Safe to call repeatedly; only the first call configures sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    _ensure_config_loaded()

    log_level = str(level or get_config("logging.level", "INFO"))
    log_format = format_str or get_config("logging.format", DEFAULT_LOG_FORMAT)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = get_config("logging.file", None)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level.upper(),
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def get_logger():
    """Return the Loguru logger, initializing it on first use."""
    if not _logger_initialized:
        init_logger()
    return logger


def _ensure_config_loaded() -> None:
    global _config
    if not _config:
        _load_config()


def _config_path() -> Path:
    return Path(
        os.getenv(
            "BACKOFFICE_CONFIG",
            Path(__file__).parent.parent.parent / "config" / "config.yaml",
        )
    )


def _load_config() -> None:
    """
    Loads configuration from the YAML file and environment variables.

    Configuration loading order:
        1. Built-in defaults
        2. config/config.yaml (or the file named by BACKOFFICE_CONFIG)
        3. SECTION__KEY environment variables for ENV_OVERRIDE_SECTIONS (override YAML)
    """
    global _config

    _config = _get_defaults()
    path = _config_path()
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            _config = _deep_merge(_config, yaml.safe_load(f) or {})
        logger.debug(f"Loaded configuration from {path}")
    else:
        logger.warning(f"No configuration file at {path}. Using defaults.")

    _apply_env_overrides()


def _get_defaults() -> Dict[str, Any]:
    return {
        "logging": {
            "level": "INFO",
            "format": DEFAULT_LOG_FORMAT,
        },
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merges two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides() -> None:
    """
    Applies environment variable overrides to the configuration.

    A double underscore separates nested keys:
    LOGGING__LEVEL=DEBUG overrides logging.level. Variables outside
    ENV_OVERRIDE_SECTIONS are ignored.
    """
    for key, value in os.environ.items():
        parts = [p.lower() for p in key.split("__")]
        if len(parts) > 1 and parts[0] in ENV_OVERRIDE_SECTIONS and all(parts):
            _set_nested(_config, parts, value)


def _set_nested(d: Dict, keys: list, value: Any) -> None:
    for key in keys[:-1]:
        if not isinstance(d.get(key), dict):
            d[key] = {}
        d = d[key]
    d[keys[-1]] = value


def get_config(key: str, default: Any = None) -> Any:
    """
    Retrieves a configuration value using a dot-separated key path.

    Examples:
        >>> get_config("logging.level", "INFO")
        'DEBUG'
    """
    _ensure_config_loaded()

    value = _config
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def reload_config() -> None:
    """Reloads the configuration and lets the next init_logger() reconfigure sinks."""
    global _config, _logger_initialized
    _config = {}
    _logger_initialized = False
    _load_config()
