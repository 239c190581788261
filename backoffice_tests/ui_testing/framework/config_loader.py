"""
================================================================================
Configuration Loader
================================================================================

Deployment configuration for the back-office UI suites.

Features:
    - `.env` file loading (never overrides variables already set)
    - Environment variable override (LOGIN_URL overrides login.url)
    - YAML defaults from config/config.yaml
    - Typed settings view with required-field validation

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (LOGIN_URL), including values from `.env`
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("login.url")
        'https://backoffice.example.com/auth/login'
        >>> config.get("headless", False)
        True  # HEADLESS=true in the environment

    Environment Variable Mapping:
        - login.url -> LOGIN_URL
        - admin.email -> ADMIN_EMAIL
        - valid.package_id -> VALID_PACKAGE_ID
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(
        cls,
        config_path: Optional[Path] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "ConfigLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        config_path: Optional[Path] = None,
        dotenv_path: Optional[Path] = None,
    ) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
            dotenv_path: `.env` file to load. Searched from the working
                        directory when not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._dotenv_path = dotenv_path
        self._load_dotenv()
        self._load_config()
        self._initialized = True

    def _load_dotenv(self) -> None:
        if self._dotenv_path is not None:
            loaded = load_dotenv(self._dotenv_path, override=False)
        else:
            loaded = load_dotenv(override=False)
        if loaded:
            logger.debug("Loaded environment variables from .env")

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Environment variables win over YAML; an empty variable counts as unset.

        Args:
            key: Dot-notation path (e.g., "login.url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_value = os.environ.get(self.env_name(key))
        if env_value:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    @staticmethod
    def env_name(key: str) -> str:
        """Environment variable consulted for `key` ("login.url" -> "LOGIN_URL")."""
        return key.upper().replace(".", "_")

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_dotenv()
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """Convert an environment string to the type of `reference`."""
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.strip().lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """Reset singleton instance."""
        cls._instance = None
        cls._config = {}


# Settings field -> configuration key
SETTINGS_KEYS: Dict[str, str] = {
    "login_url": "login.url",
    "dashboard_url": "dashboard.url",
    "logout_success_url": "logout_success.url",
    "forgot_password_url": "forgot_password.url",
    "create_discount_url": "create_discount.url",
    "admin_email": "admin.email",
    "admin_password": "admin.password",
    "registered_email": "registered.email",
    "valid_referral_code": "valid.referral_code",
    "valid_package_id": "valid.package_id",
}


@dataclass
class BackOfficeSettings:
    """Deployment URLs, credentials and browser options for one run."""

    login_url: Optional[str] = None
    dashboard_url: Optional[str] = None
    logout_success_url: Optional[str] = None
    forgot_password_url: Optional[str] = None
    create_discount_url: Optional[str] = None
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    registered_email: Optional[str] = None
    valid_referral_code: Optional[str] = None
    valid_package_id: Optional[str] = None
    headless: bool = False
    browser_type: str = "chromium"
    default_timeout_ms: int = 10000
    navigation_timeout_ms: int = 60000

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "BackOfficeSettings":
        config = config or ConfigLoader()
        values: Dict[str, Any] = {
            name: (str(config.get(key)) if config.get(key) not in (None, "") else None)
            for name, key in SETTINGS_KEYS.items()
        }
        return cls(
            **values,
            headless=config.get("headless", False),
            browser_type=config.get("browser.type", "chromium"),
            default_timeout_ms=config.get("default_timeout_ms", 10000),
            navigation_timeout_ms=config.get("navigation_timeout_ms", 60000),
        )

    def missing(self, *fields: str) -> List[str]:
        """Environment variable names of the given fields that are unset."""
        return [
            ConfigLoader.env_name(SETTINGS_KEYS[name])
            for name in fields
            if not getattr(self, name)
        ]

    def require(self, *fields: str) -> None:
        """
        Raise ConfigurationError naming every unset field.

        Raises:
            ConfigurationError: If any of `fields` is empty
        """
        missing = self.missing(*fields)
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} must be set in the environment or .env file"
            )


__all__ = [
    "BackOfficeSettings",
    "ConfigLoader",
    "ConfigurationError",
    "SETTINGS_KEYS",
]
