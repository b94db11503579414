"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from secure_envelope.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from secure_envelope.config.schema import AuthorityConfig, Config, LoggingConfig
from secure_envelope.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "SECURE_ENVELOPE_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (SECURE_ENVELOPE_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> config.authority.ca_name
        'Academic CA'
    """
    # Load .env file if present in project root
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed or not an object
    """
    if not config_path.exists():
        logger.info(
            f"Config file not found: {config_path}. Using default configuration."
        )
        # Deep copy so callers can mutate freely
        return json.loads(json.dumps(DEFAULT_CONFIG))

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check file permissions and path"
        ) from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Config file must contain a JSON object: {config_path}"
        )

    logger.info(f"Loaded configuration from {config_path}")
    return config_dict


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with SECURE_ENVELOPE_ prefix.

    Recognized variables:
    - SECURE_ENVELOPE_CA_NAME
    - SECURE_ENVELOPE_VALIDITY_DAYS
    - SECURE_ENVELOPE_EXPIRY_WARNING_DAYS
    - SECURE_ENVELOPE_PRINCIPALS (comma-separated names)
    - SECURE_ENVELOPE_LOG_LEVEL
    - SECURE_ENVELOPE_LOG_FILE
    - SECURE_ENVELOPE_REDACT_KEYS

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied

    Raises:
        ConfigurationError: If a numeric override is not an integer
    """
    # Authority section
    if ca_name := os.getenv(f"{ENV_PREFIX}CA_NAME"):
        config_dict.setdefault("authority", {})["ca_name"] = ca_name
        logger.debug("Override: ca_name from environment")

    if validity_days := os.getenv(f"{ENV_PREFIX}VALIDITY_DAYS"):
        config_dict.setdefault("authority", {})["validity_days"] = _parse_int(
            "VALIDITY_DAYS", validity_days
        )
        logger.debug("Override: validity_days from environment")

    if warning_days := os.getenv(f"{ENV_PREFIX}EXPIRY_WARNING_DAYS"):
        config_dict.setdefault("authority", {})["expiry_warning_days"] = _parse_int(
            "EXPIRY_WARNING_DAYS", warning_days
        )
        logger.debug("Override: expiry_warning_days from environment")

    # Principals
    if principals := os.getenv(f"{ENV_PREFIX}PRINCIPALS"):
        config_dict["principals"] = [
            name.strip() for name in principals.split(",") if name.strip()
        ]
        logger.debug("Override: principals from environment")

    # Logging section
    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact_keys := os.getenv(f"{ENV_PREFIX}REDACT_KEYS"):
        config_dict.setdefault("logging", {})["redact_keys"] = _parse_bool(redact_keys)
        logger.debug("Override: redact_keys from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string.

    Args:
        value: String value to parse (case-insensitive)

    Returns:
        Boolean value
    """
    return value.lower() in ("true", "1", "yes", "on")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid integer in {ENV_PREFIX}{name}: {value!r}"
        ) from e


def get_authority_config(config: Config) -> AuthorityConfig:
    """Get certificate authority configuration.

    Args:
        config: Configuration instance

    Returns:
        AuthorityConfig instance
    """
    return config.authority


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration.

    Args:
        config: Configuration instance

    Returns:
        LoggingConfig instance

    Example:
        >>> config = load_config()
        >>> logging_cfg = get_logging_config(config)
        >>> log_level = logging_cfg.level
    """
    return config.logging
