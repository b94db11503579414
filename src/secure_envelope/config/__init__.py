"""Config module.

This module provides configuration management functionality.
"""

from secure_envelope.config.manager import (
    get_authority_config,
    get_logging_config,
    load_config,
)
from secure_envelope.config.schema import AuthorityConfig, Config, LoggingConfig

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_authority_config",
    "get_logging_config",
    # Configuration models
    "AuthorityConfig",
    "Config",
    "LoggingConfig",
]
