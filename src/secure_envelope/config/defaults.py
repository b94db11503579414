"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Default configuration dictionary
# This is used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "authority": {
        "ca_name": "Academic CA",
        # Certificates are valid for one year
        "validity_days": 365,
        # No expiring-soon warnings unless requested
        "expiry_warning_days": 0,
    },
    "principals": ["Alice", "Bob"],
    "logging": {
        # Default log level: INFO (moderate verbosity)
        "level": "INFO",
        # Default log file path
        "log_file": "logs/secure-envelope.log",
        # Key material is logged unredacted by default (opt-in redaction)
        "redact_keys": False,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
