"""Logging configuration and logger factory for the secure envelope toolkit.

This module provides centralized logging configuration with support for:
- Console and file handlers with different log levels
- Log rotation to prevent unbounded file growth
- Key material redaction via custom formatters
- Environment variable configuration
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .formatters import KeyMaterialRedactingFormatter

# Constants
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "secure-envelope.log"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

_logging_configured = False

logger = logging.getLogger(__name__)


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_keys: bool = False,
) -> None:
    """Configure logging for the secure envelope toolkit.

    Sets up both console and file handlers with appropriate log levels and formatting.
    This function is idempotent - it can be called multiple times safely.

    Args:
        level: Log level for console output (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               File handler always uses DEBUG level.
        log_file: Path to log file. If None, uses DEFAULT_LOG_FILE or
                 SECURE_ENVELOPE_LOG_FILE environment variable if set.
        redact_keys: Whether to redact key material and binary blobs from logs

    Raises:
        ValueError: If invalid log level is provided
        RuntimeError: If log directory cannot be created

    Example:
        >>> from pathlib import Path
        >>> configure_logging(level="DEBUG", redact_keys=True)
        >>> configure_logging(level="INFO", log_file=Path("custom/app.log"))
    """
    global _logging_configured

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )

    if log_file is None:
        env_log_file = os.environ.get("SECURE_ENVELOPE_LOG_FILE")
        log_file = Path(env_log_file) if env_log_file else DEFAULT_LOG_FILE

    log_dir = log_file.parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError) as e:
        raise RuntimeError(
            f"Failed to create log directory: {log_dir}. "
            f"Ensure write permissions are available. Error: {e}"
        ) from e

    root_logger = logging.getLogger()

    # Reconfiguring replaces our handlers instead of stacking duplicates
    if _logging_configured:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(
        KeyMaterialRedactingFormatter(fmt=DEFAULT_LOG_FORMAT, redact_keys=redact_keys)
    )
    root_logger.addHandler(console_handler)

    try:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            KeyMaterialRedactingFormatter(fmt=DEFAULT_LOG_FORMAT, redact_keys=redact_keys)
        )
        root_logger.addHandler(file_handler)
    except (OSError, PermissionError) as e:
        root_logger.warning(
            f"Failed to create file handler for {log_file}: {e}. "
            f"Logging to console only."
        )

    _logging_configured = True


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for the specified module.

    Args:
        module_name: Name of the module, typically __name__

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(module_name)

