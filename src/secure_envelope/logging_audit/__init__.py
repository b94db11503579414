"""Logging Audit module.

This module provides logging configuration and audit trail functionality.
"""

from .audit import log_audit_event
from .formatters import KeyMaterialRedactingFormatter
from .logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "log_audit_event",
    "KeyMaterialRedactingFormatter",
]
