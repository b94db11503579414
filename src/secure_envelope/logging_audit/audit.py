"""Audit trail functionality for the secure envelope toolkit.

This module provides structured audit logging for envelope send/receive
operations and trust domain lifecycle events.
"""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

# Event types emitted by the package
ENVELOPE_SENT = "ENVELOPE_SENT"
ENVELOPE_ACCEPTED = "ENVELOPE_ACCEPTED"
ENVELOPE_REJECTED = "ENVELOPE_REJECTED"
DOMAIN_RESET = "DOMAIN_RESET"


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Log an audit trail event.

    Creates a structured audit log entry with standard fields. Audit events
    are logged at INFO level, or ERROR level when ``status`` is "failure".
    The caller's dict is not modified.

    Args:
        event_type: Type of operation (e.g., "ENVELOPE_SENT", "ENVELOPE_REJECTED")
        details: Event details. Common fields include:
                - status: "success" or "failure"
                - sender / recipient: Principal names
                - stage: Receive stage that failed
                - error_message: Error details (if status is failure)
                - correlation_id: Optional correlation ID for related events

    Example:
        >>> log_audit_event("ENVELOPE_SENT", {
        ...     "status": "success",
        ...     "sender": "Alice",
        ...     "recipient": "Bob",
        ... })
    """
    details = dict(details)
    details.setdefault("timestamp", time.time())
    details.setdefault("correlation_id", str(uuid.uuid4()))

    message_parts = [f"AUDIT [{event_type}]"]

    field_order = [
        "status",
        "sender",
        "recipient",
        "stage",
        "error_message",
        "correlation_id",
    ]

    for field in field_order:
        if field in details:
            message_parts.append(f"{field}={details[field]}")

    for key, value in details.items():
        if key not in field_order and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)

    if details.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)
