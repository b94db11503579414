"""Messaging module.

This module provides principals, the secure envelope record and the trust
domain that routes envelopes between enrolled principals.
"""

from secure_envelope.messaging.domain import DEFAULT_PRINCIPALS, TrustDomain
from secure_envelope.messaging.envelope import Envelope, tamper
from secure_envelope.messaging.principal import (
    ERROR_HASH_MISMATCH,
    ERROR_SIGNATURE_INVALID,
    Principal,
)

__all__ = [
    "DEFAULT_PRINCIPALS",
    "ERROR_HASH_MISMATCH",
    "ERROR_SIGNATURE_INVALID",
    "Envelope",
    "Principal",
    "TrustDomain",
    "tamper",
]
