"""Models module.

This module provides data models and dataclasses for the application.
"""

from secure_envelope.models.keys import KeyPair, SymmetricCiphertext
from secure_envelope.models.results import (
    CertificateValidationResult,
    ReceiveResult,
    ValidationFlags,
)

__all__ = [
    "CertificateValidationResult",
    "KeyPair",
    "ReceiveResult",
    "SymmetricCiphertext",
    "ValidationFlags",
]
