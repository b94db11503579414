"""PKI module.

This module provides the certificate model and the certificate authority.
"""

from secure_envelope.pki.authority import DEFAULT_CA_NAME, DEFAULT_VALIDITY_DAYS, CertificateAuthority
from secure_envelope.pki.certificate import (
    ERROR_EXPIRED,
    ERROR_INVALID_SIGNATURE,
    ERROR_NOT_YET_VALID,
    Certificate,
    CertificateRecord,
    canonical_serialization,
)

__all__ = [
    "Certificate",
    "CertificateAuthority",
    "CertificateRecord",
    "DEFAULT_CA_NAME",
    "DEFAULT_VALIDITY_DAYS",
    "ERROR_EXPIRED",
    "ERROR_INVALID_SIGNATURE",
    "ERROR_NOT_YET_VALID",
    "canonical_serialization",
]
