"""Cryptographic primitive services.

Thin wrappers over the ``cryptography`` library that enforce the parameter
contracts of the envelope protocol:

- hashing: SHA-256 digest with constant-time verification
- symmetric: AES-256-CBC with per-call random IV
- asymmetric: RSA-2048 key pairs and RSA-OAEP key exchange
- signatures: RSA PKCS#1 v1.5 / SHA-256 signatures
"""

from secure_envelope.crypto import asymmetric, hashing, signatures, symmetric

__all__ = [
    "asymmetric",
    "hashing",
    "signatures",
    "symmetric",
]
