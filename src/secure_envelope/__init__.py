"""Secure Envelope - hybrid-encryption messaging with a certificate trust model.

Principals enrolled by a certificate authority exchange envelopes that are
encrypted with a one-time AES-256 key, key-wrapped with RSA-OAEP, signed by
the sender and checked for integrity with SHA-256.
"""

__version__ = "0.1.0"
