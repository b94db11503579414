"""SHA-256 content digest used for the envelope integrity cross-check.

Digests are deterministic across process runs (no salt). Verification uses
a constant-time comparison.
"""

import logging
from typing import Union

from cryptography.hazmat.primitives import constant_time, hashes

from secure_envelope.utils.encoding import BytesLike, to_bytes

logger = logging.getLogger(__name__)

DIGEST_SIZE = 32


def digest(content: Union[str, BytesLike]) -> bytes:
    """Compute the SHA-256 digest of content.

    Args:
        content: Text (UTF-8 encoded before hashing) or bytes

    Returns:
        32-byte digest

    Example:
        >>> digest("hello").hex()[:16]
        '2cf24dba5fb0a30e'
    """
    hasher = hashes.Hash(hashes.SHA256())
    hasher.update(to_bytes(content))
    return hasher.finalize()


def digest_hex(content: Union[str, BytesLike]) -> str:
    """Compute the SHA-256 digest of content as lowercase hex."""
    return digest(content).hex()


def verify(content: Union[str, BytesLike], expected: Union[str, BytesLike]) -> bool:
    """Check that content hashes to the expected digest.

    Args:
        content: Original content
        expected: Raw 32-byte digest, or its hex string form

    Returns:
        True if the digest matches, False otherwise (including malformed hex)
    """
    if isinstance(expected, str):
        try:
            expected_bytes = bytes.fromhex(expected)
        except ValueError:
            logger.debug("Expected digest is not valid hex")
            return False
    else:
        expected_bytes = bytes(expected)

    return constant_time.bytes_eq(digest(content), expected_bytes)
