"""RSA digital signatures (PKCS#1 v1.5 with SHA-256).

Signatures bind the exact byte sequence signed; any single-bit change to the
data invalidates them. Verification never raises on malformed input.
"""

import logging
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from secure_envelope.crypto.asymmetric import load_private_key, load_public_key
from secure_envelope.utils.encoding import BytesLike, to_bytes
from secure_envelope.utils.exceptions import KeyFormatError

logger = logging.getLogger(__name__)


def sign(data: Union[str, BytesLike], private_key_pem: str) -> bytes:
    """Sign data with an RSA private key.

    Args:
        data: Text (UTF-8 encoded) or bytes to sign
        private_key_pem: Signer's PEM private key

    Returns:
        Signature bytes (256 bytes for RSA-2048)

    Raises:
        KeyFormatError: If the private key cannot be loaded
    """
    private_key = load_private_key(private_key_pem)
    return private_key.sign(to_bytes(data), padding.PKCS1v15(), hashes.SHA256())


def verify(
    data: Union[str, BytesLike],
    signature: Union[str, BytesLike],
    public_key_pem: str,
) -> bool:
    """Verify a signature over data.

    Args:
        data: Data that was signed
        signature: Signature bytes
        public_key_pem: Signer's PEM public key

    Returns:
        True if the signature is valid, False for any mismatch or malformed input

    Example:
        >>> pair = generate_key_pair()
        >>> sig = sign(b"payload", pair.private_key)
        >>> verify(b"payload", sig, pair.public_key)
        True
        >>> verify(b"payload!", sig, pair.public_key)
        False
    """
    try:
        public_key = load_public_key(public_key_pem)
        public_key.verify(
            to_bytes(signature), to_bytes(data), padding.PKCS1v15(), hashes.SHA256()
        )
        return True
    except InvalidSignature:
        logger.debug("Signature verification failed: signature does not match data")
        return False
    except (KeyFormatError, TypeError, ValueError) as e:
        logger.debug(f"Signature verification failed on malformed input: {e}")
        return False
