"""AES-256-CBC symmetric encryption for message bodies.

A fresh random IV is generated for every encryption call, so encrypting the
same plaintext twice under one key yields different ciphertexts.

CBC is not authenticated: decrypting with a wrong key or wrong IV does not
raise, it returns incorrect bytes. Envelope receivers must verify the
signature over the ciphertext before trusting anything decrypted here.
"""

import logging
import os
from typing import Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from secure_envelope.models.keys import SymmetricCiphertext
from secure_envelope.utils.encoding import BytesLike, to_bytes
from secure_envelope.utils.exceptions import (
    InvalidCiphertextLength,
    InvalidIVLength,
    InvalidKeyLength,
)

logger = logging.getLogger(__name__)

KEY_LENGTH = 32  # 256 bits
IV_LENGTH = 16  # 128 bits
BLOCK_SIZE_BITS = algorithms.AES.block_size


def generate_key() -> bytes:
    """Generate a random 256-bit key from the OS CSPRNG."""
    return os.urandom(KEY_LENGTH)


def encrypt(plaintext: Union[str, BytesLike], key: BytesLike) -> SymmetricCiphertext:
    """Encrypt plaintext with AES-256-CBC and PKCS7 padding.

    Args:
        plaintext: Text (UTF-8 encoded) or bytes to encrypt
        key: 32-byte key

    Returns:
        SymmetricCiphertext holding ciphertext and the fresh IV

    Raises:
        InvalidKeyLength: If key is not 32 bytes

    Example:
        >>> key = generate_key()
        >>> result = encrypt("secret", key)
        >>> decrypt(result.ciphertext, key, result.iv)
        b'secret'
    """
    key = bytes(key)
    _check_key(key)

    iv = os.urandom(IV_LENGTH)

    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(to_bytes(plaintext)) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return SymmetricCiphertext(ciphertext=ciphertext, iv=iv)


def decrypt(ciphertext: BytesLike, key: BytesLike, iv: BytesLike) -> bytes:
    """Decrypt AES-256-CBC ciphertext.

    A wrong key or IV does not raise. When PKCS7 padding cannot be removed
    the raw decrypted blocks are returned as-is.

    Args:
        ciphertext: Ciphertext bytes (non-empty multiple of 16 bytes)
        key: 32-byte key
        iv: 16-byte initialization vector

    Returns:
        Decrypted bytes

    Raises:
        InvalidKeyLength: If key is not 32 bytes
        InvalidIVLength: If iv is not 16 bytes
        InvalidCiphertextLength: If ciphertext is empty or not block aligned
    """
    key = bytes(key)
    iv = bytes(iv)
    ciphertext = bytes(ciphertext)

    _check_key(key)
    if len(iv) != IV_LENGTH:
        raise InvalidIVLength(IV_LENGTH, len(iv))
    block_bytes = BLOCK_SIZE_BITS // 8
    if not ciphertext or len(ciphertext) % block_bytes:
        raise InvalidCiphertextLength(
            f"Ciphertext length must be a non-zero multiple of {block_bytes} bytes, "
            f"got {len(ciphertext)}"
        )

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError:
        logger.debug("PKCS7 padding invalid after decryption; returning raw blocks")
        return padded


def _check_key(key: bytes) -> None:
    if len(key) != KEY_LENGTH:
        raise InvalidKeyLength(KEY_LENGTH, len(key))
