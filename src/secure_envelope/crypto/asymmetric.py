"""RSA-2048 key pairs and RSA-OAEP encryption for symmetric key exchange.

Keys are exchanged as PEM text (SubjectPublicKeyInfo public keys, PKCS#8
private keys). OAEP padding is randomized, so encrypting identical data
twice under one key gives different ciphertexts.
"""

import logging
from typing import Union

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from secure_envelope.models.keys import KeyPair
from secure_envelope.utils.encoding import BytesLike, to_bytes
from secure_envelope.utils.exceptions import DecryptionError, KeyFormatError

logger = logging.getLogger(__name__)

KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def generate_key_pair() -> KeyPair:
    """Generate a new RSA key pair encoded as PEM text.

    Returns:
        KeyPair with SPKI public key and unencrypted PKCS#8 private key

    Example:
        >>> pair = generate_key_pair()
        >>> pair.public_key.startswith("-----BEGIN PUBLIC KEY-----")
        True
    """
    private_key = rsa.generate_private_key(
        public_exponent=PUBLIC_EXPONENT, key_size=KEY_SIZE
    )

    private_pem = private_key.private_bytes(
        encoding=Encoding.PEM,
        format=PrivateFormat.PKCS8,
        encryption_algorithm=NoEncryption(),
    ).decode("ascii")
    public_pem = private_key.public_key().public_bytes(
        encoding=Encoding.PEM,
        format=PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")

    logger.debug(f"Generated RSA-{KEY_SIZE} key pair")
    return KeyPair(public_key=public_pem, private_key=private_pem)


def load_public_key(public_key_pem: Union[str, BytesLike]) -> rsa.RSAPublicKey:
    """Load an RSA public key from PEM text.

    Raises:
        KeyFormatError: If the PEM cannot be parsed or is not an RSA public key
    """
    try:
        key = serialization.load_pem_public_key(to_bytes(public_key_pem))
    except (ValueError, TypeError) as e:
        raise KeyFormatError(f"Failed to load public key: {e}") from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyFormatError(
            f"Expected RSA public key, got {type(key).__name__}"
        )
    return key


def load_private_key(private_key_pem: Union[str, BytesLike]) -> rsa.RSAPrivateKey:
    """Load an unencrypted RSA private key from PEM text.

    Raises:
        KeyFormatError: If the PEM cannot be parsed or is not an RSA private key
    """
    try:
        key = serialization.load_pem_private_key(
            to_bytes(private_key_pem), password=None
        )
    except (ValueError, TypeError) as e:
        raise KeyFormatError(f"Failed to load private key: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyFormatError(
            f"Expected RSA private key, got {type(key).__name__}"
        )
    return key


def encrypt(data: Union[str, BytesLike], public_key_pem: str) -> bytes:
    """Encrypt a small payload (such as a symmetric key) with RSA-OAEP.

    Args:
        data: Text (UTF-8 encoded) or bytes, at most 190 bytes for RSA-2048
        public_key_pem: Recipient's PEM public key

    Returns:
        256-byte ciphertext

    Raises:
        KeyFormatError: If the public key cannot be loaded
        ValueError: If data is too long for the key size
    """
    public_key = load_public_key(public_key_pem)
    return public_key.encrypt(to_bytes(data), _oaep())


def decrypt(ciphertext: BytesLike, private_key_pem: str) -> bytes:
    """Decrypt RSA-OAEP ciphertext with a private key.

    Args:
        ciphertext: Ciphertext produced by encrypt()
        private_key_pem: PEM private key matching the public key used

    Returns:
        Decrypted bytes

    Raises:
        KeyFormatError: If the private key cannot be loaded
        DecryptionError: If the ciphertext was not produced for this key pair
    """
    private_key = load_private_key(private_key_pem)
    try:
        return private_key.decrypt(bytes(ciphertext), _oaep())
    except ValueError as e:
        raise DecryptionError(
            "RSA decryption failed: ciphertext was not produced for this key "
            "pair or is corrupted"
        ) from e
