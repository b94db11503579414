"""Data models for key material."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class KeyPair:
    """RSA key pair in portable PEM text form.

    Attributes:
        public_key: PEM SubjectPublicKeyInfo text
        private_key: PEM PKCS#8 text (unencrypted)
    """

    public_key: str
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class SymmetricCiphertext:
    """Output of one symmetric encryption call.

    Attributes:
        ciphertext: AES-256-CBC ciphertext bytes
        iv: Initialization vector used for this call (16 bytes)
    """

    ciphertext: bytes
    iv: bytes
