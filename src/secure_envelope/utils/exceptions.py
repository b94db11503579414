"""Custom exception classes for the secure envelope toolkit.

All exceptions inherit from SecureEnvelopeError to allow catching all custom exceptions.

Validation failures on the receive path (bad certificate, bad signature,
hash mismatch) are NOT exceptions; they are reported in a ReceiveResult.
"""


class SecureEnvelopeError(Exception):
    """Base exception for all secure envelope custom exceptions."""

    pass


class ConfigurationError(SecureEnvelopeError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Invalid configuration file format
        - Configuration value out of range
    """

    pass


class ParameterError(SecureEnvelopeError):
    """Base exception for caller-side misuse of a primitive service.

    Parameter errors fail fast and are never silently coerced.
    """

    pass


class InvalidKeyLength(ParameterError):
    """Raised when a symmetric key does not have the required length."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Key must be {expected} bytes, got {actual}")


class InvalidIVLength(ParameterError):
    """Raised when an initialization vector does not have the required length."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"IV must be {expected} bytes, got {actual}")


class InvalidCiphertextLength(ParameterError):
    """Raised when ciphertext is empty or not aligned to the cipher block size."""

    pass


class KeyFormatError(ParameterError):
    """Raised when PEM key material cannot be loaded.

    Examples:
        - Text is not PEM
        - PEM holds a non-RSA key
        - Public key passed where a private key is required
    """

    pass


class DecryptionError(SecureEnvelopeError):
    """Raised when asymmetric decryption fails.

    Examples:
        - Ciphertext was encrypted for a different key pair
        - Ciphertext is corrupted
        - OAEP padding mismatch
    """

    pass


class ProtocolError(SecureEnvelopeError):
    """Base exception for envelope protocol precondition failures.

    Raised before any cryptographic work begins.
    """

    pass


class MissingCertificate(ProtocolError):
    """Raised when the sending principal holds no certificate."""

    def __init__(self, principal_name: str) -> None:
        self.principal_name = principal_name
        super().__init__(f"Principal '{principal_name}' has no certificate")


class RecipientMissingCertificate(ProtocolError):
    """Raised when the receiving principal holds no certificate."""

    def __init__(self, principal_name: str) -> None:
        self.principal_name = principal_name
        super().__init__(f"Recipient '{principal_name}' has no certificate")


class CertificateAlreadyBound(ProtocolError):
    """Raised when binding a certificate to a principal that already has one."""

    pass


class CertificateMismatch(ProtocolError):
    """Raised when a certificate does not belong to the principal it is bound to.

    Examples:
        - Certificate subject public key differs from the principal's key
        - Certificate subject differs from the principal's name
    """

    pass


class UnknownPrincipal(ProtocolError):
    """Raised when a trust domain has no principal with the requested name."""

    pass


class FormatError(SecureEnvelopeError):
    """Base exception for malformed serialized records."""

    pass


class MalformedCertificate(FormatError):
    """Raised when a serialized certificate is missing fields or has bad values.

    Examples:
        - Missing subject or signature field
        - Timestamp not in ISO-8601 format
        - Signature is not valid base64
    """

    pass


class MalformedEnvelope(FormatError):
    """Raised when a serialized envelope is missing fields or has bad values."""

    pass
