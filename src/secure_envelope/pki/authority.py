"""Certificate authority for a single closed trust domain.

The authority is the only producer of Certificates. Its public key is
embedded in each certificate it issues; there is no separate root-of-trust
distribution channel and no chain beyond this one issuer.
"""

import logging
import secrets
from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from secure_envelope.crypto import asymmetric, signatures
from secure_envelope.models.keys import KeyPair
from secure_envelope.pki.certificate import SERIAL_NUMBER_HEX_LENGTH, Certificate, canonical_serialization
from secure_envelope.utils.encoding import utc_now

if TYPE_CHECKING:
    from secure_envelope.messaging.principal import Principal

logger = logging.getLogger(__name__)

DEFAULT_CA_NAME = "Academic CA"
DEFAULT_VALIDITY_DAYS = 365


class CertificateAuthority:
    """Issues signed certificates binding subject names to public keys.

    Attributes:
        name: Authority name, written to each certificate's issuer field
        public_key: Authority PEM public key

    Example:
        >>> ca = CertificateAuthority("Academic CA")
        >>> alice = ca.enroll(Principal.generate("Alice"))
        >>> alice.certificate.issuer
        'Academic CA'
    """

    def __init__(
        self,
        name: str = DEFAULT_CA_NAME,
        default_validity_days: int = DEFAULT_VALIDITY_DAYS,
        key_pair: Optional[KeyPair] = None,
    ) -> None:
        """Initialize the authority and generate its key pair.

        Args:
            name: Authority name
            default_validity_days: Validity used when issue_certificate() is
                called without an explicit period
            key_pair: Existing key pair to reuse (a new one is generated if None)
        """
        if not name:
            raise ValueError("Certificate authority name must not be empty")

        self.name = name
        self.default_validity_days = default_validity_days
        self._key_pair = key_pair or asymmetric.generate_key_pair()

        logger.info(f"Certificate authority '{name}' initialized")

    @property
    def public_key(self) -> str:
        return self._key_pair.public_key

    def issue_certificate(
        self,
        subject: str,
        subject_public_key: str,
        validity_days: Optional[int] = None,
    ) -> Certificate:
        """Issue a certificate for a subject's public key.

        A negative validity period yields a certificate that is already
        expired at issuance, which is useful for exercising rejection paths.

        Args:
            subject: Certificate holder name
            subject_public_key: Holder's PEM public key
            validity_days: Days until expiry (default: authority default)

        Returns:
            Signed, self-contained Certificate

        Raises:
            ValueError: If subject is empty or validity_days is zero
        """
        if not subject:
            raise ValueError("Certificate subject must not be empty")

        if validity_days is None:
            validity_days = self.default_validity_days
        if validity_days == 0:
            raise ValueError("validity_days must be non-zero")

        serial_number = secrets.token_hex(SERIAL_NUMBER_HEX_LENGTH // 2)
        issued_at = utc_now()
        expires_at = issued_at + timedelta(days=validity_days)

        tbs = canonical_serialization(
            subject=subject,
            issuer=self.name,
            subject_public_key=subject_public_key,
            serial_number=serial_number,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        signature = signatures.sign(tbs, self._key_pair.private_key)

        if validity_days < 0:
            logger.warning(
                f"Issued already-expired certificate for '{subject}' "
                f"(validity_days={validity_days})"
            )
        else:
            logger.info(
                f"Issued certificate {serial_number} for '{subject}' "
                f"valid for {validity_days} days"
            )

        return Certificate(
            subject=subject,
            issuer=self.name,
            subject_public_key=subject_public_key,
            serial_number=serial_number,
            issued_at=issued_at,
            expires_at=expires_at,
            signature=signature,
            issuer_public_key=self._key_pair.public_key,
        )

    def enroll(
        self, principal: "Principal", validity_days: Optional[int] = None
    ) -> "Principal":
        """Issue a certificate for a principal and return the bound principal.

        Args:
            principal: Uncertified principal
            validity_days: Days until expiry (default: authority default)

        Returns:
            New Principal holding the issued certificate

        Raises:
            CertificateAlreadyBound: If the principal already has a certificate
        """
        certificate = self.issue_certificate(
            principal.name, principal.public_key, validity_days
        )
        return principal.with_certificate(certificate)

    def __repr__(self) -> str:
        return f"CertificateAuthority(name={self.name!r})"
