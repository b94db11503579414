"""Principals: named parties that send and receive secure envelopes.

Send (hybrid encryption, then sign):
1. SHA-256 digest of the plaintext
2. Fresh one-time AES-256 key
3. AES-256-CBC encrypt the plaintext
4. RSA-OAEP encrypt the AES key under the recipient's public key
5. Sign the ciphertext bytes with the sender's private key
6. Assemble the envelope with the sender's serialized certificate

Receive (staged, stops at the first failing stage):
1. Deserialize and validate the sender certificate
2. Verify the signature over the ciphertext, before any decryption
3. RSA-OAEP decrypt the AES key with the own private key
4. AES-256-CBC decrypt the ciphertext
5. Check the plaintext digest against the envelope hash

Validation failures are reported in the ReceiveResult; the receive path
never raises.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Union

from secure_envelope.crypto import asymmetric, hashing, signatures, symmetric
from secure_envelope.logging_audit.audit import (
    ENVELOPE_ACCEPTED,
    ENVELOPE_REJECTED,
    ENVELOPE_SENT,
    log_audit_event,
)
from secure_envelope.messaging.envelope import Envelope
from secure_envelope.models.keys import KeyPair
from secure_envelope.models.results import ReceiveResult
from secure_envelope.pki.certificate import Certificate
from secure_envelope.utils.encoding import b64decode, b64encode, format_timestamp, utc_now
from secure_envelope.utils.exceptions import (
    CertificateAlreadyBound,
    CertificateMismatch,
    MissingCertificate,
    RecipientMissingCertificate,
)

logger = logging.getLogger(__name__)

ERROR_SIGNATURE_INVALID = "Signature invalid - message may have been tampered with"
ERROR_HASH_MISMATCH = "Hash mismatch - integrity compromised"
ERROR_PROCESSING_PREFIX = "Error processing message"


@dataclass(frozen=True)
class Principal:
    """A named party holding an RSA key pair and, once enrolled, a certificate.

    Principals are immutable. Enrollment produces a new Principal through
    with_certificate() (or CertificateAuthority.enroll()) instead of
    mutating an existing one, so a principal shared across threads never
    changes identity underneath a send or receive.

    Attributes:
        name: Identity name, unique within a trust domain
        key_pair: RSA key pair generated at construction
        certificate: Certificate bound at enrollment, or None

    Example:
        >>> ca = CertificateAuthority()
        >>> alice = ca.enroll(Principal.generate("Alice"))
        >>> bob = ca.enroll(Principal.generate("Bob"))
        >>> envelope = alice.send_secure_message("hello", bob)
        >>> bob.receive_secure_message(envelope).message
        'hello'
    """

    name: str
    key_pair: KeyPair = field(repr=False)
    certificate: Optional[Certificate] = None

    @classmethod
    def generate(cls, name: str) -> "Principal":
        """Create an uncertified principal with a fresh key pair.

        Raises:
            ValueError: If name is empty
        """
        if not name:
            raise ValueError("Principal name must not be empty")
        logger.debug(f"Generating key pair for principal '{name}'")
        return cls(name=name, key_pair=asymmetric.generate_key_pair())

    @property
    def public_key(self) -> str:
        return self.key_pair.public_key

    @property
    def is_certified(self) -> bool:
        return self.certificate is not None

    def with_certificate(self, certificate: Certificate) -> "Principal":
        """Return a copy of this principal bound to a certificate.

        Args:
            certificate: Certificate issued for this principal's name and key

        Returns:
            New Principal holding the certificate

        Raises:
            CertificateAlreadyBound: If this principal already has a certificate
            CertificateMismatch: If the certificate subject or public key does
                not belong to this principal
        """
        if self.certificate is not None:
            raise CertificateAlreadyBound(
                f"Principal '{self.name}' already holds certificate "
                f"{self.certificate.serial_number}"
            )
        if certificate.subject != self.name:
            raise CertificateMismatch(
                f"Certificate subject '{certificate.subject}' does not match "
                f"principal '{self.name}'"
            )
        if certificate.subject_public_key != self.public_key:
            raise CertificateMismatch(
                f"Certificate {certificate.serial_number} was issued for a "
                f"different public key than principal '{self.name}' holds"
            )
        return replace(self, certificate=certificate)

    def send_secure_message(self, plaintext: str, recipient: "Principal") -> Envelope:
        """Build a secure envelope carrying plaintext to recipient.

        Pure computation over the two principals' state; no I/O.

        Args:
            plaintext: Message text
            recipient: Certified receiving principal

        Returns:
            Envelope ready for transport

        Raises:
            MissingCertificate: If this principal has no certificate
            RecipientMissingCertificate: If recipient has no certificate
            TypeError: If plaintext is not a string
        """
        # Preconditions come before any key material is generated or used
        if self.certificate is None:
            raise MissingCertificate(self.name)
        if recipient.certificate is None:
            raise RecipientMissingCertificate(recipient.name)
        if not isinstance(plaintext, str):
            raise TypeError(f"plaintext must be str, got {type(plaintext).__name__}")

        message_hash = hashing.digest(plaintext)
        symmetric_key = symmetric.generate_key()
        encrypted = symmetric.encrypt(plaintext, symmetric_key)
        encrypted_key = asymmetric.encrypt(symmetric_key, recipient.public_key)
        signature = signatures.sign(encrypted.ciphertext, self.key_pair.private_key)

        envelope = Envelope(
            sender=self.name,
            recipient=recipient.name,
            ciphertext=b64encode(encrypted.ciphertext),
            iv=b64encode(encrypted.iv),
            encrypted_symmetric_key=b64encode(encrypted_key),
            signature=b64encode(signature),
            message_hash=b64encode(message_hash),
            sender_certificate=self.certificate.to_dict(),
            timestamp=format_timestamp(utc_now()),
        )

        log_audit_event(ENVELOPE_SENT, {
            "status": "success",
            "sender": self.name,
            "recipient": recipient.name,
            "ciphertext_size": len(encrypted.ciphertext),
        })
        return envelope

    def receive_secure_message(
        self, envelope: Union[Envelope, Dict[str, Any]]
    ) -> ReceiveResult:
        """Validate and open an envelope addressed to this principal.

        Args:
            envelope: Envelope model or its wire dict

        Returns:
            ReceiveResult; message is set only when every stage passed
        """
        result = ReceiveResult()
        stage = "parse"
        sender = None

        try:
            if not isinstance(envelope, Envelope):
                envelope = Envelope.from_dict(envelope)
            sender = envelope.sender
            if envelope.recipient != self.name:
                logger.warning(
                    f"Envelope addressed to '{envelope.recipient}' received by '{self.name}'"
                )

            stage = "certificate"
            sender_certificate = Certificate.from_dict(envelope.sender_certificate)
            certificate_validation = sender_certificate.validate()
            result.validations.certificate_valid = certificate_validation.valid
            if not certificate_validation.valid:
                result.errors.extend(certificate_validation.errors)
                return self._finish(result, sender, stage)

            if sender_certificate.subject != envelope.sender:
                logger.warning(
                    f"Envelope sender '{envelope.sender}' differs from certificate "
                    f"subject '{sender_certificate.subject}'"
                )

            stage = "signature"
            try:
                ciphertext = b64decode(envelope.ciphertext)
                signature = b64decode(envelope.signature)
            except ValueError as e:
                # Undecodable signed fields cannot carry a valid signature
                logger.debug(f"Signed envelope field is not base64: {e}")
                result.validations.signature_valid = False
            else:
                result.validations.signature_valid = signatures.verify(
                    ciphertext, signature, sender_certificate.subject_public_key
                )
            if not result.validations.signature_valid:
                result.errors.append(ERROR_SIGNATURE_INVALID)
                return self._finish(result, sender, stage)

            stage = "decryption"
            symmetric_key = asymmetric.decrypt(
                b64decode(envelope.encrypted_symmetric_key), self.key_pair.private_key
            )
            plaintext = symmetric.decrypt(ciphertext, symmetric_key, b64decode(envelope.iv))

            stage = "integrity"
            result.validations.integrity_valid = hashing.verify(
                plaintext, b64decode(envelope.message_hash)
            )
            if not result.validations.integrity_valid:
                result.errors.append(ERROR_HASH_MISMATCH)
                return self._finish(result, sender, stage)

            result.message = plaintext.decode("utf-8")
            result.success = True
        except Exception as e:
            # Tampered or malformed input must come back as a result, never a crash
            logger.debug(f"Envelope processing failed at stage '{stage}'", exc_info=True)
            result.message = None
            result.success = False
            result.errors.append(f"{ERROR_PROCESSING_PREFIX}: {e}")

        return self._finish(result, sender, stage)

    def _finish(
        self, result: ReceiveResult, sender: Optional[str], stage: str
    ) -> ReceiveResult:
        if result.success:
            log_audit_event(ENVELOPE_ACCEPTED, {
                "status": "success",
                "sender": sender,
                "recipient": self.name,
            })
        else:
            log_audit_event(ENVELOPE_REJECTED, {
                "status": "failure",
                "sender": sender,
                "recipient": self.name,
                "stage": stage,
                "error_message": "; ".join(result.errors),
            })
        return result
