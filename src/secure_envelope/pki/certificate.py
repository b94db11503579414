"""Identity certificates binding a principal name to an RSA public key.

A certificate is signed by its issuing authority over a canonical
serialization of the bound fields. The same serialization is rebuilt at
validation time, so field order and timestamp formatting must stay stable
between issuance and verification.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from secure_envelope.crypto import hashing, signatures
from secure_envelope.models.results import CertificateValidationResult
from secure_envelope.utils.encoding import b64decode, b64encode, format_timestamp, parse_timestamp
from secure_envelope.utils.exceptions import MalformedCertificate

logger = logging.getLogger(__name__)

SERIAL_NUMBER_HEX_LENGTH = 32  # 128 bits

ERROR_EXPIRED = "Certificate expired"
ERROR_NOT_YET_VALID = "Certificate not yet valid"
ERROR_INVALID_SIGNATURE = "Invalid certificate signature"


def canonical_serialization(
    subject: str,
    issuer: str,
    subject_public_key: str,
    serial_number: str,
    issued_at: datetime,
    expires_at: datetime,
) -> bytes:
    """Build the to-be-signed bytes for a certificate.

    Compact JSON with a fixed key order and millisecond UTC timestamps.

    Returns:
        UTF-8 encoded canonical form
    """
    tbs = {
        "subject": subject,
        "issuer": issuer,
        "subjectPublicKey": subject_public_key,
        "serialNumber": serial_number,
        "issuedAt": format_timestamp(issued_at),
        "expiresAt": format_timestamp(expires_at),
    }
    return json.dumps(tbs, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class CertificateRecord(BaseModel):
    """Wire shape of a serialized certificate.

    Validates field presence and basic shape before a Certificate is built.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    subject: str = Field(..., min_length=1)
    issuer: str = Field(..., min_length=1)
    subject_public_key: str = Field(..., alias="subjectPublicKey", min_length=1)
    serial_number: str = Field(..., alias="serialNumber")
    issued_at: str = Field(..., alias="issuedAt")
    expires_at: str = Field(..., alias="expiresAt")
    signature: str = Field(..., min_length=1)
    issuer_public_key: str = Field(..., alias="issuerPublicKey", min_length=1)

    @field_validator("serial_number")
    @classmethod
    def validate_serial_number(cls, v: str) -> str:
        """Validate serial number is 32 lowercase hex characters."""
        if len(v) != SERIAL_NUMBER_HEX_LENGTH or any(
            c not in "0123456789abcdef" for c in v
        ):
            raise ValueError(
                f"Invalid serial number: {v!r}. "
                f"Must be {SERIAL_NUMBER_HEX_LENGTH} lowercase hex characters"
            )
        return v


@dataclass(frozen=True)
class Certificate:
    """Signed identity binding issued by a CertificateAuthority.

    Attributes:
        subject: Name of the certificate holder
        issuer: Name of the issuing authority
        subject_public_key: Holder's PEM public key
        serial_number: 128-bit random serial as 32 hex characters
        issued_at: Start of validity (aware UTC, millisecond precision)
        expires_at: End of validity (aware UTC, millisecond precision)
        signature: Issuer's signature over the canonical serialization
        issuer_public_key: Issuer's PEM public key, embedded so the
            certificate can be checked without a separate trust store

    Example:
        >>> ca = CertificateAuthority("Academic CA")
        >>> cert = ca.issue_certificate("Alice", alice_keys.public_key)
        >>> cert.validate().valid
        True
    """

    subject: str
    issuer: str
    subject_public_key: str = field(repr=False)
    serial_number: str
    issued_at: datetime
    expires_at: datetime
    signature: bytes = field(repr=False)
    issuer_public_key: str = field(repr=False)

    def canonical_bytes(self) -> bytes:
        """Return the canonical to-be-signed serialization of this certificate."""
        return canonical_serialization(
            subject=self.subject,
            issuer=self.issuer,
            subject_public_key=self.subject_public_key,
            serial_number=self.serial_number,
            issued_at=self.issued_at,
            expires_at=self.expires_at,
        )

    def validate(
        self,
        at_time: Optional[datetime] = None,
        warning_days: int = 0,
    ) -> CertificateValidationResult:
        """Validate validity period and issuer signature.

        All checks run; every applicable error is reported, not just the
        first one.

        Args:
            at_time: Moment to check validity at (default: now). Naive values
                are treated as UTC.
            warning_days: Warn (without failing) when the certificate expires
                within this many days

        Returns:
            CertificateValidationResult with valid flag, errors and warnings
        """
        if at_time is None:
            at_time = datetime.now(timezone.utc)
        elif at_time.tzinfo is None:
            at_time = at_time.replace(tzinfo=timezone.utc)

        errors = []
        warnings = []

        if at_time > self.expires_at:
            errors.append(ERROR_EXPIRED)

        if at_time < self.issued_at:
            errors.append(ERROR_NOT_YET_VALID)

        if not signatures.verify(
            self.canonical_bytes(), self.signature, self.issuer_public_key
        ):
            errors.append(ERROR_INVALID_SIGNATURE)

        if warning_days > 0 and self.issued_at <= at_time <= self.expires_at:
            remaining = self.expires_at - at_time
            if remaining < timedelta(days=warning_days):
                warnings.append(
                    f"Certificate expires in {remaining.days} days "
                    f"(expires: {self.expires_at.strftime('%Y-%m-%d')})"
                )
                logger.warning(
                    f"Certificate for '{self.subject}' expiring soon: "
                    f"{remaining.days} days remaining"
                )

        if errors:
            logger.debug(
                f"Certificate {self.serial_number} for '{self.subject}' invalid: "
                f"{', '.join(errors)}"
            )

        return CertificateValidationResult(
            valid=not errors, errors=errors, warnings=warnings
        )

    def fingerprint(self) -> str:
        """SHA-256 fingerprint over canonical bytes and signature, colon-grouped.

        Example:
            >>> cert.fingerprint()
            '3f:a2:...:9c'
        """
        digest = hashing.digest_hex(self.canonical_bytes() + self.signature)
        return ":".join(digest[i:i + 2] for i in range(0, len(digest), 2))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict (signature as base64)."""
        return {
            "subject": self.subject,
            "issuer": self.issuer,
            "subjectPublicKey": self.subject_public_key,
            "serialNumber": self.serial_number,
            "issuedAt": format_timestamp(self.issued_at),
            "expiresAt": format_timestamp(self.expires_at),
            "signature": b64encode(self.signature),
            "issuerPublicKey": self.issuer_public_key,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Any) -> "Certificate":
        """Rebuild a certificate from its serialized dict.

        Args:
            data: Dict produced by to_dict()

        Returns:
            Certificate equal to the serialized one

        Raises:
            MalformedCertificate: If fields are missing or have invalid values
        """
        if not isinstance(data, dict):
            raise MalformedCertificate(
                f"Certificate must be an object, got {type(data).__name__}"
            )

        try:
            record = CertificateRecord.model_validate(data)
        except ValidationError as e:
            raise MalformedCertificate(f"Invalid certificate fields:\n{e}") from e

        try:
            issued_at = parse_timestamp(record.issued_at)
            expires_at = parse_timestamp(record.expires_at)
        except ValueError as e:
            raise MalformedCertificate(f"Invalid certificate timestamp: {e}") from e

        try:
            signature = b64decode(record.signature)
        except ValueError as e:
            raise MalformedCertificate(f"Invalid certificate signature encoding: {e}") from e

        return cls(
            subject=record.subject,
            issuer=record.issuer,
            subject_public_key=record.subject_public_key,
            serial_number=record.serial_number,
            issued_at=issued_at,
            expires_at=expires_at,
            signature=signature,
            issuer_public_key=record.issuer_public_key,
        )

    @classmethod
    def from_json(cls, text: str) -> "Certificate":
        """Rebuild a certificate from its JSON text.

        Raises:
            MalformedCertificate: If text is not JSON or fields are invalid
        """
        try:
            data = json.loads(text)
        except (TypeError, json.JSONDecodeError) as e:
            raise MalformedCertificate(f"Certificate is not valid JSON: {e}") from e
        return cls.from_dict(data)
