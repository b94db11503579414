"""Result models for certificate validation and envelope reception.

These are first-class outcomes: tampered or expired input produces a result
with errors, not an exception.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CertificateValidationResult:
    """Result of certificate validation.

    Attributes:
        valid: True if certificate passes all validation checks
        errors: List of validation errors (blocking issues)
        warnings: List of validation warnings (non-blocking concerns)
    """

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class ValidationFlags:
    """Per-stage outcome of the receive pipeline.

    A flag stays False for every stage that was not reached.
    """

    certificate_valid: bool = False
    signature_valid: bool = False
    integrity_valid: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            "certificateValid": self.certificate_valid,
            "signatureValid": self.signature_valid,
            "integrityValid": self.integrity_valid,
        }


@dataclass
class ReceiveResult:
    """Structured outcome of receiving one envelope.

    Attributes:
        success: True only when every validation stage passed
        message: Decrypted plaintext, or None unless success is True
        validations: Per-stage validation flags
        errors: Human-readable failure descriptions
    """

    success: bool = False
    message: Optional[str] = None
    validations: ValidationFlags = field(default_factory=ValidationFlags)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready shape handed to transport collaborators.

        Example:
            >>> ReceiveResult().to_dict()["validations"]["signatureValid"]
            False
        """
        return {
            "success": self.success,
            "message": self.message,
            "validations": self.validations.to_dict(),
            "errors": list(self.errors),
        }
