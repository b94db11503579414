"""Trust domain: one certificate authority plus its enrolled principals.

A TrustDomain is the transport-side state a demo or service needs in order
to route envelopes between named parties. It replaces process-wide
singletons with an explicit object that can be created, queried and reset.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from secure_envelope.config.manager import get_authority_config
from secure_envelope.logging_audit.audit import DOMAIN_RESET, log_audit_event
from secure_envelope.messaging.envelope import Envelope
from secure_envelope.messaging.principal import Principal
from secure_envelope.models.results import ReceiveResult
from secure_envelope.pki.authority import (
    DEFAULT_CA_NAME,
    DEFAULT_VALIDITY_DAYS,
    CertificateAuthority,
)
from secure_envelope.utils.encoding import format_timestamp
from secure_envelope.utils.exceptions import UnknownPrincipal

logger = logging.getLogger(__name__)

DEFAULT_PRINCIPALS = ("Alice", "Bob")


class TrustDomain:
    """Registry of certified principals issued by a single CA.

    Attributes:
        authority: Certificate authority that issued every certificate
        validity_days: Validity period used for enrollment and reset
        expiry_warning_days: Threshold used by describe() to flag
            certificates close to expiry

    Example:
        >>> domain = TrustDomain.create(["Alice", "Bob"])
        >>> envelope = domain.send("Alice", "Bob", "hello")
        >>> domain.deliver(envelope).success
        True
    """

    def __init__(
        self,
        authority: CertificateAuthority,
        principals: Optional[Dict[str, Principal]] = None,
        validity_days: int = DEFAULT_VALIDITY_DAYS,
        expiry_warning_days: int = 0,
    ) -> None:
        self.authority = authority
        self.validity_days = validity_days
        self.expiry_warning_days = expiry_warning_days
        self._principals: Dict[str, Principal] = dict(principals or {})

    @classmethod
    def create(
        cls,
        principal_names: Iterable[str] = DEFAULT_PRINCIPALS,
        ca_name: str = DEFAULT_CA_NAME,
        validity_days: int = DEFAULT_VALIDITY_DAYS,
        expiry_warning_days: int = 0,
    ) -> "TrustDomain":
        """Create a CA and enroll a fresh principal for each name.

        Args:
            principal_names: Names to enroll; duplicates are rejected
            ca_name: Issuer name of the new CA
            validity_days: Certificate validity period in days
            expiry_warning_days: Threshold for expiring-soon warnings

        Returns:
            Initialized TrustDomain

        Raises:
            ValueError: If a name is empty or repeated, or validity_days is 0
        """
        authority = CertificateAuthority(name=ca_name, default_validity_days=validity_days)
        domain = cls(
            authority,
            validity_days=validity_days,
            expiry_warning_days=expiry_warning_days,
        )
        for name in principal_names:
            domain.enroll(name)
        logger.info(
            f"Trust domain '{ca_name}' ready with principals: {', '.join(domain.names)}"
        )
        return domain

    @classmethod
    def from_config(cls, config: Any) -> "TrustDomain":
        """Create a trust domain from a loaded Config."""
        authority_config = get_authority_config(config)
        return cls.create(
            principal_names=config.principals,
            ca_name=authority_config.ca_name,
            validity_days=authority_config.validity_days,
            expiry_warning_days=authority_config.expiry_warning_days,
        )

    @property
    def names(self) -> List[str]:
        return list(self._principals)

    def __contains__(self, name: object) -> bool:
        return name in self._principals

    def __len__(self) -> int:
        return len(self._principals)

    def enroll(self, name: str, validity_days: Optional[int] = None) -> Principal:
        """Generate keys for name, certify them and register the principal.

        Args:
            name: New principal name
            validity_days: Override of the domain validity period; a negative
                value yields an already-expired certificate

        Returns:
            The certified principal

        Raises:
            ValueError: If name is empty or already registered
        """
        if name in self._principals:
            raise ValueError(f"Principal '{name}' is already enrolled")
        principal = self.authority.enroll(
            Principal.generate(name),
            validity_days=validity_days if validity_days is not None else self.validity_days,
        )
        self._principals[name] = principal
        return principal

    def register(self, principal: Principal) -> None:
        """Register an externally created principal (certified or not).

        Raises:
            ValueError: If the name is already registered
        """
        if principal.name in self._principals:
            raise ValueError(f"Principal '{principal.name}' is already enrolled")
        self._principals[principal.name] = principal

    def principal(self, name: str) -> Principal:
        """Look up a registered principal.

        Raises:
            UnknownPrincipal: If name is not registered
        """
        try:
            return self._principals[name]
        except KeyError:
            raise UnknownPrincipal(
                f"Unknown principal: {name}. "
                f"Known principals: {', '.join(self._principals) or '(none)'}"
            ) from None

    def send(self, sender: str, recipient: str, message: str) -> Envelope:
        """Send message from one registered principal to another.

        Raises:
            UnknownPrincipal: If either name is not registered
            MissingCertificate: If the sender has no certificate
            RecipientMissingCertificate: If the recipient has no certificate
        """
        return self.principal(sender).send_secure_message(message, self.principal(recipient))

    def deliver(self, envelope: Union[Envelope, Dict[str, Any]]) -> ReceiveResult:
        """Route an envelope to the principal named in its ``to`` field.

        Routing needs a well-formed envelope and a known recipient; everything
        after that is reported in the returned ReceiveResult.

        Raises:
            MalformedEnvelope: If a dict envelope cannot be parsed for routing
            UnknownPrincipal: If the recipient is not registered
        """
        if not isinstance(envelope, Envelope):
            envelope = Envelope.from_dict(envelope)
        return self.principal(envelope.recipient).receive_secure_message(envelope)

    def reset(self) -> None:
        """Replace the CA and every principal's key material and certificate.

        Principal names are kept, and so is each principal's certified state:
        certified principals are re-issued a certificate with their previous
        validity period, uncertified ones only get new keys. Anything sent
        before the reset can no longer be opened or verified against the new
        keys.
        """
        previous = self._principals
        names = list(previous)
        self.authority = CertificateAuthority(
            name=self.authority.name,
            default_validity_days=self.validity_days,
        )
        self._principals = {}
        for name, principal in previous.items():
            certificate = principal.certificate
            if certificate is None:
                self.register(Principal.generate(name))
            else:
                self.enroll(
                    name,
                    validity_days=(certificate.expires_at - certificate.issued_at).days,
                )
        log_audit_event(DOMAIN_RESET, {
            "status": "success",
            "ca_name": self.authority.name,
            "principals": ",".join(names),
        })

    def describe(self) -> List[Dict[str, Any]]:
        """Summarize each principal's public certificate details.

        Returns:
            One dict per principal with name, certified flag and, when
            certified, serial number, issuer, validity window, fingerprint,
            validation status and warnings
        """
        summaries = []
        for name, principal in self._principals.items():
            summary: Dict[str, Any] = {"name": name, "certified": principal.is_certified}
            certificate = principal.certificate
            if certificate is not None:
                validation = certificate.validate(warning_days=self.expiry_warning_days)
                summary.update({
                    "serialNumber": certificate.serial_number,
                    "issuer": certificate.issuer,
                    "issuedAt": format_timestamp(certificate.issued_at),
                    "expiresAt": format_timestamp(certificate.expires_at),
                    "fingerprint": certificate.fingerprint(),
                    "valid": validation.valid,
                    "errors": validation.errors,
                    "warnings": validation.warnings,
                })
            summaries.append(summary)
        return summaries

    def __repr__(self) -> str:
        return f"TrustDomain(ca={self.authority.name!r}, principals={self.names!r})"
