"""Unit tests for the trust domain."""

import logging

import pytest

from secure_envelope.config.schema import AuthorityConfig, Config
from secure_envelope.messaging import Principal, TrustDomain, tamper
from secure_envelope.pki import ERROR_EXPIRED, CertificateAuthority
from secure_envelope.utils.exceptions import (
    MalformedEnvelope,
    MissingCertificate,
    UnknownPrincipal,
)


@pytest.fixture(scope="module")
def domain() -> TrustDomain:
    """Return a domain with Alice and Bob shared by the module."""
    return TrustDomain.create(["Alice", "Bob"], ca_name="Test CA")


class TestCreate:
    """Test domain creation."""

    def test_default_principals(self, domain):
        """Test both principals are enrolled by the domain CA."""
        assert domain.names == ["Alice", "Bob"]
        assert len(domain) == 2
        assert "Alice" in domain
        for name in domain.names:
            principal = domain.principal(name)
            assert principal.certificate.issuer == "Test CA"
            assert principal.certificate.issuer_public_key == domain.authority.public_key

    def test_duplicate_names_rejected(self):
        """Test the same name cannot be enrolled twice."""
        with pytest.raises(ValueError):
            TrustDomain.create(["Alice", "Alice"])

    def test_from_config(self):
        """Test creation from a Config instance."""
        config = Config(
            authority=AuthorityConfig(ca_name="Config CA", validity_days=10),
            principals=["Carol"],
        )

        domain = TrustDomain.from_config(config)

        assert domain.names == ["Carol"]
        assert domain.authority.name == "Config CA"
        certificate = domain.principal("Carol").certificate
        assert (certificate.expires_at - certificate.issued_at).days == 10


class TestLookupAndRouting:
    """Test principal lookup, send and deliver."""

    def test_unknown_principal(self, domain):
        """Test lookup of an unregistered name raises UnknownPrincipal."""
        with pytest.raises(UnknownPrincipal) as exc_info:
            domain.principal("Eve")

        assert "Eve" in str(exc_info.value)
        assert "Alice" in str(exc_info.value)

    def test_send_and_deliver(self, domain):
        """Test both directions of the exchange succeed."""
        to_bob = domain.deliver(domain.send("Alice", "Bob", "Hi Bob"))
        to_alice = domain.deliver(domain.send("Bob", "Alice", "Hi Alice"))

        assert to_bob.success is True
        assert to_bob.message == "Hi Bob"
        assert to_alice.message == "Hi Alice"

    def test_deliver_wire_dict(self, domain):
        """Test delivery accepts the JSON-ready dict."""
        envelope = domain.send("Alice", "Bob", "dict transport")
        assert domain.deliver(envelope.to_dict()).message == "dict transport"

    def test_deliver_unknown_recipient(self, domain):
        """Test routing to an unregistered recipient raises UnknownPrincipal."""
        envelope = tamper(domain.send("Alice", "Bob", "x"), "to", "Eve")

        with pytest.raises(UnknownPrincipal):
            domain.deliver(envelope)

    def test_deliver_malformed_dict(self, domain):
        """Test an unroutable dict raises MalformedEnvelope."""
        with pytest.raises(MalformedEnvelope):
            domain.deliver({"to": "Bob"})

    def test_send_unknown_sender(self, domain):
        """Test sending from an unregistered name raises UnknownPrincipal."""
        with pytest.raises(UnknownPrincipal):
            domain.send("Eve", "Bob", "x")


class TestEnrollment:
    """Test adding principals to an existing domain."""

    def test_enroll_expired(self):
        """Test a principal enrolled with a negative period is rejected on receipt."""
        domain = TrustDomain.create(["Bob"])
        domain.enroll("Charlie", validity_days=-1)

        result = domain.deliver(domain.send("Charlie", "Bob", "expired"))

        assert result.success is False
        assert result.errors == [ERROR_EXPIRED]

    def test_enroll_existing_name(self, domain):
        """Test enrolling a registered name raises ValueError."""
        with pytest.raises(ValueError):
            domain.enroll("Alice")

    def test_register_uncertified(self):
        """Test an uncertified principal can be registered but not send."""
        domain = TrustDomain.create(["Bob"])
        domain.register(Principal.generate("Charlie"))

        with pytest.raises(MissingCertificate):
            domain.send("Charlie", "Bob", "hi")


class TestResetAndDescribe:
    """Test reset and public summaries."""

    def test_reset_replaces_keys(self, caplog):
        """Test reset issues new keys so old envelopes no longer open."""
        domain = TrustDomain.create(["Alice", "Bob"])
        old_ca_key = domain.authority.public_key
        old_bob_key = domain.principal("Bob").public_key
        envelope = domain.send("Alice", "Bob", "before reset")

        with caplog.at_level(logging.INFO, logger="secure_envelope"):
            domain.reset()

        assert domain.names == ["Alice", "Bob"]
        assert domain.authority.public_key != old_ca_key
        assert domain.principal("Bob").public_key != old_bob_key
        assert domain.deliver(envelope).success is False
        assert domain.deliver(domain.send("Alice", "Bob", "after reset")).success is True
        assert "AUDIT [DOMAIN_RESET]" in caplog.text

    def test_reset_keeps_uncertified_principals_uncertified(self):
        """Test reset gives new keys but no certificate to uncertified principals."""
        domain = TrustDomain.create(["Bob"])
        charlie = Principal.generate("Charlie")
        domain.register(charlie)

        domain.reset()

        assert domain.names == ["Bob", "Charlie"]
        assert domain.principal("Charlie").is_certified is False
        assert domain.principal("Charlie").public_key != charlie.public_key
        with pytest.raises(MissingCertificate):
            domain.send("Charlie", "Bob", "hi")

    def test_reset_keeps_validity_period(self):
        """Test a principal enrolled as expired is still expired after reset."""
        domain = TrustDomain.create(["Bob"], validity_days=30)
        domain.enroll("Charlie", validity_days=-1)

        domain.reset()

        bob_cert = domain.principal("Bob").certificate
        assert (bob_cert.expires_at - bob_cert.issued_at).days == 30
        result = domain.deliver(domain.send("Charlie", "Bob", "expired"))
        assert result.errors == [ERROR_EXPIRED]

    def test_describe(self, domain):
        """Test summaries carry public certificate details only."""
        summaries = domain.describe()

        assert [s["name"] for s in summaries] == ["Alice", "Bob"]
        alice = summaries[0]
        assert alice["certified"] is True
        assert alice["issuer"] == "Test CA"
        assert alice["valid"] is True
        assert len(alice["serialNumber"]) == 32
        assert alice["expiresAt"].endswith("Z")
        assert "BEGIN" not in str(summaries)

    def test_describe_expiry_warning(self):
        """Test the domain warning threshold flows into summaries."""
        domain = TrustDomain.create(["Alice"], validity_days=5, expiry_warning_days=30)

        summary = domain.describe()[0]

        assert summary["valid"] is True
        assert len(summary["warnings"]) == 1

    def test_describe_uncertified(self):
        """Test an uncertified principal is summarized without certificate data."""
        authority = CertificateAuthority("Empty CA")
        domain = TrustDomain(authority)
        domain.register(Principal.generate("Charlie"))

        assert domain.describe() == [{"name": "Charlie", "certified": False}]
        assert domain.authority is authority
