"""Unit tests for the envelope record and tamper helper."""

import json

import pytest
from pydantic import ValidationError

from secure_envelope.messaging import Envelope, tamper
from secure_envelope.utils.exceptions import MalformedEnvelope

WIRE_KEYS = [
    "from",
    "to",
    "ciphertext",
    "iv",
    "encryptedSymmetricKey",
    "signature",
    "messageHash",
    "senderCertificate",
    "timestamp",
]


class TestEnvelopeSerialization:
    """Test envelope wire format."""

    def test_to_dict_uses_wire_keys(self, envelope):
        """Test the wire dict uses camelCase and from/to keys."""
        assert list(envelope.to_dict()) == WIRE_KEYS

    def test_json_round_trip(self, envelope):
        """Test to_json/from_json reproduce the envelope."""
        assert Envelope.from_json(envelope.to_json()) == envelope

    def test_to_json_indent(self, envelope):
        """Test indented output is still valid JSON."""
        text = envelope.to_json(indent=2)
        assert "\n" in text
        assert json.loads(text)["from"] == "Alice"

    def test_from_dict_by_field_name(self, envelope):
        """Test the model also accepts Python field names."""
        data = envelope.model_dump()
        assert Envelope.from_dict(data) == envelope

    def test_unknown_keys_ignored(self, envelope):
        """Test extra keys from newer senders are ignored."""
        data = dict(envelope.to_dict(), priority="high")
        assert Envelope.from_dict(data) == envelope

    def test_envelope_is_immutable(self, envelope):
        """Test fields cannot be reassigned."""
        with pytest.raises(ValidationError):
            envelope.ciphertext = "AAAA"


class TestEnvelopeValidation:
    """Test rejection of malformed envelopes."""

    def test_missing_field(self, envelope):
        """Test a missing field raises MalformedEnvelope naming it."""
        data = envelope.to_dict()
        del data["encryptedSymmetricKey"]

        with pytest.raises(MalformedEnvelope) as exc_info:
            Envelope.from_dict(data)

        assert "encryptedSymmetricKey" in str(exc_info.value)

    def test_empty_sender(self, envelope):
        """Test an empty sender name is rejected."""
        data = dict(envelope.to_dict(), **{"from": ""})

        with pytest.raises(MalformedEnvelope):
            Envelope.from_dict(data)

    def test_not_an_object(self):
        """Test a JSON array is rejected."""
        with pytest.raises(MalformedEnvelope):
            Envelope.from_json("[1, 2, 3]")

    def test_not_json(self):
        """Test non-JSON text is rejected."""
        with pytest.raises(MalformedEnvelope):
            Envelope.from_json("not json")


class TestTamper:
    """Test the tamper helper."""

    def test_replaces_single_field(self, envelope):
        """Test only the named field changes."""
        forged = tamper(envelope, "ciphertext", b"tampered message")

        assert forged.ciphertext == "dGFtcGVyZWQgbWVzc2FnZQ=="
        assert forged.signature == envelope.signature
        assert forged.iv == envelope.iv

    def test_original_untouched(self, envelope):
        """Test the source envelope keeps its ciphertext."""
        before = envelope.ciphertext
        tamper(envelope, "ciphertext", b"x")
        assert envelope.ciphertext == before

    def test_string_value_used_verbatim(self, envelope):
        """Test text values are not re-encoded."""
        forged = tamper(envelope, "to", "Mallory")
        assert forged.recipient == "Mallory"

    def test_certificate_copy_is_independent(self, envelope):
        """Test editing the certificate leaves the original certificate dict alone."""
        certificate = dict(envelope.sender_certificate, subject="Mallory")

        forged = tamper(envelope, "senderCertificate", certificate)

        assert forged.sender_certificate["subject"] == "Mallory"
        assert envelope.sender_certificate["subject"] == "Alice"

    def test_unknown_field(self, envelope):
        """Test a field outside the wire format raises ValueError."""
        with pytest.raises(ValueError) as exc_info:
            tamper(envelope, "encrypted_symmetric_key", b"x")

        assert "Unknown envelope field" in str(exc_info.value)
