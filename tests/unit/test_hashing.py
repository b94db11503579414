"""Unit tests for the SHA-256 hashing service."""

from secure_envelope.crypto import hashing


class TestDigest:
    """Test digest computation."""

    def test_digest_known_vector(self):
        """Test digest of "hello" matches the SHA-256 reference value."""
        assert hashing.digest_hex("hello") == (
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )

    def test_digest_size(self):
        """Test digest is always 32 bytes."""
        assert len(hashing.digest(b"")) == hashing.DIGEST_SIZE
        assert len(hashing.digest("x" * 10000)) == hashing.DIGEST_SIZE

    def test_text_and_utf8_bytes_agree(self):
        """Test text input is hashed as its UTF-8 encoding."""
        text = "Olá Bob! 🔐"
        assert hashing.digest(text) == hashing.digest(text.encode("utf-8"))

    def test_different_content_different_digest(self):
        """Test a single changed character changes the digest."""
        assert hashing.digest("message") != hashing.digest("messagf")


class TestVerify:
    """Test digest verification."""

    def test_verify_raw_digest(self):
        """Test verification against a raw 32-byte digest."""
        expected = hashing.digest("payload")
        assert hashing.verify("payload", expected) is True

    def test_verify_hex_digest(self):
        """Test verification against the hex form of the digest."""
        expected = hashing.digest_hex("payload")
        assert hashing.verify("payload", expected) is True

    def test_verify_mismatch(self):
        """Test verification fails for different content."""
        expected = hashing.digest("payload")
        assert hashing.verify("payload2", expected) is False

    def test_verify_invalid_hex_returns_false(self):
        """Test malformed hex is a mismatch, not an error."""
        assert hashing.verify("payload", "not-hex!") is False

    def test_verify_truncated_digest(self):
        """Test a truncated digest does not match."""
        expected = hashing.digest("payload")[:16]
        assert hashing.verify("payload", expected) is False
