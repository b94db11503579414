"""Unit tests for the AES-256-CBC symmetric cipher service."""

import pytest

from secure_envelope.crypto import symmetric
from secure_envelope.utils.exceptions import (
    InvalidCiphertextLength,
    InvalidIVLength,
    InvalidKeyLength,
    ParameterError,
)


class TestKeyGeneration:
    """Test symmetric key generation."""

    def test_key_length(self):
        """Test generated keys are 32 bytes."""
        assert len(symmetric.generate_key()) == symmetric.KEY_LENGTH

    def test_keys_are_random(self):
        """Test two generated keys differ."""
        assert symmetric.generate_key() != symmetric.generate_key()


class TestEncryptDecrypt:
    """Test encryption and decryption."""

    def test_round_trip_text(self):
        """Test text survives encryption and decryption."""
        key = symmetric.generate_key()
        result = symmetric.encrypt("Olá Bob! Esta é uma mensagem secreta. 🔐", key)

        plaintext = symmetric.decrypt(result.ciphertext, key, result.iv)

        assert plaintext.decode("utf-8") == "Olá Bob! Esta é uma mensagem secreta. 🔐"

    def test_round_trip_empty(self):
        """Test empty plaintext encrypts to one padding block."""
        key = symmetric.generate_key()
        result = symmetric.encrypt(b"", key)

        assert len(result.ciphertext) == 16
        assert symmetric.decrypt(result.ciphertext, key, result.iv) == b""

    def test_iv_length(self):
        """Test each encryption returns a 16-byte IV."""
        result = symmetric.encrypt("data", symmetric.generate_key())
        assert len(result.iv) == symmetric.IV_LENGTH

    def test_ciphertext_is_block_aligned(self):
        """Test ciphertext length is a multiple of the block size."""
        key = symmetric.generate_key()
        for size in (1, 15, 16, 17, 100):
            result = symmetric.encrypt(b"a" * size, key)
            assert len(result.ciphertext) % 16 == 0
            assert len(result.ciphertext) > size

    def test_encryption_is_not_deterministic(self):
        """Test the same plaintext and key give different IV and ciphertext."""
        key = symmetric.generate_key()

        first = symmetric.encrypt("same message", key)
        second = symmetric.encrypt("same message", key)

        assert first.iv != second.iv
        assert first.ciphertext != second.ciphertext

    def test_wrong_key_does_not_raise(self):
        """Test decrypting with another key returns bytes other than the plaintext."""
        result = symmetric.encrypt("secret message", symmetric.generate_key())

        plaintext = symmetric.decrypt(result.ciphertext, symmetric.generate_key(), result.iv)

        assert plaintext != b"secret message"

    def test_wrong_iv_corrupts_first_block(self):
        """Test decrypting with another IV does not return the plaintext."""
        key = symmetric.generate_key()
        result = symmetric.encrypt("0123456789abcdef-second-block", key)

        plaintext = symmetric.decrypt(result.ciphertext, key, bytes(16))

        assert plaintext != b"0123456789abcdef-second-block"


class TestParameterValidation:
    """Test key, IV and ciphertext length checks."""

    def test_encrypt_short_key(self):
        """Test encryption rejects a 16-byte key."""
        with pytest.raises(InvalidKeyLength) as exc_info:
            symmetric.encrypt("data", b"k" * 16)

        assert exc_info.value.expected == 32
        assert exc_info.value.actual == 16

    def test_decrypt_long_key(self):
        """Test decryption rejects a 33-byte key."""
        with pytest.raises(InvalidKeyLength):
            symmetric.decrypt(b"\x00" * 16, b"k" * 33, b"\x00" * 16)

    def test_decrypt_bad_iv(self):
        """Test decryption rejects a 12-byte IV."""
        with pytest.raises(InvalidIVLength):
            symmetric.decrypt(b"\x00" * 16, symmetric.generate_key(), b"\x00" * 12)

    def test_decrypt_empty_ciphertext(self):
        """Test decryption rejects empty ciphertext."""
        with pytest.raises(InvalidCiphertextLength):
            symmetric.decrypt(b"", symmetric.generate_key(), b"\x00" * 16)

    def test_decrypt_unaligned_ciphertext(self):
        """Test decryption rejects ciphertext that is not block aligned."""
        with pytest.raises(InvalidCiphertextLength):
            symmetric.decrypt(b"\x00" * 17, symmetric.generate_key(), b"\x00" * 16)

    def test_errors_are_parameter_errors(self):
        """Test all length errors share the ParameterError base."""
        assert issubclass(InvalidKeyLength, ParameterError)
        assert issubclass(InvalidIVLength, ParameterError)
        assert issubclass(InvalidCiphertextLength, ParameterError)
