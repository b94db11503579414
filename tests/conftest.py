"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests). RSA key generation is slow, so key pairs, the
certificate authority and the enrolled principals are created once per
session; they are immutable and safe to share.
"""

import json
import logging
from pathlib import Path
from typing import Generator

import pytest

from secure_envelope.crypto import asymmetric
from secure_envelope.logging_audit import KeyMaterialRedactingFormatter
from secure_envelope.messaging import Envelope, Principal
from secure_envelope.models.keys import KeyPair
from secure_envelope.pki import CertificateAuthority


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def restore_root_handlers() -> Generator[None, None, None]:
    """Remove handlers that a test's configure_logging() call attached."""
    root_logger = logging.getLogger()
    level_before = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, KeyMaterialRedactingFormatter):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level_before)


@pytest.fixture(scope="session")
def key_pair() -> KeyPair:
    """Return an RSA key pair shared by the whole session."""
    return asymmetric.generate_key_pair()


@pytest.fixture(scope="session")
def other_key_pair() -> KeyPair:
    """Return a second, unrelated RSA key pair."""
    return asymmetric.generate_key_pair()


@pytest.fixture(scope="session")
def authority() -> CertificateAuthority:
    """Return the session certificate authority."""
    return CertificateAuthority("Academic CA")


@pytest.fixture(scope="session")
def alice(authority: CertificateAuthority) -> Principal:
    """Return Alice, enrolled by the session authority."""
    return authority.enroll(Principal.generate("Alice"))


@pytest.fixture(scope="session")
def bob(authority: CertificateAuthority) -> Principal:
    """Return Bob, enrolled by the session authority."""
    return authority.enroll(Principal.generate("Bob"))


@pytest.fixture
def envelope(alice: Principal, bob: Principal) -> Envelope:
    """Return a fresh envelope from Alice to Bob carrying "hello"."""
    return alice.send_secure_message("hello", bob)


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Create a temporary configuration file for testing.

    Args:
        tmp_path: Pytest's temporary directory fixture.

    Yields:
        Path: Path to the temporary configuration file.
    """
    config_file = tmp_path / "test_config.json"
    config_file.write_text(json.dumps({
        "authority": {
            "ca_name": "Test CA",
            "validity_days": 30,
            "expiry_warning_days": 7,
        },
        "principals": ["Alice", "Bob", "Carol"],
        "logging": {
            "level": "DEBUG",
            "log_file": str(tmp_path / "logs" / "test.log"),
            "redact_keys": True,
        },
    }))
    yield config_file
