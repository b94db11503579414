"""Programmatic secure messaging examples.

This module demonstrates using the library directly instead of the CLI:
a legitimate exchange, tamper detection, an expired certificate, and an
uncertified sender.
"""

import logging

from secure_envelope.messaging import Principal, TrustDomain, tamper
from secure_envelope.utils.exceptions import MissingCertificate

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def example_1_legitimate_exchange(domain: TrustDomain):
    """Example 1: Alice sends Bob an encrypted, signed message."""
    print("=" * 80)
    print("EXAMPLE 1: Legitimate Exchange")
    print("=" * 80)
    print()

    envelope = domain.send("Alice", "Bob", "Hello Bob! This is a secret and secure message.")
    print(f"Envelope from {envelope.sender} to {envelope.recipient} at {envelope.timestamp}")

    result = domain.deliver(envelope)
    print(f"Success: {result.success}")
    print(f"Message: {result.message}")
    print(f"Validations: {result.validations.to_dict()}")
    print()


def example_2_tamper_detection(domain: TrustDomain):
    """Example 2: An attacker replaces the ciphertext in transit.

    The signature no longer matches, so Bob rejects the envelope before
    attempting decryption.
    """
    print("=" * 80)
    print("EXAMPLE 2: Tamper Detection")
    print("=" * 80)
    print()

    envelope = domain.send("Alice", "Bob", "Transfer 10 coins")
    forged = tamper(envelope, "ciphertext", b"tampered message")

    result = domain.deliver(forged)
    print(f"Success: {result.success}")
    print(f"Errors: {result.errors}")
    print()


def example_3_expired_certificate(domain: TrustDomain):
    """Example 3: A principal whose certificate has already expired."""
    print("=" * 80)
    print("EXAMPLE 3: Expired Certificate")
    print("=" * 80)
    print()

    domain.enroll("Charlie", validity_days=-1)
    result = domain.deliver(domain.send("Charlie", "Bob", "Am I still trusted?"))
    print(f"Success: {result.success}")
    print(f"Errors: {result.errors}")
    print()


def example_4_uncertified_sender(domain: TrustDomain):
    """Example 4: A principal without a certificate cannot send."""
    print("=" * 80)
    print("EXAMPLE 4: Uncertified Sender")
    print("=" * 80)
    print()

    dave = Principal.generate("Dave")
    try:
        dave.send_secure_message("hi", domain.principal("Bob"))
    except MissingCertificate as e:
        print(f"Refused: {e}")
    print()


def main():
    domain = TrustDomain.create(["Alice", "Bob"], ca_name="Academic CA")
    logger.info(f"Created {domain!r}")

    example_1_legitimate_exchange(domain)
    example_2_tamper_detection(domain)
    example_3_expired_certificate(domain)
    example_4_uncertified_sender(domain)

    print("Certificates:")
    for summary in domain.describe():
        print(f"  {summary['name']}: valid={summary['valid']} errors={summary['errors']}")


if __name__ == "__main__":
    main()
