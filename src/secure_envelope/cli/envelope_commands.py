"""Envelope CLI commands for demonstration and inspection.

This module provides CLI commands for the secure messaging workflow:
- demo: Enroll principals, send an envelope and validate it on receipt
- inspect: Show the public contents of a saved envelope and check its
  certificate and signature
"""

import logging
from pathlib import Path
from typing import Optional

import click

from secure_envelope.crypto import signatures
from secure_envelope.config import get_authority_config
from secure_envelope.messaging import Envelope, TrustDomain, tamper
from secure_envelope.models.results import ReceiveResult
from secure_envelope.pki import Certificate
from secure_envelope.utils.encoding import b64decode, format_timestamp
from secure_envelope.utils.exceptions import FormatError, SecureEnvelopeError

logger = logging.getLogger(__name__)

TAMPERED_CIPHERTEXT = b"tampered message"


def _check(flag: bool) -> str:
    if flag:
        return click.style("✓", fg="green", bold=True)
    return click.style("✗", fg="red", bold=True)


def _echo_result(result: ReceiveResult, indent: str = "  ") -> None:
    flags = result.validations
    click.echo(f"{indent}{_check(flags.certificate_valid)} Certificate valid")
    click.echo(f"{indent}{_check(flags.signature_valid)} Signature valid")
    click.echo(f"{indent}{_check(flags.integrity_valid)} Integrity verified")
    for error in result.errors:
        click.echo(f"{indent}  • {error}")


@click.command(name="demo")
@click.option("--message", default="Hello Bob! This is a secret and secure message.",
              show_default=True, help="Plaintext to send")
@click.option("--sender", default="Alice", show_default=True, help="Sending principal")
@click.option("--recipient", default="Bob", show_default=True, help="Receiving principal")
@click.option("--tamper", "tamper_ciphertext", is_flag=True,
              help="Also deliver a copy with a modified ciphertext")
@click.option("--expired", is_flag=True,
              help="Enroll the sender with an already-expired certificate")
@click.option("--output", type=click.Path(path_type=Path),
              help="Save the envelope as JSON")
@click.pass_context
def demo(
    ctx: click.Context,
    message: str,
    sender: str,
    recipient: str,
    tamper_ciphertext: bool,
    expired: bool,
    output: Optional[Path],
) -> None:
    """Run the secure messaging demonstration.

    Creates a certificate authority, enrolls the configured principals, sends
    MESSAGE from SENDER to RECIPIENT and validates it on receipt. Exits with
    status 1 when an outcome differs from what the scenario expects.

    Examples:

        # Alice sends to Bob
        secure-envelope demo

        # Bob replies, then an attacker modifies the ciphertext
        secure-envelope demo --sender Bob --recipient Alice --tamper

        # Sender certificate has already expired
        secure-envelope demo --expired
    """
    config = ctx.obj["config"]
    authority_config = get_authority_config(config)

    try:
        click.echo(click.style("=== Secure Envelope Demo ===", bold=True))

        names = list(config.principals)
        for name in (sender, recipient):
            if name not in names:
                raise click.BadParameter(
                    f"'{name}' is not a configured principal "
                    f"(configured: {', '.join(names) or 'none'})"
                )

        click.echo(f"\n1. Creating certificate authority '{authority_config.ca_name}'")
        domain = TrustDomain.create(
            principal_names=[n for n in names if not (expired and n == sender)],
            ca_name=authority_config.ca_name,
            validity_days=authority_config.validity_days,
            expiry_warning_days=authority_config.expiry_warning_days,
        )
        if expired:
            domain.enroll(sender, validity_days=-1)
        for summary in domain.describe():
            click.echo(
                f"   {_check(summary['valid'])} {summary['name']}: "
                f"certificate {summary['serialNumber']} "
                f"valid until {summary['expiresAt']}"
            )

        click.echo(f"\n2. {sender} sending message to {recipient}")
        click.echo(f'   Plaintext: "{message}"')
        envelope = domain.send(sender, recipient, message)
        click.echo(f"   Timestamp:  {envelope.timestamp}")
        click.echo(f"   Ciphertext: {len(envelope.ciphertext)} characters (base64)")

        if output:
            output.write_text(envelope.to_json(indent=2), encoding="utf-8")
            click.echo(
                click.style("✓", fg="green", bold=True) + f" Envelope saved to: {output}"
            )

        click.echo(f"\n3. {recipient} receiving and validating")
        result = domain.deliver(envelope)
        _echo_result(result, indent="   ")

        expected_success = not expired
        outcome_ok = result.success == expected_success
        if result.success:
            click.echo(f'\n   Decrypted message: "{result.message}"')
        elif expired:
            click.echo("\n   Rejected as expected: sender certificate has expired")

        if tamper_ciphertext:
            click.echo("\n4. Simulating tampering with the ciphertext in transit")
            forged = tamper(envelope, "ciphertext", TAMPERED_CIPHERTEXT)
            tampered_result = domain.deliver(forged)
            _echo_result(tampered_result, indent="   ")
            if tampered_result.success:
                click.echo(
                    click.style("\n   ✗ Tampering was NOT detected", fg="red", bold=True)
                )
                outcome_ok = False
            else:
                click.echo(
                    click.style("\n   ✓ Tampering detected", fg="green", bold=True)
                )

        if not outcome_ok:
            click.echo(click.style("\n✗ Demo outcome unexpected", fg="red", bold=True), err=True)
            raise click.exceptions.Exit(1)

        click.echo(click.style("\n✓ Demo completed", fg="green", bold=True))

    except SecureEnvelopeError as e:
        logger.error(f"Demo failed: {e}")
        click.echo(click.style("✗", fg="red", bold=True) + f" Demo failed: {e}", err=True)
        raise click.exceptions.Exit(1)


@click.command(name="inspect")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def inspect_envelope(ctx: click.Context, file: Path) -> None:
    """Display a saved envelope and check its sender certificate and signature.

    The message itself stays encrypted: opening it needs the recipient's
    private key. Exits with status 1 if the envelope is malformed or either
    check fails.

    Example:

        secure-envelope inspect envelope.json
    """
    config = ctx.obj["config"]
    authority_config = get_authority_config(config)

    try:
        envelope = Envelope.from_json(file.read_text(encoding="utf-8"))
        certificate = Certificate.from_dict(envelope.sender_certificate)
    except FormatError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Envelope invalid", err=True)
        click.echo(str(e), err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("=== Envelope ===", bold=True))
    click.echo(f"From:        {envelope.sender}")
    click.echo(f"To:          {envelope.recipient}")
    click.echo(f"Timestamp:   {envelope.timestamp}")
    click.echo(f"Ciphertext:  {len(envelope.ciphertext)} characters (base64)")
    click.echo(f"Message hash: {envelope.message_hash}")

    click.echo(click.style("\n=== Sender Certificate ===", bold=True))
    click.echo(f"Subject:     {certificate.subject}")
    click.echo(f"Issuer:      {certificate.issuer}")
    click.echo(f"Serial:      {certificate.serial_number}")
    click.echo(
        f"Validity:    {format_timestamp(certificate.issued_at)} to "
        f"{format_timestamp(certificate.expires_at)}"
    )
    click.echo(f"Fingerprint: {certificate.fingerprint()}")

    validation = certificate.validate(warning_days=authority_config.expiry_warning_days)
    try:
        signature_valid = signatures.verify(
            b64decode(envelope.ciphertext),
            b64decode(envelope.signature),
            certificate.subject_public_key,
        )
    except ValueError as e:
        logger.debug(f"Envelope carries invalid base64: {e}")
        signature_valid = False

    click.echo(click.style("\n=== Checks ===", bold=True))
    click.echo(f"{_check(validation.valid)} Certificate valid")
    for error in validation.errors:
        click.echo(f"  • {error}")
    for warning in validation.warnings:
        click.echo(click.style(f"  ! {warning}", fg="yellow"))
    click.echo(f"{_check(signature_valid)} Signature valid")

    if not (validation.valid and signature_valid):
        raise click.exceptions.Exit(1)
