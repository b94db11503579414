"""Main CLI entry point for the secure envelope toolkit.

This module provides the main Click command group for the secure-envelope CLI.
"""

from pathlib import Path
from typing import Optional

import click

from secure_envelope import __version__
from secure_envelope.cli.envelope_commands import demo, inspect_envelope
from secure_envelope.config import get_authority_config, get_logging_config, load_config
from secure_envelope.logging_audit import configure_logging
from secure_envelope.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="secure-envelope")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-keys",
    is_flag=True,
    help="Redact PEM keys and base64 blobs from logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_keys: bool,
) -> None:
    """Secure Envelope - hybrid encryption with a certificate trust model.

    Alice and Bob exchange messages protected by AES-256 encryption,
    RSA key exchange, digital signatures, SHA-256 integrity digests and
    CA-issued certificates.

    Common usage:

        # Run the Alice to Bob demonstration
        secure-envelope demo

        # Show tamper detection
        secure-envelope demo --tamper

        # Save the envelope and inspect it later
        secure-envelope demo --output envelope.json
        secure-envelope inspect envelope.json

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
        ctx.obj["config"] = config_obj
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["verbose"] = verbose
    ctx.obj["redact_keys"] = redact_keys
    ctx.obj["log_file"] = log_file

    # Precedence: CLI flags > config file > defaults
    logging_config = get_logging_config(config_obj)
    log_level = "DEBUG" if verbose else logging_config.level
    log_file_path = log_file if log_file else logging_config.log_file
    redact_keys_setting = redact_keys if redact_keys else logging_config.redact_keys

    configure_logging(
        level=log_level, log_file=log_file_path, redact_keys=redact_keys_setting
    )


cli.add_command(demo)
cli.add_command(inspect_envelope)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        secure-envelope config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
        authority_config = get_authority_config(config_obj)
        logging_config = get_logging_config(config_obj)

        click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
        click.echo(f"\nConfiguration file: {config_file}")
        click.echo("\nAuthority:")
        click.echo(f"  CA name:         {authority_config.ca_name}")
        click.echo(f"  Validity:        {authority_config.validity_days} days")
        click.echo(f"  Expiry warning:  {authority_config.expiry_warning_days} days")

        click.echo("\nPrincipals:")
        click.echo(f"  {', '.join(config_obj.principals) or '(none)'}")

        click.echo("\nLogging:")
        click.echo(f"  Level:       {logging_config.level}")
        click.echo(f"  Log file:    {logging_config.log_file}")
        click.echo(f"  Redact keys: {logging_config.redact_keys}")

    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"secure-envelope version {__version__}")


if __name__ == "__main__":
    cli()
