"""Allow running the CLI with ``python -m secure_envelope``."""

from secure_envelope.cli.main import cli

if __name__ == "__main__":
    cli()
