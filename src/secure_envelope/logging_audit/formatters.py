"""Custom log formatters for the secure envelope toolkit.

This module provides specialized formatters for logging, including key material redaction.
"""

import logging
import re
from typing import List, Tuple


class KeyMaterialRedactingFormatter(logging.Formatter):
    """Formatter that redacts key material and long binary blobs from log messages.

    Applies regex-based pattern matching to remove PEM private key blocks,
    PEM public key blocks, and long base64 runs (ciphertexts, signatures,
    wrapped keys) from the formatted output.

    Attributes:
        redact_keys: Whether to enable redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction

    Example:
        >>> formatter = KeyMaterialRedactingFormatter(
        ...     fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        ...     redact_keys=True
        ... )
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_keys: bool = False,
    ) -> None:
        """Initialize the KeyMaterialRedactingFormatter.

        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact_keys: Whether to enable redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_keys = redact_keys

        # Order matters: whole PEM blocks first, then loose base64 runs
        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            (
                re.compile(
                    r"-----BEGIN (?:RSA |ENCRYPTED )?PRIVATE KEY-----"
                    r".*?-----END (?:RSA |ENCRYPTED )?PRIVATE KEY-----",
                    re.DOTALL,
                ),
                "[PRIVATE-KEY-REDACTED]",
            ),
            (
                re.compile(
                    r"-----BEGIN PUBLIC KEY-----.*?-----END PUBLIC KEY-----",
                    re.DOTALL,
                ),
                "[PUBLIC-KEY-REDACTED]",
            ),
            (re.compile(r"[A-Za-z0-9+/]{64,}={0,2}"), "[BLOB-REDACTED]"),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional redaction.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with key material redacted if enabled
        """
        original = super().format(record)

        if self.redact_keys:
            for pattern, replacement in self.patterns:
                original = pattern.sub(replacement, original)

        return original
