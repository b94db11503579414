"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


class AuthorityConfig(BaseModel):
    """Configuration for the certificate authority.

    Attributes:
        ca_name: Issuer name written to every certificate
        validity_days: Certificate validity period in days (non-zero)
        expiry_warning_days: Days before expiry at which certificates are
            reported as expiring soon (0 disables the warning)
    """

    ca_name: str = Field(
        default="Academic CA",
        min_length=1,
        description="Certificate authority name",
    )
    validity_days: int = Field(
        default=365,
        description="Certificate validity period in days",
    )
    expiry_warning_days: int = Field(
        default=0,
        ge=0,
        description="Expiring-soon warning threshold in days",
    )

    @field_validator("validity_days")
    @classmethod
    def validate_validity_days(cls, v: int) -> int:
        """Validate the validity period.

        Raises:
            ValueError: If validity_days is zero
        """
        if v == 0:
            raise ValueError(
                "Invalid validity_days: 0. Use a positive number of days "
                "(negative values issue already-expired certificates)"
            )
        return v


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_keys: Whether to redact key material and base64 blobs from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/secure-envelope.log"),
        description="Log file path"
    )
    redact_keys: bool = Field(
        default=False,
        description="Redact key material from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Args:
            v: Log level string

        Returns:
            Validated log level (uppercase)

        Raises:
            ValueError: If log level is not valid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        authority: Certificate authority configuration
        principals: Names of the principals enrolled in the trust domain
        logging: Logging configuration

    Example:
        >>> config = Config(
        ...     authority=AuthorityConfig(ca_name="Test CA", validity_days=30),
        ...     principals=["Alice", "Bob", "Carol"],
        ... )
        >>> config.authority.validity_days
        30
    """

    authority: AuthorityConfig = AuthorityConfig()
    principals: list[str] = Field(
        default_factory=lambda: ["Alice", "Bob"],
        description="Principal names enrolled at startup",
    )
    logging: LoggingConfig = LoggingConfig()

    @field_validator("principals")
    @classmethod
    def validate_principals(cls, v: list[str]) -> list[str]:
        """Validate principal names are non-empty.

        Raises:
            ValueError: If a name is empty
        """
        for name in v:
            if not name or not name.strip():
                raise ValueError("Principal names must not be empty")
        return v

    @model_validator(mode="after")
    def validate_unique_principals(self) -> "Config":
        """Validate principal names are unique.

        Raises:
            ValueError: If a name appears more than once
        """
        seen = set()
        duplicates = []
        for name in self.principals:
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        if duplicates:
            raise ValueError(
                f"Duplicate principal names: {', '.join(duplicates)}"
            )
        return self
