"""Secure message envelope: the record carried between two principals.

Binary values are base64 text so the envelope can travel as JSON. Field
names on the wire are camelCase (``from``, ``to``, ``encryptedSymmetricKey``,
``messageHash``, ``senderCertificate``).
"""

import json
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from secure_envelope.utils.encoding import b64encode
from secure_envelope.utils.exceptions import MalformedEnvelope


class Envelope(BaseModel):
    """Immutable secure message package.

    Attributes:
        sender: Name of the sending principal (wire: ``from``)
        recipient: Name of the receiving principal (wire: ``to``)
        ciphertext: Base64 AES-256-CBC ciphertext of the message body
        iv: Base64 initialization vector for the ciphertext
        encrypted_symmetric_key: Base64 one-time AES key, RSA-OAEP encrypted
            under the recipient's public key
        signature: Base64 sender signature over the raw ciphertext bytes
        message_hash: Base64 SHA-256 digest of the plaintext
        sender_certificate: Sender's serialized certificate
        timestamp: ISO-8601 UTC creation time
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    sender: str = Field(..., alias="from", min_length=1)
    recipient: str = Field(..., alias="to", min_length=1)
    ciphertext: str
    iv: str
    encrypted_symmetric_key: str = Field(..., alias="encryptedSymmetricKey")
    signature: str
    message_hash: str = Field(..., alias="messageHash")
    sender_certificate: Dict[str, Any] = Field(..., alias="senderCertificate")
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON-ready wire dict (camelCase keys)."""
        return self.model_dump(by_alias=True)

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Any) -> "Envelope":
        """Build an envelope from its wire dict.

        Raises:
            MalformedEnvelope: If required fields are missing or mistyped
        """
        if not isinstance(data, dict):
            raise MalformedEnvelope(
                f"Envelope must be an object, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedEnvelope(f"Invalid envelope fields:\n{e}") from e

    @classmethod
    def from_json(cls, text: str) -> "Envelope":
        """Build an envelope from JSON text.

        Raises:
            MalformedEnvelope: If text is not JSON or fields are invalid
        """
        try:
            data = json.loads(text)
        except (TypeError, json.JSONDecodeError) as e:
            raise MalformedEnvelope(f"Envelope is not valid JSON: {e}") from e
        return cls.from_dict(data)


def tamper(envelope: Envelope, field: str, value: Union[str, bytes, Dict[str, Any]]) -> Envelope:
    """Return a copy of an envelope with one wire field replaced.

    Simulates an attacker modifying a package in transit; the original
    envelope is left untouched.

    Args:
        envelope: Envelope to copy
        field: Wire field name (e.g. "ciphertext", "senderCertificate")
        value: Replacement value; bytes are base64 encoded

    Returns:
        New Envelope with the field replaced

    Raises:
        ValueError: If field is not an envelope wire field

    Example:
        >>> forged = tamper(envelope, "ciphertext", b"tampered message")
        >>> forged.signature == envelope.signature
        True
    """
    data = envelope.to_dict()
    if field not in data:
        raise ValueError(
            f"Unknown envelope field: {field}. Must be one of: {', '.join(data)}"
        )
    data[field] = b64encode(value) if isinstance(value, (bytes, bytearray)) else value
    return Envelope.from_dict(data)
