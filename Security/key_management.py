"""
SECURE KEY MANAGEMENT
=====================
Load the AES-256 field encryption key from environment and validate length.
"""

# FLOW:
# - load_key() reads ENCRYPTION_KEY, base64-decodes it, checks 32 bytes.
# - EncryptionKey wraps validated key bytes for explicit injection.
# - generate_key() creates a fresh base64 key for operators.
# HOW:
# - Standard base64 alphabet, no auto-generation and no default.

from __future__ import annotations

import base64
import binascii
import os
import secrets
from dataclasses import dataclass, field

from Security.encryption_errors import ConfigurationError
from Security.security_config import load_env_file


ENCRYPTION_KEY_ENV = "ENCRYPTION_KEY"
KEY_SIZE = 32


def _decode_key(raw: str) -> bytes:
    try:
        key = base64.b64decode(raw.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError(
            f"{ENCRYPTION_KEY_ENV} is not valid base64"
        ) from exc
    if len(key) != KEY_SIZE:
        raise ConfigurationError(
            f"{ENCRYPTION_KEY_ENV} must be exactly {KEY_SIZE} bytes (base64 encoded). "
            f"Current length: {len(key)}"
        )
    return key


def load_key() -> bytes:
    """Return the 32-byte key from ENCRYPTION_KEY or raise ConfigurationError."""
    load_env_file()
    raw = os.getenv(ENCRYPTION_KEY_ENV)
    if not raw or not raw.strip():
        raise ConfigurationError(
            f"{ENCRYPTION_KEY_ENV} environment variable is required for encryption. "
            "Generate a secure key with: openssl rand -base64 32"
        )
    return _decode_key(raw)


@dataclass(frozen=True)
class EncryptionKey:
    """Immutable key material handed to a FieldCipher."""

    material: bytes = field(repr=False)

    def __post_init__(self):
        if len(self.material) != KEY_SIZE:
            raise ConfigurationError(
                f"Encryption key must be exactly {KEY_SIZE} bytes. "
                f"Current length: {len(self.material)}"
            )

    @classmethod
    def from_base64(cls, raw: str) -> "EncryptionKey":
        return cls(_decode_key(raw))

    @classmethod
    def from_environment(cls) -> "EncryptionKey":
        return cls(load_key())

    def __call__(self) -> bytes:
        return self.material


def generate_key() -> str:
    """Return a new random key, base64 encoded, suitable for ENCRYPTION_KEY."""
    return base64.b64encode(secrets.token_bytes(KEY_SIZE)).decode("ascii")
