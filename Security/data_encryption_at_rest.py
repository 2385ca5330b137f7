"""
DATA ENCRYPTION AT REST
=======================
AES-256-GCM cipher for individual credential fields.

FLOW:
- FieldCipher.encrypt() turns a plaintext string into an EncryptedField.
- FieldCipher.decrypt() verifies the auth tag and returns the plaintext.

WHY:
- Farming-account secrets (password, 2FA seed, recovery email) must not
  sit in the database in clear form, and tampering must be detectable.

HOW:
- AES-256-GCM with a fresh 16-byte IV per value and a 16-byte tag.
- Ciphertext, IV and tag are stored base64 encoded, side by side.
- Encrypt is fail-soft on a missing key in best-effort mode; decrypt is
  always fail-closed.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from Security.encryption_errors import ConfigurationError, IntegrityError, InvalidInputError
from Security.key_management import load_key
from Security.metrics import (
    FIELD_DECRYPT,
    FIELD_ENCRYPT,
    INTEGRITY_FAILURE,
    PLAINTEXT_FALLBACK,
    increment_feature_event,
)
from Security.security_config import MODE_BEST_EFFORT, MODE_MANDATORY, encryption_mode


ALGORITHM = "aes-256-gcm"
IV_SIZE = 16
AUTH_TAG_SIZE = 16

logger = logging.getLogger("security.encryption")

KeySource = Callable[[], bytes]


@dataclass(frozen=True)
class EncryptedField:
    """Persisted form of one secret. The three parts are only valid together."""

    ciphertext: str
    iv: str
    auth_tag: str

    def to_dict(self) -> dict:
        return {"ciphertext": self.ciphertext, "iv": self.iv, "authTag": self.auth_tag}

    @classmethod
    def from_dict(cls, data: Mapping) -> "EncryptedField":
        auth_tag = data.get("authTag")
        if auth_tag is None:
            auth_tag = data.get("auth_tag")
        return cls(
            ciphertext=data.get("ciphertext"),
            iv=data.get("iv"),
            auth_tag=auth_tag,
        )


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode_component(value: str) -> bytes:
    # Any textual change to a stored component must fail, including
    # edits that only touch base64 padding bits.
    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise IntegrityError() from exc
    if _b64encode(raw) != value:
        raise IntegrityError()
    return raw


def _coerce_field(field: Union[EncryptedField, Mapping, None]) -> EncryptedField:
    if isinstance(field, Mapping):
        field = EncryptedField.from_dict(field)
    if not isinstance(field, EncryptedField):
        raise InvalidInputError("Invalid encrypted data structure")
    for part in (field.ciphertext, field.iv, field.auth_tag):
        if not part or not isinstance(part, str):
            raise InvalidInputError("Invalid encrypted data structure")
    return field


class FieldCipher:
    """
    Encrypts and decrypts single credential strings.

    key_source is an EncryptionKey (or any zero-argument callable returning
    32 key bytes). mode is "best-effort" or "mandatory"; None reads
    ENCRYPTION_MODE on each encrypt call.
    """

    def __init__(self, key_source: KeySource = load_key, mode: Optional[str] = None):
        if mode is not None and mode not in (MODE_BEST_EFFORT, MODE_MANDATORY):
            raise ConfigurationError(f"Unknown encryption mode: {mode!r}")
        self._key_source = key_source
        self._mode = mode

    @property
    def mode(self) -> str:
        return self._mode or encryption_mode()

    def encrypt(self, plaintext: Optional[str]) -> Optional[EncryptedField]:
        if not plaintext:
            return None
        if not isinstance(plaintext, str):
            raise InvalidInputError("Plaintext must be a string")

        mode = self.mode
        try:
            key = self._key_source()
        except ConfigurationError as exc:
            if mode == MODE_MANDATORY:
                logger.error("Refusing to store sensitive field without encryption: %s", exc)
                raise
            increment_feature_event(PLAINTEXT_FALLBACK)
            logger.warning(
                "Encryption key not configured, skipping encryption for sensitive field (%s)",
                exc,
            )
            return None

        iv = os.urandom(IV_SIZE)
        sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
        ciphertext, auth_tag = sealed[:-AUTH_TAG_SIZE], sealed[-AUTH_TAG_SIZE:]
        increment_feature_event(FIELD_ENCRYPT)
        return EncryptedField(
            ciphertext=_b64encode(ciphertext),
            iv=_b64encode(iv),
            auth_tag=_b64encode(auth_tag),
        )

    def decrypt(self, field: Union[EncryptedField, Mapping]) -> str:
        field = _coerce_field(field)
        key = self._key_source()

        try:
            iv = _b64decode_component(field.iv)
            auth_tag = _b64decode_component(field.auth_tag)
            ciphertext = _b64decode_component(field.ciphertext)
            if len(iv) != IV_SIZE or len(auth_tag) != AUTH_TAG_SIZE:
                raise IntegrityError()
            plaintext = AESGCM(key).decrypt(iv, ciphertext + auth_tag, None)
        except (IntegrityError, InvalidTag) as exc:
            increment_feature_event(INTEGRITY_FAILURE)
            logger.warning("Encrypted field failed authentication")
            raise IntegrityError() from exc

        increment_feature_event(FIELD_DECRYPT)
        return plaintext.decode("utf-8")

    def encrypt_optional(self, value: Optional[str]) -> Optional[EncryptedField]:
        if value is None:
            return None
        return self.encrypt(value)

    def decrypt_optional(self, field: Union[EncryptedField, Mapping, None]) -> Optional[str]:
        if field is None:
            return None
        return self.decrypt(field)
