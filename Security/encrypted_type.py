"""
ENCRYPTED SQLALCHEMY COLUMNS
============================
Storage layout for encrypted credential fields.
"""

# FLOW:
# - encrypted_columns("password") -> password_ciphertext/_iv/_auth_tag.
# - write_secret()/read_secret() encrypt on write and decrypt on read.
# - EncryptedFieldType stores the whole triple in one JSON column.
# WHY:
# - Keeps the triple together so a partial row fails loudly.
# HOW:
# - Best-effort writes without a key keep the value under PLAINTEXT_PREFIX
#   with null IV/tag; base64 never contains ':' so the marker is unambiguous.

from __future__ import annotations

import json
import logging
from typing import Optional

from sqlalchemy import Column, Text
from sqlalchemy.types import TypeDecorator

from Security.data_encryption_at_rest import EncryptedField, FieldCipher
from Security.encryption_errors import InvalidInputError
from Security.field_level_encryption import default_cipher


PLAINTEXT_PREFIX = "plain:"

logger = logging.getLogger("security.encryption")


def encrypted_columns(name: str) -> tuple[Column, Column, Column]:
    return (
        Column(f"{name}_ciphertext", Text, nullable=True),
        Column(f"{name}_iv", Text, nullable=True),
        Column(f"{name}_auth_tag", Text, nullable=True),
    )


def _parts(record, name: str) -> tuple[Optional[str], Optional[str], Optional[str]]:
    return (
        getattr(record, f"{name}_ciphertext"),
        getattr(record, f"{name}_iv"),
        getattr(record, f"{name}_auth_tag"),
    )


def is_plaintext_secret(record, name: str) -> bool:
    ciphertext, iv, auth_tag = _parts(record, name)
    return (
        isinstance(ciphertext, str)
        and ciphertext.startswith(PLAINTEXT_PREFIX)
        and iv is None
        and auth_tag is None
    )


def read_secret(record, name: str, cipher: Optional[FieldCipher] = None) -> Optional[str]:
    """Return the decrypted secret, or None when it was never set."""
    ciphertext, iv, auth_tag = _parts(record, name)
    if ciphertext is None and iv is None and auth_tag is None:
        return None
    if is_plaintext_secret(record, name):
        logger.warning("Sensitive field %s is stored without encryption", name)
        return ciphertext[len(PLAINTEXT_PREFIX):]
    if not (ciphertext and iv and auth_tag):
        raise InvalidInputError("Invalid encrypted data structure")
    cipher = cipher or default_cipher()
    return cipher.decrypt(EncryptedField(ciphertext, iv, auth_tag))


def write_secret(record, name: str, value: Optional[str], cipher: Optional[FieldCipher] = None) -> None:
    """Encrypt value into the record; a blank value keeps the stored secret."""
    if not value:
        return
    cipher = cipher or default_cipher()
    field = cipher.encrypt(value)
    if field is None:
        setattr(record, f"{name}_ciphertext", f"{PLAINTEXT_PREFIX}{value}")
        setattr(record, f"{name}_iv", None)
        setattr(record, f"{name}_auth_tag", None)
        return
    setattr(record, f"{name}_ciphertext", field.ciphertext)
    setattr(record, f"{name}_iv", field.iv)
    setattr(record, f"{name}_auth_tag", field.auth_tag)


def clear_secret(record, name: str) -> None:
    setattr(record, f"{name}_ciphertext", None)
    setattr(record, f"{name}_iv", None)
    setattr(record, f"{name}_auth_tag", None)


class EncryptedFieldType(TypeDecorator):
    """Single-column variant: the triple as JSON text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, EncryptedField):
            value = value.to_dict()
        return json.dumps(value, sort_keys=True)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return EncryptedField.from_dict(json.loads(value))
