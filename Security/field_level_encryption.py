"""
SENSITIVE DATA PROTECTION
=========================
Process-level helpers for encrypting credential fields.
"""

# FLOW:
# - encrypt()/decrypt() delegate to a FieldCipher keyed from ENCRYPTION_KEY.
# - *_optional() pass None through untouched.
# - validate_encryption_setup() is called once at startup.
# HOW:
# - The key is re-read from the environment on each call; the write policy
#   follows ENCRYPTION_MODE.

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

from Security.data_encryption_at_rest import EncryptedField, FieldCipher
from Security.key_management import load_key


logger = logging.getLogger("security.startup")

_default_cipher = FieldCipher()


def default_cipher() -> FieldCipher:
    return _default_cipher


def encrypt(plaintext: Optional[str]) -> Optional[EncryptedField]:
    return _default_cipher.encrypt(plaintext)


def decrypt(field: Union[EncryptedField, Mapping]) -> str:
    return _default_cipher.decrypt(field)


def encrypt_optional(value: Optional[str]) -> Optional[EncryptedField]:
    return _default_cipher.encrypt_optional(value)


def decrypt_optional(field: Union[EncryptedField, Mapping, None]) -> Optional[str]:
    return _default_cipher.decrypt_optional(field)


def validate_encryption_setup() -> None:
    """Fail startup when the encryption key is missing or malformed."""
    try:
        load_key()
    except Exception as exc:
        logger.error("Encryption setup validation failed: %s", exc)
        raise
    logger.info("Encryption key validated successfully")
