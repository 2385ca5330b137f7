"""
FIELD ENCRYPTION ERRORS
=======================
Error taxonomy for the credential cipher.
"""

# FLOW:
# - ConfigurationError: key missing, undecodable or wrong length.
# - InvalidInputError: malformed (ciphertext, iv, authTag) triple.
# - IntegrityError: authentication tag mismatch on decrypt.

from __future__ import annotations


class FieldEncryptionError(Exception):
    """Base class for credential cipher failures."""


class ConfigurationError(FieldEncryptionError):
    pass


class InvalidInputError(FieldEncryptionError):
    pass


class IntegrityError(FieldEncryptionError):
    """Decrypt refused: tampered data, wrong key or corrupted storage."""

    def __init__(self, message: str = "Encrypted field failed authentication"):
        super().__init__(message)
