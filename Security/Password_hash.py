"""
PASSWORD HASHING & VERIFICATION MODULE
=====================================

One-way bcrypt hashing for login passwords. This is separate from the
reversible field encryption used for stored farming-account secrets:
there is no way back from a hash.

FLOW:
- hash_password() creates a salted bcrypt hash before storage.
- verify_password() checks a login attempt against the stored hash.

HOW:
- bcrypt with a fixed work factor; comparison is done by bcrypt itself.
- bcrypt only reads the first 72 bytes of a password.

USAGE:
   from Security.Password_hash import hash_password, verify_password
   user.password_hash = hash_password(form_password)
   if verify_password(form_password, user.password_hash):
       ...
"""

from __future__ import annotations

import bcrypt


BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a plain text password with bcrypt.

    Example:
        hashed = hash_password("MySecurePassword123!")
        # Result: $2b$10$...
    """
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Return True when password matches hashed_password; False for malformed hashes."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except ValueError:
        return False
