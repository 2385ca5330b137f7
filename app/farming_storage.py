"""
Farming account persistence.

Secret fields (password, 2FA seed, recovery email) go through
Security.encrypted_type so they only ever reach the database encrypted,
except in best-effort mode with no key configured.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from Security.data_encryption_at_rest import FieldCipher
from Security.encrypted_type import clear_secret, is_plaintext_secret, read_secret, write_secret
from .models import FarmingAccount, SECRET_FIELDS

logger = logging.getLogger("app.farming")

PUBLIC_FIELDS = ("social_media", "account_type", "username", "email", "status", "notes", "owner_id")


def _apply_secrets(account: FarmingAccount, data: dict, cipher: Optional[FieldCipher]) -> None:
    for name in SECRET_FIELDS:
        write_secret(account, name, data.get(name), cipher)
        if is_plaintext_secret(account, name):
            logger.warning("Farming account %s stored %s without encryption", account.username, name)


def create_farming_account(db: Session, data: dict, cipher: Optional[FieldCipher] = None) -> FarmingAccount:
    account = FarmingAccount(**{k: data[k] for k in PUBLIC_FIELDS if data.get(k) is not None})
    _apply_secrets(account, data, cipher)
    db.add(account)
    db.commit()
    db.refresh(account)
    logger.info("Created farming account id=%s social_media=%s", account.id, account.social_media)
    return account


def get_farming_account(db: Session, account_id: int) -> Optional[FarmingAccount]:
    return db.query(FarmingAccount).filter(FarmingAccount.id == account_id).first()


def list_farming_accounts(
    db: Session,
    social_media: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> list[FarmingAccount]:
    query = db.query(FarmingAccount)
    if social_media:
        query = query.filter(FarmingAccount.social_media == social_media)
    if status:
        query = query.filter(FarmingAccount.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            FarmingAccount.username.ilike(pattern),
            FarmingAccount.email.ilike(pattern),
            FarmingAccount.notes.ilike(pattern),
        ))
    return query.order_by(FarmingAccount.id).all()


def update_farming_account(
    db: Session,
    account_id: int,
    data: dict,
    cipher: Optional[FieldCipher] = None,
) -> Optional[FarmingAccount]:
    """Update public fields; blank secret values keep what is stored."""
    account = get_farming_account(db, account_id)
    if not account:
        return None
    for key in PUBLIC_FIELDS:
        if key in data and data[key] is not None:
            setattr(account, key, data[key])
    _apply_secrets(account, data, cipher)
    for name in data.get("clear_secrets") or ():
        if name in SECRET_FIELDS:
            clear_secret(account, name)
    db.commit()
    db.refresh(account)
    return account


def delete_farming_account(db: Session, account_id: int) -> bool:
    account = get_farming_account(db, account_id)
    if not account:
        return False
    db.delete(account)
    db.commit()
    return True


def account_to_dict(account: FarmingAccount) -> dict:
    return {
        "id": account.id,
        "socialMedia": account.social_media,
        "accountType": account.account_type,
        "username": account.username,
        "email": account.email,
        "status": account.status,
        "notes": account.notes,
        "ownerId": account.owner_id,
        "hasPassword": account.password_ciphertext is not None,
        "hasTwoFaSecret": account.two_fa_secret_ciphertext is not None,
        "hasRecoveryEmail": account.recovery_email_ciphertext is not None,
        "createdAt": account.created_at.isoformat() if account.created_at else None,
        "updatedAt": account.updated_at.isoformat() if account.updated_at else None,
    }


def get_farming_account_with_secrets(account: FarmingAccount, cipher: Optional[FieldCipher] = None) -> dict:
    """Serialize with decrypted secrets. Any decrypt failure propagates."""
    payload = account_to_dict(account)
    payload["passwordDecrypted"] = read_secret(account, "password", cipher)
    payload["twoFaSecret"] = read_secret(account, "two_fa_secret", cipher)
    payload["recoveryEmail"] = read_secret(account, "recovery_email", cipher)
    logger.info("Disclosed secrets for farming account id=%s", account.id)
    return payload
