from sqlalchemy import Column, Integer, String, DateTime, Text
from .database import Base
from Security.encrypted_type import encrypted_columns
import datetime

# --- OWN FARMING ---


class FarmingAccount(Base):
    __tablename__ = "farming_accounts"

    id = Column(Integer, primary_key=True, index=True)
    social_media = Column(String(50), nullable=False)
    account_type = Column(String(50), nullable=True)
    username = Column(String(150), nullable=False)
    email = Column(String(150), nullable=True)
    # Status: 'new', 'active', 'farming', 'suspended'
    status = Column(String(30), default="new")
    notes = Column(Text, nullable=True)
    owner_id = Column(String(60), nullable=True, index=True)

    # Secrets: ciphertext/iv/auth_tag per field, all null when never set
    password_ciphertext, password_iv, password_auth_tag = encrypted_columns("password")
    two_fa_secret_ciphertext, two_fa_secret_iv, two_fa_secret_auth_tag = encrypted_columns("two_fa_secret")
    recovery_email_ciphertext, recovery_email_iv, recovery_email_auth_tag = encrypted_columns("recovery_email")

    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)


SECRET_FIELDS = ("password", "two_fa_secret", "recovery_email")
