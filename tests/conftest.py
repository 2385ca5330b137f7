import base64

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from Security.data_encryption_at_rest import FieldCipher
from Security.key_management import EncryptionKey

ZERO_KEY = base64.b64encode(bytes(32)).decode("ascii")
ONE_KEY = base64.b64encode(b"\x01" * 32).decode("ascii")


@pytest.fixture(autouse=True)
def security_env(monkeypatch):
    monkeypatch.setenv("SECURITY_LOG_FILE", "")
    monkeypatch.delenv("ENCRYPTION_MODE", raising=False)
    monkeypatch.delenv("VALIDATE_ENCRYPTION_ON_STARTUP", raising=False)
    monkeypatch.delenv("ENCRYPTION_KEY", raising=False)


@pytest.fixture
def encryption_key(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_KEY", ZERO_KEY)
    return ZERO_KEY


@pytest.fixture
def cipher():
    return FieldCipher(EncryptionKey.from_base64(ZERO_KEY))


@pytest.fixture
def other_cipher():
    return FieldCipher(EncryptionKey.from_base64(ONE_KEY))


@pytest.fixture
def sqlite_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(bind=sqlite_engine, autocommit=False, autoflush=False)
