"""Tests for the AES-256-GCM credential cipher."""
import base64
import logging

import pytest

from Security.data_encryption_at_rest import (
    AUTH_TAG_SIZE,
    IV_SIZE,
    EncryptedField,
    FieldCipher,
)
from Security.encryption_errors import ConfigurationError, IntegrityError, InvalidInputError
from Security.key_management import EncryptionKey
from Security.metrics import PLAINTEXT_FALLBACK, get_feature_metrics_snapshot


@pytest.mark.parametrize("plaintext", [
    "hunter2",
    "a",
    "pässwörd with ümlauts",
    "パスワード",
    "2fa seed 🔐🐟 with emoji",
    "x" * 5000,
    "line\nbreaks\tand\x00nul",
])
def test_round_trip(cipher, plaintext):
    assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext


def test_known_key_scenario(cipher, other_cipher):
    field = cipher.encrypt("hunter2")
    assert len(base64.b64decode(field.iv)) == IV_SIZE
    assert len(base64.b64decode(field.auth_tag)) == AUTH_TAG_SIZE
    assert cipher.decrypt(field) == "hunter2"
    with pytest.raises(IntegrityError):
        other_cipher.decrypt(field)


def test_fresh_iv_per_call(cipher):
    first = cipher.encrypt("same secret")
    second = cipher.encrypt("same secret")
    assert first.iv != second.iv
    assert first.ciphertext != second.ciphertext
    assert first != second


def test_empty_input_is_noop(cipher):
    assert cipher.encrypt("") is None
    assert cipher.encrypt(None) is None
    assert cipher.encrypt_optional(None) is None
    assert cipher.decrypt_optional(None) is None


def test_optional_helpers_delegate(cipher):
    field = cipher.encrypt_optional("recovery@example.com")
    assert cipher.decrypt_optional(field) == "recovery@example.com"


def test_encrypt_rejects_non_string(cipher):
    with pytest.raises(InvalidInputError):
        cipher.encrypt(12345)


def _replace_char(value, index):
    replacement = "B" if value[index] == "A" else "A"
    return value[:index] + replacement + value[index + 1:]


@pytest.mark.parametrize("component", ["ciphertext", "iv", "auth_tag"])
def test_any_character_change_is_detected(cipher, component):
    field = cipher.encrypt("hunter2")
    original = getattr(field, component)
    for index in range(len(original)):
        tampered = EncryptedField(**{
            "ciphertext": field.ciphertext,
            "iv": field.iv,
            "auth_tag": field.auth_tag,
            component: _replace_char(original, index),
        })
        with pytest.raises(IntegrityError):
            cipher.decrypt(tampered)


@pytest.mark.parametrize("component", ["ciphertext", "iv", "auth_tag"])
def test_any_bit_flip_is_detected(cipher, component):
    field = cipher.encrypt("correct horse battery staple")
    raw = base64.b64decode(getattr(field, component))
    for bit in range(len(raw) * 8):
        flipped = bytearray(raw)
        flipped[bit // 8] ^= 1 << (bit % 8)
        parts = {"ciphertext": field.ciphertext, "iv": field.iv, "auth_tag": field.auth_tag}
        parts[component] = base64.b64encode(bytes(flipped)).decode()
        with pytest.raises(IntegrityError):
            cipher.decrypt(EncryptedField(**parts))


def test_swapped_components_are_detected(cipher):
    first = cipher.encrypt("one")
    second = cipher.encrypt("two")
    with pytest.raises(IntegrityError):
        cipher.decrypt(EncryptedField(first.ciphertext, second.iv, first.auth_tag))
    with pytest.raises(IntegrityError):
        cipher.decrypt(EncryptedField(first.ciphertext, first.iv, second.auth_tag))


def test_integrity_error_hides_primitive_details(cipher, other_cipher):
    with pytest.raises(IntegrityError) as exc:
        other_cipher.decrypt(cipher.encrypt("hunter2"))
    assert "InvalidTag" not in str(exc.value)


@pytest.mark.parametrize("data", [
    {"ciphertext": "x", "iv": "", "authTag": "y"},
    {"ciphertext": "", "iv": "aaaa", "authTag": "y"},
    {"ciphertext": "x", "iv": "aaaa", "authTag": None},
    {"ciphertext": "x", "iv": "aaaa"},
    {},
])
def test_malformed_triple_rejected(cipher, data):
    with pytest.raises(InvalidInputError):
        cipher.decrypt(data)


def test_decrypt_rejects_other_types(cipher):
    with pytest.raises(InvalidInputError):
        cipher.decrypt("just a string")
    with pytest.raises(InvalidInputError):
        cipher.decrypt(None)


def test_dict_form_round_trip(cipher):
    field = cipher.encrypt("hunter2")
    data = field.to_dict()
    assert set(data) == {"ciphertext", "iv", "authTag"}
    assert EncryptedField.from_dict(data) == field
    assert cipher.decrypt(data) == "hunter2"
    snake = {"ciphertext": field.ciphertext, "iv": field.iv, "auth_tag": field.auth_tag}
    assert cipher.decrypt(snake) == "hunter2"


def test_missing_key_encrypt_is_fail_soft(caplog):
    cipher = FieldCipher()
    before = get_feature_metrics_snapshot([PLAINTEXT_FALLBACK])[PLAINTEXT_FALLBACK]["events"]
    with caplog.at_level(logging.WARNING, logger="security.encryption"):
        assert cipher.encrypt("secret") is None
    assert "skipping encryption" in caplog.text
    after = get_feature_metrics_snapshot([PLAINTEXT_FALLBACK])[PLAINTEXT_FALLBACK]["events"]
    assert after == before + 1


def test_missing_key_decrypt_is_fail_closed(cipher):
    field = cipher.encrypt("secret")
    with pytest.raises(ConfigurationError):
        FieldCipher().decrypt(field)


def test_mandatory_mode_refuses_to_store_plaintext():
    cipher = FieldCipher(mode="mandatory")
    with pytest.raises(ConfigurationError):
        cipher.encrypt("secret")


def test_mode_read_from_environment(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_MODE", "mandatory")
    with pytest.raises(ConfigurationError):
        FieldCipher().encrypt("secret")
    monkeypatch.setenv("ENCRYPTION_MODE", "best-effort")
    assert FieldCipher().encrypt("secret") is None


def test_unknown_mode_rejected(monkeypatch):
    with pytest.raises(ConfigurationError):
        FieldCipher(mode="sometimes")
    monkeypatch.setenv("ENCRYPTION_MODE", "sometimes")
    with pytest.raises(ConfigurationError):
        FieldCipher().encrypt("secret")


def test_environment_key_source(encryption_key):
    env_cipher = FieldCipher()
    explicit = FieldCipher(EncryptionKey(bytes(32)))
    assert explicit.decrypt(env_cipher.encrypt("hunter2")) == "hunter2"
