import pytest
from passlib.exc import PasswordTruncateError, PasswordValueError

from user_service.core.security import BCRYPT_ROUNDS, MAX_PASSWORD_BYTES, hash_password, verify_password


def test_hash_is_self_contained_bcrypt_string():
    hashed = hash_password("secret123")
    assert hashed.startswith(f"$2b${BCRYPT_ROUNDS}$")
    assert len(hashed) == 60
    assert "secret123" not in hashed


def test_hashes_are_salted():
    assert hash_password("secret123") != hash_password("secret123")


def test_verify_accepts_matching_password():
    hashed = hash_password("correct horse battery staple")
    assert verify_password("correct horse battery staple", hashed)


def test_verify_rejects_wrong_password():
    hashed = hash_password("secret123")
    assert not verify_password("secret124", hashed)
    assert not verify_password("", hashed)


def test_verify_handles_unicode():
    hashed = hash_password("пароль✅")
    assert verify_password("пароль✅", hashed)


def test_verify_rejects_malformed_hash():
    assert verify_password("secret123", "not-a-hash") is False


def test_hash_rejects_passwords_bcrypt_would_truncate():
    with pytest.raises(PasswordTruncateError):
        hash_password("A" * (MAX_PASSWORD_BYTES + 1))


def test_hash_counts_utf8_bytes():
    hash_password("é" * (MAX_PASSWORD_BYTES // 2))
    with pytest.raises(PasswordTruncateError):
        hash_password("é" * (MAX_PASSWORD_BYTES // 2 + 1))


def test_verify_rejects_password_sharing_first_72_bytes():
    hashed = hash_password("A" * MAX_PASSWORD_BYTES)
    assert verify_password("A" * MAX_PASSWORD_BYTES, hashed)
    assert not verify_password("A" * MAX_PASSWORD_BYTES + "WRONG", hashed)


def test_nul_byte_passwords():
    with pytest.raises(PasswordValueError):
        hash_password("abc\x00def")
    assert verify_password("abc\x00def", hash_password("abc")) is False
