# user_service/core/security.py

from passlib.context import CryptContext


BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
    bcrypt__truncate_error=True,
)


def hash_password(password: str) -> str:
    """
    Raises passlib's PasswordTruncateError for passwords over 72 bytes and
    PasswordValueError for passwords bcrypt cannot encode (NUL characters).
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # Longer passwords could never have been hashed; don't let bcrypt truncate them into a match
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Stored value is not a recognizable bcrypt hash, or the password has a NUL byte
        return False
