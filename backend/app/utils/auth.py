"""Password hashing utilities"""
import bcrypt

from app.config import settings


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password with a fresh salt (bcrypt).

    bcrypt only looks at the first 72 bytes; longer input is truncated.
    """
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Constant-time check of a plain password against a stored bcrypt hash"""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
