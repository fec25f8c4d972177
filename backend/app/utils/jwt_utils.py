"""JWT utilities: RS256 keypair management, token signing and verification"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from app.config import settings
from app.errors import AuthenticationError
from app.utils.logger import logger

# ---------------------------------------------------------------------------
# Keypair management
# ---------------------------------------------------------------------------

_private_key: Any = None   # cryptography RSAPrivateKey object
_public_key: Any = None    # cryptography RSAPublicKey object


def _load_keypair() -> None:
    """Load or auto-generate the RSA keypair.

    Reads JWT_PRIVATE_KEY from settings (PEM string).
    If absent, generates a fresh RSA-2048 keypair and logs the private key PEM
    so the operator can paste it into .env to make it persistent across restarts.
    """
    global _private_key, _public_key

    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import rsa

    if settings.JWT_PRIVATE_KEY:
        pem = settings.JWT_PRIVATE_KEY.encode()
        _private_key = serialization.load_pem_private_key(pem, password=None)
        _public_key = _private_key.public_key()
        logger.info("JWT keypair loaded from JWT_PRIVATE_KEY setting")
    else:
        _private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        _public_key = _private_key.public_key()

        pem_str = _private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()

        logger.warning(
            "JWT_PRIVATE_KEY not set, auto-generated RSA-2048 keypair for this session. "
            "All tokens will be invalidated on restart. "
            "Set the following in backend/.env to persist the key:\n"
            f"JWT_PRIVATE_KEY=\"{pem_str.strip()}\""
        )


def get_private_key() -> Any:
    """Return the loaded private key, initialising on first call."""
    if _private_key is None:
        _load_keypair()
    return _private_key


def get_public_key() -> Any:
    """Return the loaded public key, initialising on first call."""
    if _public_key is None:
        _load_keypair()
    return _public_key


# ---------------------------------------------------------------------------
# Token creation
# ---------------------------------------------------------------------------

def create_access_token(account_id: int, email: str) -> str:
    """Sign and return a JWT access token for an account.

    Claims: ``sub`` (account id as string), ``email``, ``jti``, ``iat`` and
    ``exp`` (``JWT_EXPIRE_SECONDS`` after issuance).
    """
    now = int(datetime.now(timezone.utc).timestamp())

    payload: Dict[str, Any] = {
        "sub": str(account_id),
        "email": email,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + settings.JWT_EXPIRE_SECONDS,
    }

    headers = {"kid": settings.JWT_KEY_ID} if settings.JWT_KEY_ID else None

    return jwt.encode(payload, get_private_key(), algorithm=settings.JWT_ALGORITHM, headers=headers)


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------

def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify a JWT and return its payload.

    Checks the signature against our public key and the ``exp`` claim.

    Raises:
        AuthenticationError: on any verification failure. The message never
        says which check failed.
    """
    try:
        payload = jwt.decode(
            token,
            get_public_key(),
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as exc:
        logger.debug(f"JWT decode failed: {exc}")
        raise AuthenticationError(headers={"WWW-Authenticate": "Bearer"})

    return payload
