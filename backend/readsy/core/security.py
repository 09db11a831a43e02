"""
Security utilities including password hashing and JWT token generation.
"""

import hashlib
import hmac
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from readsy.config import settings

# Use bcrypt directly instead of passlib
# passlib has problems with bcrypt 5.0.0+ during initialization

# JWT configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against a hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Generate a password hash."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def hash_token(token: str) -> str:
    """Digest stored for a refresh token (bcrypt truncates at 72 bytes, JWTs are longer)."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def token_matches(token: str, token_hash: Optional[str]) -> bool:
    """Constant-time check of a refresh token against its stored digest."""
    if not token_hash:
        return False
    return hmac.compare_digest(hash_token(token), token_hash)


def _create_token(
    data: Dict[str, Any], secret: str, token_type: str, expires_delta: timedelta
) -> str:
    to_encode = data.copy()
    now = datetime.utcnow()
    to_encode.update(
        {
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
            # Unique per token so two pairs issued in the same second differ
            "jti": uuid.uuid4().hex,
        }
    )
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a new JWT access token."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES)
    return _create_token(data, settings.JWT_ACCESS_SECRET, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a new JWT refresh token."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)
    return _create_token(data, settings.JWT_REFRESH_SECRET, REFRESH_TOKEN_TYPE, expires_delta)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify an access token.

    Raises:
        JWTError: signature, expiry or token type is invalid.
    """
    payload = jwt.decode(token, settings.JWT_ACCESS_SECRET, algorithms=[ALGORITHM])
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise JWTError("Not an access token")
    return payload


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a refresh token.

    Raises:
        JWTError: signature, expiry or token type is invalid.
    """
    payload = jwt.decode(token, settings.JWT_REFRESH_SECRET, algorithms=[ALGORITHM])
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise JWTError("Not a refresh token")
    return payload
