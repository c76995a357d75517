"""Password hashing and JWT creation/verification."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt

from training_admin.config import settings

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    """bcrypt hash; input truncated to bcrypt's 72-byte limit."""
    return bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8")[:72], password_hash.encode("utf-8"))


def _signing_key() -> tuple[str, str]:
    if settings.use_rs256:
        return settings.jwt_private_key.strip(), "RS256"
    return settings.secret_key, settings.jwt_algorithm


def _verification_key() -> tuple[str, list[str]]:
    if settings.use_rs256:
        return settings.jwt_public_key.strip(), ["RS256"]
    return settings.secret_key, [settings.jwt_algorithm]


def create_access_token(user_id: int, email: str, role_id: int | None = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role_id": role_id,
        "type": ACCESS_TOKEN_TYPE,
        "exp": expire,
    }
    key, algorithm = _signing_key()
    return jwt.encode(payload, key, algorithm=algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry; raises ``jose.JWTError`` on any failure."""
    key, algorithms = _verification_key()
    return jwt.decode(token, key, algorithms=algorithms)


def create_refresh_token() -> str:
    """Opaque refresh token; only its hash is stored."""
    return secrets.token_urlsafe(32)


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
