"""Credential hashing and access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from sif_safety.core.config import settings


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def create_access_token(
    email: str,
    *,
    is_moderator: bool = False,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a signed token for the account identified by ``email``.

    The ``mod`` claim is informational only; role checks always re-read the
    user record so a revoked moderator loses access immediately.
    """
    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    claims: dict[str, Any] = {
        "sub": email,
        "mod": is_moderator,
        "iat": issued,
        "exp": issued + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Return the token claims, or None when the signature or expiry is invalid."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if not claims.get("sub"):
        return None
    return claims
