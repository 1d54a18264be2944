"""
Password hashing and session tokens.

Passwords are stored as bcrypt hashes. Session tokens are HS256 JWTs
carrying the user id (``sub``) and role.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from bistro.core.config import get_settings
from bistro.core.exceptions import Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    """Identity resolved from a verified session token."""
    user_id: int
    role: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    user_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed session token.

    Args:
        user_id: Primary key of the authenticated user
        role: "user" or "admin"
        expires_delta: Token lifetime (defaults to JWT_EXPIRE_DAYS)

    Returns:
        Encoded JWT string
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.jwt_expire_days)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify a session token and extract its claims.

    Raises:
        Unauthorized: If the token is expired, tampered with or malformed
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Session expired, please log in again")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise Unauthorized("Not authorized, token failed")

    try:
        return TokenClaims(user_id=int(claims["sub"]), role=claims.get("role", "user"))
    except (KeyError, TypeError, ValueError):
        raise Unauthorized("Not authorized, token failed")
