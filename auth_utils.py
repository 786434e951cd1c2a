"""
Authentication utilities: Password hashing and signed session cookies
"""

import jwt
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional
from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto"
)

# Session cookie signing configuration
ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Hash a password using argon2"""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash (constant time)"""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # Malformed or unrecognised hash
        return False


@lru_cache(maxsize=4)
def is_password_hash(value: str) -> bool:
    """True when `value` is a hash this context can verify against."""
    return pwd_context.identify(value) is not None


@lru_cache(maxsize=4)
def hash_configured_password(password: str) -> str:
    """
    Hash the configured admin password once per process.

    argon2 is deliberately slow; caching keeps login latency to a single
    verify instead of hash + verify.
    """
    return hash_password(password)


def create_session_cookie(session_id: str, username: str, expires_at: datetime, secret: str) -> str:
    """
    Wrap a session token in a signed JWT for the session cookie.

    Args:
        session_id: Opaque token from the session store
        username: Session owner
        expires_at: Naive UTC expiry of the session
        secret: Session signing secret

    Raises:
        ValueError: If secret is empty
    """
    if not secret:
        raise ValueError("SESSION_SECRET is not set. Cannot sign session cookie.")

    payload = {
        "sid": session_id,
        "sub": username,
        "exp": expires_at.replace(tzinfo=timezone.utc),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_session_cookie(value: str, secret: Optional[str]) -> Optional[str]:
    """Return the session token inside a signed cookie, or None if invalid/expired."""
    if not value or not secret:
        return None

    try:
        payload = jwt.decode(value, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None

    session_id = payload.get("sid")
    return session_id if isinstance(session_id, str) else None
