"""
Auth Service for the single configured admin identity.
Validates credentials and drives the session store.
"""
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from auth_utils import (
    create_session_cookie,
    decode_session_cookie,
    hash_configured_password,
    is_password_hash,
    verify_password,
)
from crud.session import SessionRepository, DEFAULT_SESSION_TTL
from errors import AdminNotConfiguredError, AuthError, SessionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminConfig:
    """
    Admin identity and session parameters, injected into AuthService.
    """
    username: Optional[str]
    password: Optional[str] = None
    password_hash: Optional[str] = None
    session_secret: Optional[str] = None
    session_ttl: timedelta = DEFAULT_SESSION_TTL

    @property
    def is_configured(self) -> bool:
        return bool(self.username and (self.password or self.password_hash) and self.session_secret)

    def resolved_password_hash(self) -> str:
        # A pre-computed hash wins over the plaintext value
        if self.password_hash:
            return self.password_hash
        return hash_configured_password(self.password)


@dataclass(frozen=True)
class SessionState:
    is_authenticated: bool
    username: Optional[str] = None


ANONYMOUS = SessionState(is_authenticated=False)


@dataclass(frozen=True)
class LoginResult:
    username: str
    cookie_value: str
    expires_at: datetime


class AuthService:
    """
    Service for admin login, logout and session lookup.
    """

    def __init__(self, session_repo: SessionRepository, admin: AdminConfig):
        """
        Args:
            session_repo: SessionRepository backing the sessions
            admin: Configured admin identity
        """
        self.session_repo = session_repo
        self.admin = admin

    async def login(self, username: str, password: str) -> LoginResult:
        """
        Check credentials against the configured admin and open a session.

        Args:
            username: Supplied username
            password: Supplied plaintext password

        Returns:
            LoginResult carrying the signed cookie value for the response

        Raises:
            AdminNotConfiguredError: Admin credentials or session secret missing,
                or ADMIN_PASSWORD_HASH is not a usable hash
            AuthError: Username or password does not match
            SessionError: The session store failed
        """
        if not self.admin.is_configured:
            logger.error("Login attempted but admin credentials or SESSION_SECRET are not configured")
            raise AdminNotConfiguredError()

        if self.admin.password_hash and not is_password_hash(self.admin.password_hash):
            logger.error("ADMIN_PASSWORD_HASH is not a recognised password hash")
            raise AdminNotConfiguredError()

        username_ok = hmac.compare_digest(
            username.encode("utf-8"), self.admin.username.encode("utf-8")
        )
        # Always verify so timing does not reveal whether the username matched
        password_ok = verify_password(password, self.admin.resolved_password_hash())

        if not (username_ok and password_ok):
            logger.warning(f"Failed admin login for username '{username}'")
            raise AuthError("Invalid credentials")

        try:
            session = await self.session_repo.create(self.admin.username, ttl=self.admin.session_ttl)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to create session: {e}")
            raise SessionError("Failed to create session") from e

        cookie_value = create_session_cookie(
            session.token, session.username, session.expires_at, self.admin.session_secret
        )
        logger.info(f"Admin '{session.username}' logged in")
        return LoginResult(
            username=session.username,
            cookie_value=cookie_value,
            expires_at=session.expires_at,
        )

    async def logout(self, cookie_value: Optional[str]) -> None:
        """
        Destroy the session referenced by `cookie_value`. Idempotent.

        Raises:
            SessionError: The session store failed
        """
        token = decode_session_cookie(cookie_value, self.admin.session_secret)
        if token is None:
            return

        try:
            await self.session_repo.destroy(token)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to destroy session: {e}")
            raise SessionError("Failed to logout") from e
        logger.info("Admin logged out")

    async def current_session(self, cookie_value: Optional[str]) -> SessionState:
        """
        Resolve the session behind a cookie. Never raises: unknown, expired,
        forged or unreadable sessions all come back unauthenticated.
        """
        token = decode_session_cookie(cookie_value, self.admin.session_secret)
        if token is None:
            return ANONYMOUS

        try:
            session = await self.session_repo.read(token)
        except SQLAlchemyError as e:
            logger.exception(f"Session lookup failed: {e}")
            return ANONYMOUS

        if session is None or not session.is_authenticated:
            return ANONYMOUS
        return SessionState(is_authenticated=True, username=session.username)
