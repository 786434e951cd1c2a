"""
SessionRepository: durable store of admin sessions keyed by opaque token
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from database_models import AdminSession
from utils.shared_utils import utcnow

DEFAULT_SESSION_TTL = timedelta(hours=24)


class SessionRepository:
    """
    Maps session tokens to authentication state.

    Expiry is absolute (created_at + ttl). Expired rows read as absent and
    are deleted when encountered; purge_expired() sweeps the rest.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, username: str, ttl: timedelta = DEFAULT_SESSION_TTL) -> AdminSession:
        """
        Create an authenticated session for `username`.

        Args:
            username: Identity recorded in the session
            ttl: Lifetime measured from creation

        Returns:
            The stored AdminSession, including its fresh token
        """
        now = utcnow()
        session = AdminSession(
            token=secrets.token_urlsafe(32),
            username=username,
            is_authenticated=True,
            created_at=now,
            expires_at=now + ttl,
        )
        self.db.add(session)
        await self.db.commit()
        return session

    async def read(self, token: str, now: Optional[datetime] = None) -> Optional[AdminSession]:
        """
        Look up a live session.

        Returns:
            AdminSession if the token is known and not expired, None otherwise
        """
        if not token:
            return None

        result = await self.db.execute(
            select(AdminSession).where(AdminSession.token == token)
        )
        session = result.scalar_one_or_none()
        if session is None:
            return None

        if session.expires_at <= (now or utcnow()):
            await self.destroy(token)
            return None
        return session

    async def destroy(self, token: str) -> bool:
        """
        Remove a session. Destroying an unknown token is not an error.

        Returns:
            True if a row was removed
        """
        result = await self.db.execute(
            delete(AdminSession).where(AdminSession.token == token)
        )
        await self.db.commit()
        return (result.rowcount or 0) > 0

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """
        Delete every expired session.

        Returns:
            Number of rows removed
        """
        result = await self.db.execute(
            delete(AdminSession).where(AdminSession.expires_at <= (now or utcnow()))
        )
        await self.db.commit()
        return result.rowcount or 0
