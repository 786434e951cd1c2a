"""
Background sweep that deletes expired admin sessions.

Expired sessions already read as absent, so this only keeps the
admin_sessions table from growing.
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from crud.session import SessionRepository

logger = logging.getLogger(__name__)


async def purge_expired_sessions(session_factory: async_sessionmaker) -> int:
    """Run one sweep and return the number of sessions removed."""
    async with session_factory() as db:
        removed = await SessionRepository(db).purge_expired()
    if removed:
        logger.info(f"Purged {removed} expired admin session(s)")
    return removed


class SessionReaper:
    """
    Periodically purges expired sessions on the running event loop.
    """

    def __init__(self, session_factory: async_sessionmaker, interval_seconds: float):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self.interval_seconds <= 0:
            logger.info("Session purge disabled (interval <= 0)")
            return
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="session-reaper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await purge_expired_sessions(self.session_factory)
            except SQLAlchemyError as e:
                # retried on the next tick
                logger.error(f"Session purge failed: {e}")
