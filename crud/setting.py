"""
SettingRepository for database operations on Setting model
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite

from database_models import Setting

logger = logging.getLogger(__name__)

# Dialects with native INSERT ... ON CONFLICT support
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SettingRepository:
    """
    Repository class for Setting database operations.
    Settings are key/value rows with at most one row per key.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: AsyncSession instance for database operations
        """
        self.db = db

    async def get_setting(self, key: str) -> Optional[Setting]:
        """
        Retrieve a setting by key.

        Args:
            key: Setting key

        Returns:
            Setting object if found, None otherwise
        """
        result = await self.db.execute(
            select(Setting)
            .where(Setting.key == key)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all_settings(self) -> list[Setting]:
        """
        Retrieve all settings in insertion order.
        """
        result = await self.db.execute(
            select(Setting)
            .order_by(Setting.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def set_setting(self, key: str, value: str) -> Setting:
        """
        Insert or overwrite the value stored under `key`.

        Uses a single INSERT ... ON CONFLICT (key) DO UPDATE statement, so
        concurrent writers to the same key cannot both insert. On dialects
        without ON CONFLICT the insert is attempted first and a unique-key
        violation is retried as an update.

        Args:
            key: Setting key
            value: New value

        Returns:
            The stored Setting object
        """
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)

        if insert is None:
            return await self._insert_or_update(key, value)

        stmt = insert(Setting).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Setting.key],
            set_={"value": stmt.excluded["value"]},
        )
        result = await self.db.scalars(
            stmt.returning(Setting),
            execution_options={"populate_existing": True},
        )
        setting = result.one()
        await self.db.commit()
        return setting

    async def _insert_or_update(self, key: str, value: str) -> Setting:
        try:
            self.db.add(Setting(key=key, value=value))
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.debug(f"Setting '{key}' already exists, updating in place")
            await self.db.execute(
                update(Setting).where(Setting.key == key).values(value=value)
            )
            await self.db.commit()

        setting = await self.get_setting(key)
        return setting
