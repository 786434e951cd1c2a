"""
Shared utility functions for routers, repositories and services
"""
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from errors import InternalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime.

    Timestamps are stored naive-UTC because SQLite drops tzinfo on read;
    keeping every comparison naive avoids mixing aware and naive values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def run_store_call(call: Callable[[], Awaitable[T]], failure_message: str) -> T:
    """
    Run a repository call, translating store failures into InternalError.

    The original exception is logged with its traceback; the client only
    sees `failure_message`.

    Example:
        projects = await run_store_call(repo.get_all, "Failed to fetch projects")
    """
    try:
        return await call()
    except SQLAlchemyError as e:
        logger.exception(f"{failure_message}: {e}")
        raise InternalError(failure_message) from e
