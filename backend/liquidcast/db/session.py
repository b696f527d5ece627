import logging
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from liquidcast.db.engine import async_session_factory

logger = logging.getLogger(__name__)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session; an auto-created default playlist is only kept if the request succeeds."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.debug("Rolling back request session after %s", type(e).__name__)
            await session.rollback()
            raise
