"""Celery tasks for counter maintenance."""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.celery_app import celery_app
from app.core.config import settings
from app.services.counter_service import reconcile_post_counters

logger = logging.getLogger(__name__)


async def run_reconciliation(
    post_id: int | None = None,
    session_maker: async_sessionmaker[AsyncSession] | None = None,
) -> int:
    """Reconcile counters in one transaction.

    Without ``session_maker`` the run gets its own unpooled engine, disposed
    before returning: every Celery run is a fresh ``asyncio.run`` loop and
    pooled connections must not outlive it.
    """
    engine = None
    if session_maker is None:
        engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool)
        session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_maker() as db:
            try:
                fixed = await reconcile_post_counters(db, post_id)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
    finally:
        if engine is not None:
            await engine.dispose()
    return fixed


@celery_app.task
def reconcile_counters(post_id: int | None = None) -> int:
    """Safety net against counter drift left by partial failures."""
    fixed = asyncio.run(run_reconciliation(post_id))
    logger.info("reconcile_counters corrected %d row(s)", fixed)
    return fixed
