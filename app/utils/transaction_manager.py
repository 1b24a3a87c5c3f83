"""Transaction management utilities."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class TransactionManager:
    """Context manager for database transactions with automatic rollback."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit transaction context with commit or rollback."""
        try:
            if exc_type is None:
                await self.db.commit()
                logger.debug("Transaction committed successfully")
            else:
                await self.db.rollback()
                logger.warning(
                    "Transaction rolled back",
                    extra={"error_type": exc_type.__name__, "error": str(exc_val)},
                )
        except Exception:
            logger.exception("Error during transaction cleanup")
            await self.db.rollback()
            raise

        return False  # Don't suppress exceptions

    async def flush(self):
        """Flush pending changes so generated ids are available."""
        await self.db.flush()


@asynccontextmanager
async def transaction_scope(db: AsyncSession) -> AsyncGenerator[TransactionManager, None]:
    """
    Async context manager for database transactions.

    Usage:
        async with transaction_scope(db) as tx:
            db.add(post)
            await tx.flush()
            # Automatic commit on success, rollback on exception
    """
    async with TransactionManager(db) as tx_manager:
        yield tx_manager

