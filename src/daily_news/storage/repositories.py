"""Repository pattern implementations for database operations."""

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import NewsEntry
from .models import NewsEntryDB

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING
_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class NewsCacheRepository:
    """Insert-only keyed store of daily news images.

    Rows are keyed by fixed-width ``YYYY-MM-DD`` strings, so comparing keys
    as strings orders them by date. Pruning depends on this.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session.

        Args:
            session: AsyncSession instance
        """
        self.session = session

    async def get(self, key: str) -> NewsEntry | None:
        """Get the entry stored for a date key.

        Args:
            key: Date key, YYYY-MM-DD

        Returns:
            Optional[NewsEntry]: Cached entry or None
        """
        result = await self.session.execute(
            select(NewsEntryDB).where(NewsEntryDB.date == key)
        )
        row = result.scalar_one_or_none()
        return NewsEntry.model_validate(row) if row is not None else None

    async def put(self, key: str, image: str) -> bool:
        """Insert an entry unless one already exists for key.

        The first writer wins: an existing row is never overwritten.

        Args:
            key: Date key, YYYY-MM-DD
            image: Base64 encoded image

        Returns:
            bool: True if a row was inserted, False if key was already taken
        """
        dialect = self.session.get_bind().dialect.name
        insert = _CONFLICT_INSERTS.get(dialect)

        if insert is not None:
            stmt = (
                insert(NewsEntryDB.__table__)
                .values(date=key, image=image)
                .on_conflict_do_nothing(index_elements=["date"])
            )
            result = await self.session.execute(stmt)
            await self.session.flush()
            return result.rowcount == 1

        # Generic fallback without native conflict handling
        if await self.session.get(NewsEntryDB, key) is not None:
            return False
        self.session.add(NewsEntryDB(date=key, image=image))
        await self.session.flush()
        return True

    async def prune_older_than(self, cutoff_key: str) -> int:
        """Delete entries dated strictly before cutoff_key.

        Args:
            cutoff_key: Oldest date key to keep

        Returns:
            int: Number of entries removed
        """
        result = await self.session.execute(
            delete(NewsEntryDB).where(NewsEntryDB.date < cutoff_key)
        )
        await self.session.flush()
        return result.rowcount or 0

    async def list_dates(self) -> list[str]:
        """Get all cached date keys, oldest first."""
        result = await self.session.execute(
            select(NewsEntryDB.date).order_by(NewsEntryDB.date)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count cached entries."""
        result = await self.session.execute(select(func.count(NewsEntryDB.date)))
        return result.scalar_one()
