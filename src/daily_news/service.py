"""Fetch, validate and cache the daily news image"""

import base64

from loguru import logger

from . import datekey
from .config import settings
from .exceptions import InvalidDate, NewsError, StaleUpstream
from .fetcher import HttpFetcher
from .models import NewsEntry, content_hash
from .resolver import PayloadResolver
from .storage import DatabaseManager, NewsCacheRepository, get_db_manager

DATA_URI_PREFIX = "data:image/jpg;base64,"


def to_data_uri(image: str) -> str:
    """Wrap a base64 image in the data URI sent to chat channels"""
    return DATA_URI_PREFIX + image


class NewsService:
    """Serves daily news images from the cache, filling misses from upstream.

    Both the scheduled broadcast and the chat command go through
    ``get_image`` so that today's row is written at most once.
    """

    def __init__(
        self,
        db_manager: DatabaseManager | None = None,
        fetcher: HttpFetcher | None = None,
        resolver: PayloadResolver | None = None,
        api_url: str | None = None,
        archive_url: str | None = None,
        retention_days: int | None = None,
    ):
        self.db_manager = db_manager or get_db_manager()
        self.fetcher = fetcher or HttpFetcher()
        self.resolver = resolver or PayloadResolver()
        self.api_url = api_url or settings.api
        self.archive_url = (archive_url or settings.archive_url).rstrip("/")
        self.retention_days = retention_days or settings.retention_days

    def archive_url_for(self, key: str) -> str:
        """Archive URL of a past day's image"""
        return f"{self.archive_url}/{datekey.archive_path(key)}"

    async def get_image(self, date: str | None = None) -> str:
        """Get the base64 image for date, or for today when date is None.

        Raises:
            InvalidDate: date is not a real YYYY-MM-DD date
            StaleUpstream: today's upstream image equals yesterday's
            PayloadError: upstream content is not an image
        """
        entry = await self.get_entry(date)
        return entry.image

    async def get_entry(self, date: str | None = None) -> NewsEntry:
        """Get the cached entry for date, fetching it on a miss."""
        if date is None:
            return await self._get_today()

        if not datekey.is_valid_key(date):
            raise InvalidDate(date)

        cached = await self._lookup(date)
        if cached is not None:
            return cached

        image = await self._download(self.archive_url_for(date))
        return await self._store(date, image)

    async def _get_today(self) -> NewsEntry:
        today = datekey.today()

        cached = await self._lookup(today)
        if cached is not None:
            return cached

        image = await self._download(self.api_url)
        digest = content_hash(image)

        async with self.db_manager.get_session() as session:
            cache = NewsCacheRepository(session)

            yesterday = await cache.get(datekey.shift_days(today))
            if yesterday is not None and yesterday.content_hash == digest:
                logger.warning(f"Upstream image for {today} has not changed since yesterday")
                raise StaleUpstream(today, digest)

            cutoff = datekey.shift_days(today, self.retention_days)
            removed = await cache.prune_older_than(cutoff)
            if removed:
                logger.info(f"Pruned {removed} cached images older than {cutoff}")

            return await self._insert(cache, today, image)

    async def _lookup(self, key: str) -> NewsEntry | None:
        async with self.db_manager.get_session() as session:
            entry = await NewsCacheRepository(session).get(key)
        if entry is not None:
            logger.debug(f"Cache hit for {key}")
        return entry

    async def _download(self, url: str) -> bytes:
        logger.info(f"Fetching news image from {url}")
        try:
            raw = await self.fetcher.fetch(url)
            return await self.resolver.resolve(raw, self.fetcher.fetch)
        except Exception as e:
            logger.error(f"Error fetching image from {url}: {e}")
            raise

    async def _store(self, key: str, image: bytes) -> NewsEntry:
        async with self.db_manager.get_session() as session:
            return await self._insert(NewsCacheRepository(session), key, image)

    async def _insert(
        self, cache: NewsCacheRepository, key: str, image: bytes
    ) -> NewsEntry:
        encoded = base64.b64encode(image).decode("ascii")
        if await cache.put(key, encoded):
            logger.info(f"Cached news image for {key} ({len(image)} bytes)")
        else:
            logger.info(f"News image for {key} was cached concurrently, keeping it")

        stored = await cache.get(key)
        if stored is None:
            raise NewsError(f"News image for {key} vanished right after being cached")
        return stored
