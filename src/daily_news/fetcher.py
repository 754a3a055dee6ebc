"""HTTP transport for upstream news images"""

import asyncio
import time

import aiohttp
from loguru import logger

from .config import settings


class HttpFetcher:
    """Downloads response bodies with aiohttp

    Features:
    - Total request timeout from settings
    - Exponential backoff retry on timeouts and network errors
    - Client errors (4xx) fail immediately
    """

    def __init__(
        self,
        timeout: int | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ):
        """Initialize fetcher

        Args:
            timeout: Total timeout in seconds, defaults to settings.request_timeout
            max_retries: Attempts per URL, defaults to settings.max_retries
            retry_delay: Base backoff delay, defaults to settings.retry_delay
        """
        self.timeout = timeout or settings.request_timeout
        self.max_retries = max_retries or settings.max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.retry_delay

    async def fetch(self, url: str) -> bytes:
        """Fetch the body of url

        Args:
            url: URL to download

        Returns:
            Raw response body

        Raises:
            aiohttp.ClientResponseError: Non-200 response
            aiohttp.ClientError: Network failure after all retries
            TimeoutError: Timeout after all retries
        """
        last_error: Exception | None = None
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        for attempt in range(self.max_retries):
            start_time = time.time()
            try:
                logger.info(f"Fetching {url} (attempt {attempt + 1})")
                async with aiohttp.ClientSession() as session:
                    async with session.get(url, timeout=timeout) as response:
                        if response.status != 200:
                            raise aiohttp.ClientResponseError(
                                request_info=response.request_info,
                                history=response.history,
                                status=response.status,
                            )
                        body = await response.read()

                logger.info(
                    f"Fetched {len(body)} bytes from {url} "
                    f"in {time.time() - start_time:.2f}s"
                )
                return body

            except aiohttp.ClientResponseError as e:
                logger.error(f"HTTP error {e.status} fetching {url}")
                if 400 <= e.status < 500:
                    raise
                last_error = e

            except TimeoutError as e:
                logger.warning(f"Timeout fetching {url} (attempt {attempt + 1})")
                last_error = e

            except aiohttp.ClientError as e:
                logger.warning(f"Network error fetching {url}: {e}")
                last_error = e

            # Exponential backoff before retry
            if attempt < self.max_retries - 1:
                delay = self.retry_delay * (2**attempt)
                logger.debug(f"Retrying {url} after {delay:.1f}s")
                await asyncio.sleep(delay)

        logger.error(f"Failed to fetch {url} after {self.max_retries} attempts")
        if last_error is None:
            raise RuntimeError(f"No attempt was made to fetch {url}")
        raise last_error
