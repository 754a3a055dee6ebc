"""Demo script: serve the daily news image on a schedule."""

import asyncio
import signal
import sys

from loguru import logger

from daily_news.broadcast import BaseBroadcaster
from daily_news.commands import NewsCommand
from daily_news.config import settings
from daily_news.log import setup_logging
from daily_news.scheduler import Scheduler
from daily_news.service import NewsService
from daily_news.storage import close_database, init_database


class ConsoleBroadcaster(BaseBroadcaster):
    """Prints a short preview instead of sending to chat channels."""

    async def broadcast(self, message: str) -> None:
        logger.info(f"Broadcast {len(message)} chars: {message[:60]}...")


async def main():
    """Run scheduler demo."""
    setup_logging("INFO")
    settings.create_directories()
    await init_database()

    service = NewsService()
    scheduler = Scheduler(service=service, broadcaster=ConsoleBroadcaster())
    scheduler.setup_default_tasks()
    scheduler.start()
    logger.info("Scheduler started. Press Ctrl+C to stop.")

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    # Answer a command right away, as a chat user would
    argument = sys.argv[1] if len(sys.argv) > 1 else None
    reply = await NewsCommand(service).handle(argument)
    if reply.ok:
        logger.info(f"Command returned image ({len(reply.image)} chars)")
    else:
        logger.info(f"Command returned message: {reply.text}")

    await stop.wait()
    logger.info("Shutting down scheduler...")
    scheduler.stop()
    await close_database()


if __name__ == "__main__":
    asyncio.run(main())
