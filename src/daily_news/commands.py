"""Chat command surface for on-demand news requests"""

from dataclasses import dataclass

import aiohttp
from loguru import logger

from .exceptions import InvalidDate, PayloadError, StaleUpstream
from .service import NewsService, to_data_uri

INVALID_DATE_MESSAGE = "Not a valid date, expected YYYY-MM-DD"
STALE_MESSAGE = "Today's news has not been published yet, try again later"
PAYLOAD_MESSAGE = "Could not read the news image returned by the server"
NETWORK_MESSAGE = "Failed to download the news image"


@dataclass
class CommandReply:
    """Reply to a news command: an image data URI or a text message"""

    image: str | None = None
    text: str | None = None

    @property
    def ok(self) -> bool:
        return self.image is not None


class NewsCommand:
    """Handles ``news [date]``"""

    name = "news"

    def __init__(self, service: NewsService | None = None):
        self.service = service or NewsService()

    async def handle(self, argument: str | None = None) -> CommandReply:
        """Answer a news request

        Args:
            argument: Free text date argument, empty or None for today

        Returns:
            CommandReply with the image, or with a message on failure
        """
        date = argument.strip() if argument else None

        try:
            image = await self.service.get_image(date or None)
        except InvalidDate:
            return CommandReply(text=INVALID_DATE_MESSAGE)
        except StaleUpstream as e:
            logger.warning(f"News command: {e}")
            return CommandReply(text=STALE_MESSAGE)
        except PayloadError as e:
            logger.error(f"News command: unusable upstream payload: {e}")
            return CommandReply(text=PAYLOAD_MESSAGE)
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.error(f"News command: download failed: {e}")
            return CommandReply(text=NETWORK_MESSAGE)

        return CommandReply(image=to_data_uri(image))
