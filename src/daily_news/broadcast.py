"""Delivery of the daily image to subscribed channels"""

from abc import ABC, abstractmethod


class BaseBroadcaster(ABC):
    """Abstract base class for message broadcasters

    The hosting bot implements this to send a message to every channel
    subscribed to the daily news.
    """

    @abstractmethod
    async def broadcast(self, message: str) -> None:
        """Send message to all subscribed destinations

        Args:
            message: Image data URI
        """
        pass
