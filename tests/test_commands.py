"""Tests for the news chat command."""

from unittest.mock import AsyncMock

import aiohttp
import pytest

from daily_news.commands import (
    INVALID_DATE_MESSAGE,
    NETWORK_MESSAGE,
    PAYLOAD_MESSAGE,
    STALE_MESSAGE,
    NewsCommand,
)
from daily_news.exceptions import InvalidDate, InvalidLinkedImage, StaleUpstream, UnrecognizedPayload


@pytest.fixture
def mock_service():
    service = AsyncMock()
    service.get_image.return_value = "QUJD"
    return service


@pytest.fixture
def command(mock_service):
    return NewsCommand(service=mock_service)


class TestNewsCommand:
    """Test command argument handling and replies."""

    @pytest.mark.asyncio
    async def test_today(self, command, mock_service):
        reply = await command.handle()

        assert reply.ok
        assert reply.image == "data:image/jpg;base64,QUJD"
        assert reply.text is None
        mock_service.get_image.assert_called_once_with(None)

    @pytest.mark.asyncio
    async def test_blank_argument_means_today(self, command, mock_service):
        await command.handle("   ")

        mock_service.get_image.assert_called_once_with(None)

    @pytest.mark.asyncio
    async def test_explicit_date_is_stripped(self, command, mock_service):
        reply = await command.handle(" 2024-03-08\n")

        assert reply.ok
        mock_service.get_image.assert_called_once_with("2024-03-08")

    @pytest.mark.asyncio
    async def test_invalid_date(self, command, mock_service):
        mock_service.get_image.side_effect = InvalidDate("2024-02-30")

        reply = await command.handle("2024-02-30")

        assert not reply.ok
        assert reply.text == INVALID_DATE_MESSAGE

    @pytest.mark.asyncio
    async def test_stale_upstream(self, command, mock_service):
        mock_service.get_image.side_effect = StaleUpstream("2024-03-10", "ab" * 32)

        reply = await command.handle()

        assert reply.text == STALE_MESSAGE

    @pytest.mark.asyncio
    async def test_payload_errors(self, command, mock_service):
        for error in [UnrecognizedPayload("html"), InvalidLinkedImage("http://x/y.jpg")]:
            mock_service.get_image.side_effect = error

            reply = await command.handle()

            assert reply.text == PAYLOAD_MESSAGE

    @pytest.mark.asyncio
    async def test_network_errors(self, command, mock_service):
        for error in [aiohttp.ClientConnectionError("refused"), TimeoutError()]:
            mock_service.get_image.side_effect = error

            reply = await command.handle()

            assert reply.text == NETWORK_MESSAGE

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, command, mock_service):
        mock_service.get_image.side_effect = RuntimeError("database is gone")

        with pytest.raises(RuntimeError):
            await command.handle()
