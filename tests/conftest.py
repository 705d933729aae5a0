"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from krishimitra.services.chat import ChatService


@pytest.fixture
def mock_gateway():
    """A model gateway whose completion returns a canned answer."""
    gateway = MagicMock()
    gateway.complete = AsyncMock(return_value="Use neem oil spray at 5 ml per litre.")
    return gateway


@pytest.fixture
def chat_service(mock_gateway):
    """Chat service without web search configured."""
    return ChatService(gateway=mock_gateway, tavily_api_key=None)


@pytest.fixture
def mock_async_client():
    """Patch httpx.AsyncClient and yield the client used inside ``async with``."""
    with patch("httpx.AsyncClient") as mock_client_class:
        client = AsyncMock()
        mock_client_class.return_value.__aenter__.return_value = client
        yield client


@pytest.fixture
def make_response():
    """Return a factory for mock httpx responses.

    Usage:
        def test_something(mock_async_client, make_response):
            mock_async_client.post.return_value = make_response(200, {"results": []})
    """

    def _make(status_code: int, payload=None, text: str = "") -> MagicMock:
        response = MagicMock(spec=httpx.Response)
        response.status_code = status_code
        response.text = text
        response.json.return_value = payload if payload is not None else {}
        return response

    return _make
