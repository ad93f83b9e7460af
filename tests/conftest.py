"""
Test configuration and fixtures for the Gemini MCP server tests.

Every test runs against a fake google-genai client: ``client.aio.models``
and ``client.aio.files`` are AsyncMocks, so no test touches the network.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.config import Config
from core.gemini_client import GeminiClient


@pytest.fixture
def config(tmp_path):
    """Config with a short base timeout and a temporary image directory."""
    return Config(api_key="test-key", timeout_ms=1000, output_dir=str(tmp_path / "images"))


@pytest.fixture
def fake_genai():
    """Stand-in for google.genai.Client."""
    mock = MagicMock()
    mock.aio.models.generate_content = AsyncMock()
    mock.aio.models.generate_images = AsyncMock()
    mock.aio.files.upload = AsyncMock()
    mock.aio.files.get = AsyncMock()
    return mock


@pytest.fixture
def sleeps():
    """Records every simulated sleep requested by the upload poller."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)
    return _sleep


@pytest.fixture
def gemini(config, fake_genai, fake_sleep):
    """GeminiClient wired to the fake SDK client and simulated sleep."""
    return GeminiClient(config, client=fake_genai, sleep=fake_sleep)
