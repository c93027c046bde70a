import httpx
import pytest

from app import create_app
from core.config import load_config
from helpers import TOKEN, WEBHOOK, MockUpstream, RecordingLogger


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def config():
    return load_config({"TELEGRAM_TOKEN": TOKEN, "N8N_WEBHOOK": WEBHOOK})


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def upstream():
    return MockUpstream()


@pytest.fixture
async def outbound(upstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as client:
        yield client


@pytest.fixture
async def gateway(config, logger, outbound):
    """In-process client for the app; app errors after headers surface as truncated bodies."""
    app = create_app(config, logger, http_client=outbound)
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://gateway.test") as client:
        yield client
