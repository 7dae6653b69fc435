from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.adapters.infobip import InfobipHandler
from app.services.backend import MemoryBackend, get_backend
from app.types import Channel, ChannelType
from main import app
from server.config import get_settings
from tests.fixtures.infobip_events import CHANNEL_UUID, SEND_URL


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("IB_SEND_URL", SEND_URL)
    monkeypatch.setenv("COURIER_DOMAIN", "courier.example.com")
    monkeypatch.delenv("CHANNELS_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def channel() -> Channel:
    return Channel(
        uuid=CHANNEL_UUID,
        channel_type=ChannelType.INFOBIP,
        address="2020",
        country="NG",
        config={"username": "user1", "password": "pass1"},
    )


@pytest.fixture()
def backend(channel: Channel) -> MemoryBackend:
    return MemoryBackend([channel])


@pytest.fixture()
def handler(backend: MemoryBackend) -> InfobipHandler:
    return InfobipHandler(backend)


@pytest.fixture()
def client(backend: MemoryBackend) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_backend] = lambda: backend
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
