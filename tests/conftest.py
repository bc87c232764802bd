import json
from datetime import datetime, timedelta

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.pool import StaticPool

from clients.ntfy_client import NtfyClient
from core.database import create_tables
from routes.webhooks import router
from services.relay_service import RelayConfig, RelayService
from services.thumb_service import ThumbCacheService

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01fake-jpeg-body\xff\xd9"


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class NtfyRecorder:
    """记录发往 ntfy 的请求，并返回预设的响应"""

    def __init__(self, status_code: int = 200, text: str = '{"id":"abc"}'):
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def thumb_service(session_factory, clock):
    return ThumbCacheService(session_factory, clock=clock)


@pytest.fixture
def ntfy():
    return NtfyRecorder()


@pytest.fixture
async def make_client(thumb_service, ntfy):
    """按给定配置组装应用，返回指向它的 httpx.AsyncClient"""
    clients: list[httpx.AsyncClient] = []

    def _make(**config) -> httpx.AsyncClient:
        defaults = {
            "allowed_user": "alice",
            "ntfy_base": "https://ntfy.example.com",
            "ntfy_topic": "plex",
        }
        defaults.update(config)
        ntfy_client = NtfyClient(httpx.AsyncClient(transport=httpx.MockTransport(ntfy)))

        app = FastAPI()
        app.include_router(router)
        app.state.thumb_service = thumb_service
        app.state.relay_service = RelayService(RelayConfig(**defaults), ntfy_client, thumb_service)

        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://relay.test")
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def plex_payload():
    def _payload(**overrides) -> dict:
        payload = {
            "event": "media.play",
            "Account": {"title": "alice"},
            "Metadata": {"type": "movie", "title": "Dune", "year": 2021},
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
async def broken_thumb_service(clock):
    """数据表不存在的缩略图缓存，任何读写都会抛出 OperationalError"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield ThumbCacheService(
        async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False),
        clock=clock,
    )
    await engine.dispose()
