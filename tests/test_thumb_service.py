"""Tests for the thumbnail cache."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from services.thumb_service import DEFAULT_THUMB_TTL, ThumbCacheService


class TestThumbCacheService:
    async def test_round_trip(self, thumb_service, jpeg_bytes):
        thumb_id = await thumb_service.store(jpeg_bytes)
        assert await thumb_service.retrieve(thumb_id) == jpeg_bytes

    async def test_ids_are_128_bit_hex(self, thumb_service):
        thumb_id = await thumb_service.store(b"x")
        assert len(thumb_id) == 32
        int(thumb_id, 16)

    async def test_ids_are_unique(self, thumb_service):
        ids = {await thumb_service.store(b"x") for _ in range(20)}
        assert len(ids) == 20

    async def test_unknown_id(self, thumb_service):
        assert await thumb_service.retrieve("0" * 32) is None

    async def test_expires_after_ttl(self, thumb_service, clock, jpeg_bytes):
        thumb_id = await thumb_service.store(jpeg_bytes)

        clock.advance(DEFAULT_THUMB_TTL - 1)
        assert await thumb_service.retrieve(thumb_id) == jpeg_bytes

        clock.advance(1)
        assert await thumb_service.retrieve(thumb_id) is None

    async def test_custom_ttl(self, session_factory, clock):
        service = ThumbCacheService(session_factory, ttl=60, clock=clock)
        thumb_id = await service.store(b"abc")
        clock.advance(61)
        assert await service.retrieve(thumb_id) is None

    async def test_cleanup_expired(self, session_factory, clock):
        short = ThumbCacheService(session_factory, ttl=10, clock=clock)
        long = ThumbCacheService(session_factory, ttl=1000, clock=clock)
        old_id = await short.store(b"old")
        new_id = await long.store(b"new")

        clock.advance(20)
        assert await long.cleanup_expired() == 1
        assert await long.retrieve(new_id) == b"new"
        assert await short.retrieve(old_id) is None

    async def test_cleanup_nothing_expired(self, thumb_service):
        await thumb_service.store(b"x")
        assert await thumb_service.cleanup_expired() == 0

    async def test_retrieve_database_error_raises(self, broken_thumb_service):
        with pytest.raises(SQLAlchemyError):
            await broken_thumb_service.retrieve("0" * 32)

    async def test_store_database_error_raises(self, broken_thumb_service):
        with pytest.raises(SQLAlchemyError):
            await broken_thumb_service.store(b"x")
