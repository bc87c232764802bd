import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from repositories.thumb_repo import ThumbRepository

DEFAULT_THUMB_TTL = 3 * 60 * 60
KEY_PREFIX = "thumb:"

def thumb_key(thumb_id: str) -> str:
    return f"{KEY_PREFIX}{thumb_id}"

class ThumbCacheService:
    """缩略图临时缓存

    Plex 的缩略图随 Webhook 一起上传，ntfy 只能通过 URL 拉取附件，
    因此先把图片存起来，再由 /thumb/{id} 对外提供。
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ttl: int = DEFAULT_THUMB_TTL,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.session_factory = session_factory
        self.ttl = ttl
        self.clock = clock

    async def store(self, data: bytes) -> str:
        """保存缩略图

        Args:
            data: 图片原始字节
        Returns:
            str: 新生成的缩略图 ID（128 位随机数，32 位十六进制）
        Raises:
            SQLAlchemyError: 写入数据库失败
        """
        thumb_id = secrets.token_hex(16)
        now = self.clock()
        expires_at = now + timedelta(seconds=self.ttl)

        async with self.session_factory() as session:
            try:
                await ThumbRepository(session).add(thumb_key(thumb_id), data, expires_at, now)
            except SQLAlchemyError as e:
                logger.error("保存缩略图失败：{}", e)
                await session.rollback()
                raise

        logger.info("已缓存缩略图 {}（{} 字节，{} 过期）", thumb_id, len(data), expires_at)
        return thumb_id

    async def retrieve(self, thumb_id: str) -> bytes | None:
        """读取缩略图，不存在或已过期都返回 None

        Raises:
            SQLAlchemyError: 读取数据库失败
        """
        async with self.session_factory() as session:
            try:
                thumb = await ThumbRepository(session).get_valid(thumb_key(thumb_id), self.clock())
            except SQLAlchemyError as e:
                logger.error("读取缩略图 {} 时发生数据库错误：{}", thumb_id, e)
                raise

        if thumb is None:
            logger.debug("缩略图未命中：{}", thumb_id)
            return None
        return thumb.data

    async def cleanup_expired(self) -> int:
        """清理过期缩略图"""
        async with self.session_factory() as session:
            try:
                count = await ThumbRepository(session).delete_expired(self.clock())
            except SQLAlchemyError as e:
                logger.error("清理过期缩略图时发生数据库错误：{}", e)
                await session.rollback()
                return 0

        if count:
            logger.info("已清理 {} 张过期缩略图", count)
        return count
