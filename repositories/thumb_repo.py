from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.orm import Thumbnail


class ThumbRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, key: str, data: bytes, expires_at: datetime, created_at: datetime) -> Thumbnail:
        """保存缩略图
        Args:
            key (str): 缓存键，格式为 thumb:<id>
            data (bytes): 图片原始字节
            expires_at (datetime): 过期时间
            created_at (datetime): 写入时间
        Returns:
            Thumbnail: 新建的缩略图对象
        """
        thumb = Thumbnail(key=key, data=data, expires_at=expires_at, created_at=created_at)
        self.session.add(thumb)
        await self.session.commit()
        return thumb

    async def get_valid(self, key: str, now: datetime) -> Thumbnail | None:
        """获取未过期的缩略图
        Args:
            key (str): 缓存键
            now (datetime): 当前时间
        Returns:
            Thumbnail | None: 不存在或已过期时返回 None
        """
        stmt = select(Thumbnail).where(
            Thumbnail.key == key,
            Thumbnail.expires_at > now
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_expired(self, now: datetime) -> int:
        """删除所有已过期的缩略图，返回删除的行数"""
        result = await self.session.execute(
            delete(Thumbnail).where(Thumbnail.expires_at <= now)
        )
        await self.session.commit()
        return result.rowcount or 0
