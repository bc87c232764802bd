from fastapi import FastAPI
from loguru import logger

from services.thumb_service import ThumbCacheService


async def purge_expired_thumbs(app: FastAPI) -> None:
    """清理已过期的缩略图
    读取时已经会过滤过期数据，这里只是回收磁盘空间。
    """
    thumb_service: ThumbCacheService = app.state.thumb_service
    try:
        await thumb_service.cleanup_expired()
    except Exception as e:
        logger.error("清理缩略图任务失败：{!r}", e)
