from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from loguru import logger
from sqlalchemy.engine import make_url

from clients.ntfy_client import NtfyClient
from core.config import get_settings
from core.database import async_engine, async_session, create_tables
from core.scheduler_jobs import purge_expired_thumbs
from services.relay_service import RelayConfig, RelayService
from services.thumb_service import ThumbCacheService

settings = get_settings()

def _ensure_sqlite_dir() -> None:
    """SQLite 文件所在目录不存在时先创建"""
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("启动应用程序生命周期上下文")

    _ensure_sqlite_dir()
    app.state.db_engine = async_engine
    await create_tables(app.state.db_engine)

    app.state.ntfy_client = NtfyClient(
        client=httpx.AsyncClient(timeout=settings.ntfy_timeout)
    )
    app.state.thumb_service = ThumbCacheService(async_session, ttl=settings.thumb_ttl)

    config = RelayConfig.from_settings(settings)
    if not config.ntfy_base or not config.ntfy_topic:
        logger.warning("NTFY_BASE 或 NTFY_TOPIC 未配置，收到的事件将返回 500")
    if not config.allowed_user:
        logger.warning("ALLOWED_USER 未配置，将转发所有账户的事件")
    app.state.relay_service = RelayService(config, app.state.ntfy_client, app.state.thumb_service)

    app.state.scheduler = AsyncIOScheduler()
    app.state.scheduler.add_job(
        purge_expired_thumbs,
        'interval',
        minutes=settings.thumb_cleanup_minutes,
        args=[app],
        id='purge_expired_thumbs',
        replace_existing=True
    )
    app.state.scheduler.start()

    yield

    logger.info("关闭应用程序生命周期上下文")
    if app.state.scheduler.running:
        app.state.scheduler.shutdown(wait=False)
        logger.info("任务计划程序已关闭")

    await app.state.ntfy_client.close()

    if app.state.db_engine:
        await app.state.db_engine.dispose()
    logger.info("应用程序生命周期上下文已关闭")
