import logging
import sys
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).parent.parent


def setup_logging():
    settings = get_settings()
    LOGS_DIR = BASE_DIR / 'logs'
    LOGS_DIR.mkdir(parents=True, exist_ok=True)

    logger.remove()

    logger.add(
        sys.stderr,
        level="INFO",
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
               "<level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True
    )

    logger.add(
        LOGS_DIR / "plexrelay_{time:YYYY-MM-DD}.log",
        level=settings.log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation="00:00",  # 每天生成一个新的日志文件
        retention="7 days",
        compression="zip",
        encoding="utf-8",
        enqueue=True,  # 异步写日志，防止阻塞事件循环
        backtrace=True,
        diagnose=False  # 诊断信息可能包含令牌，关闭
    )

    class InterceptHandler(logging.Handler):
        def emit(self, record):
            # 获取 Loguru 的日志级别
            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno
            # 找到调用日志的堆栈深度
            frame, depth = logging.currentframe(), 2
            while frame and frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1
            logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.access", "fastapi", "httpx", "apscheduler"):
        logging.getLogger(name).handlers = [InterceptHandler()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    log_level: str = 'INFO'
    host: str = '0.0.0.0'
    port: int = 8080

    # 只转发该 Plex 账户的事件，留空则不过滤
    allowed_user: str = ''

    # ntfy 推送服务
    ntfy_base: str = ''  # 例如 https://ntfy.sh
    ntfy_topic: str = ''
    ntfy_token: str = ''  # 明文令牌，仅在 secret 文件不可用时使用
    ntfy_token_file: str = ''  # 例如 /run/secrets/ntfy_token
    ntfy_timeout: float = 10.0

    # 缩略图缓存
    public_base_url: str = ''  # 反向代理后面时用于生成缩略图链接
    thumb_ttl: int = 3 * 60 * 60  # 与 ntfy 默认附件保存时间一致
    thumb_cleanup_minutes: int = 30
    database_url: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'thumbs.db'}"

    @field_validator('ntfy_base', 'public_base_url')
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """去掉末尾的斜杠"""
        return value.strip().rstrip('/')

@lru_cache
def get_settings() -> Settings:
    return Settings()
