from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.orm import DeclarativeBase

from core.config import get_settings

settings = get_settings()

DATABASE_URL = settings.database_url

async_engine = create_async_engine(DATABASE_URL, echo=False, future=True)

async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)

class Base(DeclarativeBase):
    """Sqlalchemy模型的基类。"""
    def __repr__(self) -> str:
        """返回模型的列名，二进制列只显示长度。"""
        parts = []
        for col in self.__table__.columns:
            value = getattr(self, col.name)
            if isinstance(value, bytes):
                value = f"<{len(value)} bytes>"
            parts.append(f"{col.name}={value}")
        return f"{self.__class__.__name__}({', '.join(parts)})"

async def create_tables(engine: AsyncEngine) -> None:
    """创建所有数据表（已存在的表会跳过）"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
