from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class Thumbnail(Base):
    """缩略图缓存，过期后视为不存在"""
    __tablename__ = 'thumbnails'

    key: Mapped[str] = mapped_column(String(64), primary_key=True)  # thumb:<id>
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)
