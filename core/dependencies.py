from fastapi import Request

from services.relay_service import RelayService
from services.thumb_service import ThumbCacheService


def get_relay_service(request: Request) -> RelayService:
    """获取转发服务实例。"""
    return request.app.state.relay_service

def get_thumb_service(request: Request) -> ThumbCacheService:
    """获取缩略图缓存服务实例。"""
    return request.app.state.thumb_service
