from enum import StrEnum

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict

from clients.ntfy_client import NtfyClient
from core.config import Settings
from core.exceptions import ConfigMissingError, UpstreamRejectedError
from core.secrets import (CredentialProvider, SecretFileCredentialProvider,
                          get_token)
from models.notification import NtfyMessage
from models.plex_webhook import PlexPayload
from services.formatter import format_plex
from services.identity_filter import is_allowed
from services.thumb_service import ThumbCacheService

THUMB_PATH = "/thumb/"

class RelayOutcome(StrEnum):
    NOTIFIED = "notified"
    IGNORED = "ignored"  # 账户不匹配，已接收但不通知

class RelayConfig(BaseModel):
    """转发服务需要的配置"""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    allowed_user: str = ''
    ntfy_base: str = ''
    ntfy_topic: str = ''
    ntfy_token: str = ''  # 明文令牌，作为 credential_provider 的后备
    credential_provider: CredentialProvider | None = None
    public_base_url: str = ''

    @classmethod
    def from_settings(cls, settings: Settings) -> 'RelayConfig':
        provider = None
        if settings.ntfy_token_file:
            provider = SecretFileCredentialProvider(settings.ntfy_token_file)
        return cls(
            allowed_user=settings.allowed_user,
            ntfy_base=settings.ntfy_base,
            ntfy_topic=settings.ntfy_topic.strip(),
            ntfy_token=settings.ntfy_token,
            credential_provider=provider,
            public_base_url=settings.public_base_url
        )

class RelayService:
    """Plex -> ntfy 转发流程：过滤账户、格式化、缓存缩略图、发布"""

    def __init__(self, config: RelayConfig, ntfy_client: NtfyClient, thumb_service: ThumbCacheService):
        self.config = config
        self.ntfy_client = ntfy_client
        self.thumb_service = thumb_service

    def thumb_url(self, thumb_id: str, request_base_url: str) -> str:
        """生成缩略图的外部访问地址，优先使用 PUBLIC_BASE_URL"""
        base = (self.config.public_base_url or request_base_url).rstrip('/')
        return f"{base}{THUMB_PATH}{thumb_id}"

    async def relay(self, payload: PlexPayload, thumb: bytes | None, request_base_url: str) -> RelayOutcome:
        """处理一条 Plex 事件

        Args:
            payload: 已解析的 Plex payload
            thumb: 缩略图字节，可以为 None
            request_base_url: 当前请求的根地址，用于拼接缩略图链接
        Returns:
            RelayOutcome: NOTIFIED 或 IGNORED
        Raises:
            ConfigMissingError: 未配置 NTFY_BASE 或 NTFY_TOPIC
            UpstreamRejectedError: ntfy 返回非 2xx
        """
        if not is_allowed(self.config.allowed_user, payload.account_name):
            logger.info("忽略账户 {!r} 的 {} 事件", payload.account_name, payload.event)
            return RelayOutcome.IGNORED

        if not self.config.ntfy_base or not self.config.ntfy_topic:
            logger.warning("未配置 NTFY_BASE 或 NTFY_TOPIC，无法发布通知")
            raise ConfigMissingError("Missing NTFY_BASE or NTFY_TOPIC")

        notification = format_plex(payload)

        attach = None
        if thumb:
            thumb_id = await self.thumb_service.store(thumb)
            attach = self.thumb_url(thumb_id, request_base_url)

        token = await get_token(self.config.credential_provider, self.config.ntfy_token)
        message = NtfyMessage(
            topic=self.config.ntfy_topic,
            attach=attach,
            **notification.model_dump()
        )

        try:
            await self.ntfy_client.publish(self.config.ntfy_base, message, token)
        except httpx.HTTPStatusError as e:
            raise UpstreamRejectedError(e.response.status_code, e.response.text) from e

        logger.info("已发布通知：{}（{}）", message.title, message.message.replace("\n", " / "))
        return RelayOutcome.NOTIFIED
