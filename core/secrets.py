from pathlib import Path
from typing import Protocol, runtime_checkable

import aiofiles
from loguru import logger


@runtime_checkable
class CredentialProvider(Protocol):
    """能够异步取回推送令牌的对象"""
    async def get(self) -> str | None:
        ...

class SecretFileCredentialProvider:
    """从 secret 文件读取令牌（Docker / Kubernetes secrets 挂载）"""
    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def get(self) -> str | None:
        async with aiofiles.open(self.path, encoding='utf-8') as f:
            value = (await f.read()).strip()
        return value or None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.path)!r})"

async def get_token(provider: CredentialProvider | None, fallback: str = '') -> str | None:
    """获取 ntfy 令牌

    优先使用 secret 提供者，读取失败时只记录日志，回退到明文配置。

    Args:
        provider: 令牌提供者，可以为 None
        fallback: 明文令牌
    Returns:
        str | None: 令牌，两者都为空时返回 None
    """
    if provider is not None:
        try:
            value = ((await provider.get()) or '').strip()
            if value:
                return value
        except Exception as e:
            logger.warning("读取令牌失败，回退到明文配置：{!r}", e)

    value = (fallback or '').strip()
    return value or None
