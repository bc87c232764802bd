from abc import ABC

import httpx
from loguru import logger


class BaseClient(ABC):
    """抽象基类，封装共享的 httpx.AsyncClient"""
    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def close(self):
        """关闭HTTP客户端连接"""
        if self._client:
            await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """发送HTTP请求
        Args:
            method (str): HTTP方法，如'GET', 'POST'等。
            url (str): 请求的URL。
            **kwargs: 传递给httpx请求方法的其他参数，如json, headers等。
        Returns:
            httpx.Response: 2xx 响应。
        Raises:
            httpx.HTTPStatusError: 响应状态码不是 2xx。
            httpx.RequestError: 网络错误。
        """
        if self._client is None:
            raise RuntimeError("HTTP 客户端未初始化。")

        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error("HTTP 错误：{} - {}", e.response.status_code, e.response.text)
            raise
        except httpx.RequestError as e:
            logger.error("请求错误：{!r}", e)
            raise

    async def post(self, url: str, **kwargs) -> httpx.Response:
        """发送POST请求"""
        return await self._request("POST", url, **kwargs)
