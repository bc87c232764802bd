import httpx

from clients.base_client import BaseClient
from models.notification import NtfyMessage


class NtfyClient(BaseClient):
    """ntfy 发布客户端

    使用 JSON 发布模式：消息 POST 到服务根路径，topic 写在请求体里。
    """
    def __init__(self, client: httpx.AsyncClient):
        super().__init__(client)

    @staticmethod
    def _auth_headers(token: str | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def publish(self, base_url: str, message: NtfyMessage, token: str | None = None) -> httpx.Response:
        """发布一条通知
        Args:
            base_url (str): ntfy 服务地址，例如 https://ntfy.sh
            message (NtfyMessage): 通知内容
            token (str | None): 访问令牌，为空时匿名发布
        Returns:
            httpx.Response: ntfy 的响应
        Raises:
            httpx.HTTPStatusError: ntfy 拒绝了请求
        """
        return await self.post(
            base_url,
            json=message.to_body(),
            headers=self._auth_headers(token)
        )
