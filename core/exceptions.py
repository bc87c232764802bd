class RelayError(Exception):
    """转发过程中需要以特定 HTTP 状态码返回给调用方的错误"""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class ConfigMissingError(RelayError):
    """缺少推送必需的配置（NTFY_BASE / NTFY_TOPIC）"""
    status_code = 500

class UpstreamRejectedError(RelayError):
    """ntfy 返回了非 2xx 状态码"""
    status_code = 502

    def __init__(self, status: int, text: str):
        super().__init__(f"ntfy publish failed: {status} {text}")
        self.status = status
        self.text = text
