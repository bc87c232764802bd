from pydantic import BaseModel, Field

DOMAIN_TAG = "plex"
TITLE_PREFIX = "Plex: "

class Notification(BaseModel):
    """格式化后的通知内容"""
    title: str
    message: str
    tags: list[str] = Field(default_factory=list)

class NtfyMessage(Notification):
    """ntfy JSON 发布格式，POST 到服务根路径"""
    topic: str
    attach: str | None = None

    def to_body(self) -> dict:
        return self.model_dump(mode='json', exclude_none=True)
