from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

EVENT_PREFIX = "media."

class EventKind(StrEnum):
    """Plex Webhook 播放事件"""
    PLAY = "media.play"
    RESUME = "media.resume"
    PAUSE = "media.pause"
    FINISH = "media.scrobble"  # Plex 用 scrobble 表示播放完成
    RATE = "media.rate"
    OTHER = "other"

class MediaKind(StrEnum):
    MOVIE = "movie"
    EPISODE = "episode"
    TRACK = "track"
    OTHER = "other"

EVENT_LABELS: dict[EventKind, str] = {
    EventKind.PLAY: "Started",
    EventKind.RESUME: "Resumed",
    EventKind.PAUSE: "Paused",
    EventKind.FINISH: "Finished",
    EventKind.RATE: "Rated",
}

def _to_int(value: Any) -> int | None:
    """宽松地把 Plex 字段转换为整数，无法转换时返回 None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None

def _to_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    return None

# Plex 字段全部可选，未知字段忽略，类型不对的字段按缺失处理

class PlexBase(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True, frozen=True)

class PlexAccount(PlexBase):
    title: str = ''

    @field_validator('title', mode='before')
    @classmethod
    def coerce_title(cls, value: Any) -> str:
        return _to_str(value) or ''

class PlexPlayer(PlexBase):
    title: str | None = None
    public_address: str | None = Field(default=None, alias="publicAddress")

    @field_validator('title', 'public_address', mode='before')
    @classmethod
    def coerce_text(cls, value: Any) -> str | None:
        return _to_str(value)

class PlexMetadata(PlexBase):
    """对应 Plex payload 中的 Metadata"""
    type: str | None = None
    title: str | None = None
    year: int | None = None
    parent_index: int | None = Field(default=None, alias="parentIndex")  # 季
    index: int | None = None  # 集 / 曲目序号
    grandparent_title: str | None = Field(default=None, alias="grandparentTitle")  # 剧集名 / 艺术家
    library_section_title: str | None = Field(default=None, alias="librarySectionTitle")

    @field_validator('year', 'parent_index', 'index', mode='before')
    @classmethod
    def coerce_number(cls, value: Any) -> int | None:
        return _to_int(value)

    @field_validator('type', 'title', 'grandparent_title', 'library_section_title', mode='before')
    @classmethod
    def coerce_text(cls, value: Any) -> str | None:
        return _to_str(value)

    @property
    def kind(self) -> MediaKind:
        try:
            return MediaKind(self.type or '')
        except ValueError:
            return MediaKind.OTHER

class PlexPayload(PlexBase):
    """Plex Webhook 的 payload 部分"""
    event: str = EventKind.PLAY.value
    account: PlexAccount = Field(default_factory=PlexAccount, alias="Account")
    metadata: PlexMetadata = Field(default_factory=PlexMetadata, alias="Metadata")
    player: PlexPlayer | None = Field(default=None, alias="Player")

    @field_validator('event', mode='before')
    @classmethod
    def default_event(cls, value: Any) -> str:
        # 缺失或为空时按开始播放处理
        return _to_str(value) or EventKind.PLAY.value

    @field_validator('account', 'metadata', mode='before')
    @classmethod
    def default_section(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator('player', mode='before')
    @classmethod
    def optional_player(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @property
    def event_kind(self) -> EventKind:
        try:
            return EventKind(self.event)
        except ValueError:
            return EventKind.OTHER

    @property
    def event_label(self) -> str:
        """事件的展示名称，未知事件去掉 media. 前缀后原样返回"""
        kind = self.event_kind
        if kind is EventKind.OTHER:
            return self.event.removeprefix(EVENT_PREFIX)
        return EVENT_LABELS[kind]

    @property
    def account_name(self) -> str:
        return self.account.title
