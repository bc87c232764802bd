from models.notification import DOMAIN_TAG, TITLE_PREFIX, Notification
from models.plex_webhook import MediaKind, PlexMetadata, PlexPayload


def pad2(value: int | None) -> str:
    """季/集序号补齐两位，缺失时返回 '?'"""
    if value is None:
        return "?"
    return f"{value:02d}"

def media_line(md: PlexMetadata) -> str:
    """根据媒体类型生成第一行描述"""
    match md.kind:
        case MediaKind.MOVIE:
            line = md.title or "Movie"
            if md.year:
                line += f" ({md.year})"
            return line
        case MediaKind.EPISODE:
            show = md.grandparent_title or md.title or "Episode"
            line = f"{show} S{pad2(md.parent_index)}E{pad2(md.index)}"
            if md.title:
                line += f' — "{md.title}"'
            return line
        case MediaKind.TRACK:
            line = md.title or "Track"
            # 音乐的 grandparentTitle 是艺术家
            if md.grandparent_title:
                line += f" — {md.grandparent_title}"
            return line
        case _:
            return md.title or md.grandparent_title or md.library_section_title or "Media"

def format_plex(payload: PlexPayload) -> Notification:
    """把 Plex 事件转换为通知（标题、正文、标签）"""
    label = payload.event_label
    who = payload.account_name or "User"

    message = f"{media_line(payload.metadata)}\nby {who}"
    if payload.player:
        if payload.player.title:
            message += f" on {payload.player.title}"
        if payload.player.public_address:
            message += f" ({payload.player.public_address})"

    return Notification(
        title=f"{TITLE_PREFIX}{label}",
        message=message.strip(),
        tags=[DOMAIN_TAG, label.lower()]
    )
