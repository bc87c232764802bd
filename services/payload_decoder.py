from fastapi import Request
from loguru import logger
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from models.plex_webhook import PlexPayload

PAYLOAD_FIELD = "payload"
THUMB_FIELD = "thumb"

def decode_payload(raw: str | bytes | None) -> PlexPayload | None:
    """把 JSON 文本解析为 PlexPayload，任何错误都返回 None"""
    if not raw:
        return None
    try:
        return PlexPayload.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("无法解析 Plex payload：{}", e.errors(include_url=False))
        return None

async def parse_plex_webhook(request: Request) -> tuple[PlexPayload | None, bytes | None]:
    """解析 Plex Webhook 请求

    Plex 发送 multipart/form-data：payload 字段是 JSON，thumb 字段是 JPEG 缩略图。
    其他 Content-Type 按纯 JSON 处理，此时没有缩略图。

    Returns:
        tuple: (payload 或 None, 缩略图字节或 None)
    """
    content_type = request.headers.get("content-type", "")

    if "multipart/form-data" in content_type:
        try:
            form = await request.form()
            payload = await _read_payload_field(form.get(PAYLOAD_FIELD))
            thumb = await _read_thumb_field(form.get(THUMB_FIELD))
        except Exception as e:
            logger.warning("无法解析 multipart 请求体：{!r}", e)
            return None, None
        return payload, thumb

    try:
        body = await request.body()
    except Exception as e:
        logger.warning("读取请求体失败：{!r}", e)
        return None, None
    return decode_payload(body), None

async def _read_payload_field(value: str | UploadFile | None) -> PlexPayload | None:
    if isinstance(value, UploadFile):
        return decode_payload(await value.read())
    return decode_payload(value)

async def _read_thumb_field(value: str | UploadFile | None) -> bytes | None:
    # 只接受文件部分，文本字段不可能是图片
    if not isinstance(value, UploadFile):
        return None
    data = await value.read()
    return data or None
