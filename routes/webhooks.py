from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from loguru import logger

from core.dependencies import get_relay_service, get_thumb_service
from core.exceptions import RelayError
from services.payload_decoder import parse_plex_webhook
from services.relay_service import RelayOutcome, RelayService
from services.thumb_service import ThumbCacheService

router = APIRouter()

@router.get("/health", status_code=200)
async def health_check() -> dict[str, str]:
    """健康检查端点"""
    return {"status": "ok"}

@router.get("/thumb/{thumb_id:path}")
async def serve_thumb(
    thumb_id: str,
    thumb_service: ThumbCacheService = Depends(get_thumb_service)
) -> Response:
    """提供缓存的缩略图，供 ntfy 拉取附件"""
    if not thumb_id:
        return PlainTextResponse("Missing id", status_code=400)

    try:
        data = await thumb_service.retrieve(thumb_id)
    except Exception as e:
        logger.exception("读取缩略图 {} 失败：{!r}", thumb_id, e)
        return PlainTextResponse(f"error: {str(e) or repr(e)}", status_code=500)

    if data is None:
        return PlainTextResponse("Not found", status_code=404)

    return Response(
        content=data,
        media_type="image/jpeg",
        headers={"Cache-Control": f"public, max-age={thumb_service.ttl}"}
    )

@router.post("/{path:path}")
async def plex_webhook(
    request: Request,
    relay_service: RelayService = Depends(get_relay_service)
) -> Response:
    """处理来自 Plex 的 Webhook（任意路径）"""
    try:
        payload, thumb = await parse_plex_webhook(request)
        if payload is None:
            return PlainTextResponse("No payload", status_code=400)

        outcome = await relay_service.relay(payload, thumb, str(request.base_url))
    except RelayError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)
    except Exception as e:
        logger.exception("处理 Plex Webhook 失败：{!r}", e)
        return PlainTextResponse(f"error: {str(e) or repr(e)}", status_code=500)

    if outcome is RelayOutcome.IGNORED:
        return Response(status_code=204)
    return PlainTextResponse("ok", status_code=200)

@router.api_route("/{path:path}", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def method_not_allowed() -> Response:
    return PlainTextResponse("Use POST for Plex webhooks", status_code=405)
