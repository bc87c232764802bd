from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from loguru import logger

from core.config import get_settings, setup_logging
from core.lifespan import lifespan
from routes.webhooks import router as webhooks_router

setup_logging()
settings = get_settings()

app = FastAPI(title="PlexRelay", lifespan=lifespan)
app.include_router(webhooks_router)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    logger.error("URL: {} 请求失败： {}", request.url, exc.errors())
    return PlainTextResponse("Invalid request", status_code=422)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower(), reload=False)
