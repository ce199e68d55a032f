"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.lt_common.database import engine
from src.lt_common.errors import AppError
from src.lt_common.redis_client import close_redis, ping_redis
from src.lt_common.response import error_response
from src.lt_draw.api.router import router as draw_router
from src.lt_draw.application.lifecycle import DrawLifecycle
from src.lt_exposure.api.router import router as exposure_router
from src.lt_gateway.middleware.request_log import RequestLogMiddleware
from src.lt_settlement.api.router import router as settlement_router
from src.lt_ticket.api.router import router as ticket_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

draw_lifecycle = DrawLifecycle()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis, start draw jobs. Shutdown: stop jobs, dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await ping_redis()
    if settings.SCHEDULER_ENABLED:
        await draw_lifecycle.start()
    yield
    # Shutdown
    await draw_lifecycle.stop()
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(draw_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(ticket_router, prefix="/api/v1")
app.include_router(exposure_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
