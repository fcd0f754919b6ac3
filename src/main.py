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
from src.au_auction.application.service import get_auction_engine
from src.au_bidding.api.router import router as bid_router
from src.au_common.errors import AppError, BidRejectedError, FatalEngineError
from src.au_common.response import error_response
from src.au_gateway.middleware.request_log import RequestLogMiddleware
from src.au_listing.api.router import router as listing_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build the engine, verify DB when used. Shutdown: dispose."""
    get_auction_engine()
    if settings.STORAGE_BACKEND == "postgres":
        from src.au_common.database import get_engine

        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    yield
    if settings.STORAGE_BACKEND == "postgres":
        from src.au_common.database import get_engine

        await get_engine().dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, FatalEngineError):
        logger.error("Fatal engine error on %s: [%d] %s", request.url.path, exc.code, exc.message)
    reason = exc.reason.value if isinstance(exc, BidRejectedError) else None
    resp = error_response(exc.code, exc.message, request, reason)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(listing_router, prefix="/api/v1")
app.include_router(bid_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0", "storage": settings.STORAGE_BACKEND}
