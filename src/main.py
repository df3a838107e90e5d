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
from src.cl_account.api.agents_router import router as agents_router
from src.cl_account.api.brokers_router import router as brokers_router
from src.cl_account.api.router import router as accounts_router
from src.cl_common.database import engine
from src.cl_common.errors import AppError
from src.cl_common.response import error_response
from src.cl_entry.api.router import account_entries_router
from src.cl_entry.api.router import router as entries_router
from src.cl_gateway.middleware.request_log import RequestLogMiddleware
from src.cl_player.api.router import router as players_router
from src.cl_report.api.router import router as reports_router
from src.cl_settings.api.router import router as settings_router
from src.cl_settlement.api.router import router as settlement_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the pool."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(settlement_router, prefix="/api/v1")
app.include_router(agents_router, prefix="/api/v1")
app.include_router(brokers_router, prefix="/api/v1")
app.include_router(accounts_router, prefix="/api/v1")
app.include_router(account_entries_router, prefix="/api/v1")
app.include_router(players_router, prefix="/api/v1")
app.include_router(entries_router, prefix="/api/v1")
app.include_router(settings_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
