"""
TWSE 自选股看板服务
独立 FastAPI 应用程序入口

启动方式:
    uvicorn watchlist_service.main:app --host 0.0.0.0 --port 8000
    python -m watchlist_service.main
"""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from watchlist_service import __version__
from watchlist_service.config import settings
from watchlist_service.models.response import ApiResponse
from watchlist_service.routers import cache, health, portfolio, stocks
from watchlist_service.services.portfolio_service import get_portfolio_store
from watchlist_service.services.quote_service import get_quote_service

# ── 日志配置 ──────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── 生命周期管理 ──────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动/关闭生命周期钩子"""
    logger.info("=" * 60)
    logger.info(f"🚀 TWSE Watchlist Service v{__version__} 启动中")
    logger.info(f"   自选股文件 : {settings.PORTFOLIO_FILE}")
    logger.info(f"   TWSE      : {settings.TWSE_OPENAPI_BASE_URL} / {settings.TWSE_REPORT_BASE_URL}")
    logger.info(f"   缓存 TTL  : {settings.SEARCH_CACHE_TTL}s")
    logger.info("=" * 60)

    get_portfolio_store().ensure_initialized()
    quote_service = get_quote_service()

    yield

    logger.info("🔄 自选股服务正在关闭...")
    await quote_service.aclose()
    logger.info("✅ 自选股服务已关闭")


# ── 应用实例 ──────────────────────────────────────────────
app = FastAPI(
    title="TWSE 自选股看板服务",
    description=(
        "个人台股自选股看板后端：\n"
        "- 📋 自选股列表持久化（JSON 文件）\n"
        "- 🔍 上市股票搜索（STOCK_DAY_ALL，60 秒缓存）\n"
        "- 💹 批量报价（STOCK_DAY，失败时退回缓存收盘价）\n\n"
        "**分层架构**\n"
        "```\n"
        "Acquisition Layer  ← 调用 TWSE 开放接口\n"
        "Cache Layer        ← 全市场日行情进程内缓存\n"
        "Processing Layer   ← 数值清洗、搜索过滤、涨跌幅计算\n"
        "```"
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS 中间件 ───────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# ── 请求计时中间件 ─────────────────────────────────────────
@app.middleware("http")
async def add_process_time(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = f"{(time.time() - start) * 1000:.1f}ms"
    return response


# ── 全局异常处理 ──────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"未处理的异常: {exc}", exc_info=True)
    body = ApiResponse.fail(error="内部服务错误", message=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


# ── 注册路由 ──────────────────────────────────────────────
app.include_router(health.router)
app.include_router(portfolio.router)
app.include_router(stocks.router)
app.include_router(cache.router)


# ── 根路由 ───────────────────────────────────────────────
@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": "TWSE Watchlist Service",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# ── 直接运行入口 ──────────────────────────────────────────
if __name__ == "__main__":
    uvicorn.run(
        "watchlist_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
