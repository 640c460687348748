"""健康检查路由"""

import os
import time

from fastapi import APIRouter, Depends

from watchlist_service import __version__
from watchlist_service.services.portfolio_service import PortfolioStore, get_portfolio_store
from watchlist_service.services.quote_service import QuoteService, get_quote_service

router = APIRouter(tags=["健康检查"])


@router.get("/health")
async def health(
    store: PortfolioStore = Depends(get_portfolio_store),
    svc: QuoteService = Depends(get_quote_service),
):
    """服务健康检查"""
    return {
        "success": True,
        "data": {
            "status": "ok",
            "version": __version__,
            "timestamp": int(time.time()),
            "service": "TWSE Watchlist Service",
            "portfolio_file": {
                "path": store.path,
                "exists": os.path.exists(store.path),
            },
            "cache": svc.cache.stats(),
        },
        "message": "服务运行正常",
    }


@router.get("/healthz")
async def healthz():
    """Kubernetes liveness probe"""
    return {"status": "ok"}


@router.get("/readyz")
async def readyz():
    """Kubernetes readiness probe"""
    return {"ready": True}
