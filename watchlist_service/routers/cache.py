"""
缓存管理路由
GET  /api/cache/stats     - 全市场日行情缓存统计
POST /api/cache/clear     - 清理缓存，下次请求强制刷新
"""

from fastapi import APIRouter, Depends

from watchlist_service.models.response import ApiResponse
from watchlist_service.services.quote_service import QuoteService, get_quote_service

router = APIRouter(prefix="/api/cache", tags=["缓存管理"])


@router.get("/stats", response_model=ApiResponse)
async def cache_stats(svc: QuoteService = Depends(get_quote_service)):
    """获取缓存统计信息（行数、缓存年龄、命中次数）"""
    return ApiResponse.ok(data=svc.cache.stats())


@router.post("/clear", response_model=ApiResponse)
async def clear_cache(svc: QuoteService = Depends(get_quote_service)):
    """清理全市场日行情缓存"""
    svc.cache.invalidate()
    return ApiResponse.ok(message="缓存已清理: STOCK_DAY_ALL")
