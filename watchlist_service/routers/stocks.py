"""
股票报价路由
GET     /api/stocks?query=台積        - 搜索股票（最多 10 条）
GET     /api/stocks?symbols=2330.TW   - 批量获取报价（逗号分隔）
OPTIONS /api/stocks                   - CORS 预检
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from watchlist_service.models.response import ErrorResponse, QuotesResponse, SearchResponse
from watchlist_service.services.quote_service import (
    QuoteService,
    get_quote_service,
    parse_symbols,
)

router = APIRouter(prefix="/api/stocks", tags=["股票报价"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.get("", responses={400: {"model": ErrorResponse}})
async def get_stocks(
    query: Optional[str] = Query(default=None, description="代码或名称关键词"),
    symbols: Optional[str] = Query(default=None, description="逗号分隔的代码，如 2330.TW,0050.TW"),
    svc: QuoteService = Depends(get_quote_service),
):
    """搜索或批量报价，query 优先"""
    if query:
        results = await svc.search(query)
        body = SearchResponse(results=results)
        return JSONResponse(content=body.model_dump(), headers=CORS_HEADERS)

    if symbols:
        quotes = await svc.get_quotes(parse_symbols(symbols))
        body = QuotesResponse(data=quotes)
        return JSONResponse(content=body.model_dump(), headers=CORS_HEADERS)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error="No symbols or query provided").model_dump(),
        headers=CORS_HEADERS,
    )


@router.options("")
async def preflight():
    """
    裸 OPTIONS 请求的预检响应

    携带 Origin 与 Access-Control-Request-Method 的浏览器预检由 CORSMiddleware 直接应答。
    """
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)
