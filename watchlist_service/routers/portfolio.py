"""
自选股路由
GET  /api/portfolio   - 读取自选股列表
POST /api/portfolio   - 整体覆盖保存自选股列表
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from watchlist_service.models.response import (
    ErrorResponse,
    PortfolioResponse,
    PortfolioSavedResponse,
)
from watchlist_service.services.portfolio_service import PortfolioStore, get_portfolio_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio", tags=["自选股"])

_INVALID_FORMAT = 'Invalid data format. "symbols" must be an array.'


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.get("", response_model=PortfolioResponse)
async def get_portfolio(store: PortfolioStore = Depends(get_portfolio_store)):
    """读取自选股列表"""
    return PortfolioResponse(symbols=store.load())


@router.post(
    "",
    response_model=PortfolioSavedResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def save_portfolio(request: Request, store: PortfolioStore = Depends(get_portfolio_store)):
    """保存自选股列表，请求体 {"symbols": [...]}"""
    try:
        body = await request.json()
    except ValueError:
        return _error("Invalid request", status.HTTP_400_BAD_REQUEST)
    if not isinstance(body, dict):
        return _error("Invalid request", status.HTTP_400_BAD_REQUEST)

    symbols = body.get("symbols")
    if not isinstance(symbols, list) or not all(isinstance(s, str) for s in symbols):
        return _error(_INVALID_FORMAT, status.HTTP_400_BAD_REQUEST)

    if not store.save(symbols):
        return _error("Failed to save data", status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"自选股已保存，共 {len(symbols)} 只")
    return PortfolioSavedResponse(symbols=symbols)
