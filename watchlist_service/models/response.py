"""API 响应模型"""

from typing import Any, List, Optional
from pydantic import BaseModel

from watchlist_service.models.quote import Quote


class ApiResponse(BaseModel):
    """管理类接口的标准响应封装"""
    success: bool = True
    data: Optional[Any] = None
    message: str = ""
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "success") -> "ApiResponse":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, message: str = "failed") -> "ApiResponse":
        return cls(success=False, error=error, message=message)


# ── 前端约定的业务响应 ────────────────────────────────────

class ErrorResponse(BaseModel):
    error: str


class PortfolioResponse(BaseModel):
    symbols: List[str]


class PortfolioSavedResponse(BaseModel):
    success: bool = True
    symbols: List[str]


class SearchResponse(BaseModel):
    results: List[Quote]


class QuotesResponse(BaseModel):
    data: List[Quote]
