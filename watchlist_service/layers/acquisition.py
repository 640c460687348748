"""
Layer 1 – 数据获取层
封装 TWSE 两个 REST 接口：
  STOCK_DAY_ALL  全市场当日行情（OpenAPI）
  STOCK_DAY      个股当月日成交资讯
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from watchlist_service.config import settings

logger = logging.getLogger(__name__)


class TwseError(Exception):
    """TWSE 通信失败（HTTP 错误、网络异常、响应格式不符）"""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AcquisitionLayer:
    """数据获取层：持有一个共享的 httpx.AsyncClient"""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        client = self._get_client()
        try:
            resp = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise TwseError(f"TWSE request failed: {exc}") from exc
        if resp.status_code >= 400:
            raise TwseError(f"TWSE API error: {resp.status_code}", status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise TwseError("TWSE response is not JSON") from exc

    # ── 全市场日行情 ──────────────────────────────────────

    async def fetch_stock_day_all(self) -> List[Dict[str, Any]]:
        """拉取 STOCK_DAY_ALL，返回原始记录列表（Code / Name / ClosingPrice / Change ...）"""
        data = await self._get_json(settings.STOCK_DAY_ALL_URL)
        if not isinstance(data, list):
            raise TwseError("STOCK_DAY_ALL 返回非预期格式")
        logger.info(f"STOCK_DAY_ALL 获取成功，共 {len(data)} 条")
        return data

    # ── 个股日成交 ────────────────────────────────────────

    async def fetch_stock_day(self, code: str, day: date) -> Dict[str, Any]:
        """
        拉取 STOCK_DAY 个股月报

        响应示例: {"stat": "OK", "data": [["114/12/31", "1,000", ..., "1,000", "+10.00", ...], ...]}
        """
        params = {
            "response": "json",
            "date": day.strftime("%Y%m%d"),
            "stockNo": code,
        }
        payload = await self._get_json(settings.STOCK_DAY_URL, params=params)
        if not isinstance(payload, dict):
            raise TwseError(f"STOCK_DAY 返回非预期格式: {code}")
        return payload
