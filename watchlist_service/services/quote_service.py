"""
报价 / 搜索服务
整合数据获取、缓存、处理三层：
  搜索 → 复用全市场日行情缓存做过滤
  报价 → 逐个股并发拉取 STOCK_DAY，失败时退回缓存中的收盘价
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

from watchlist_service.config import settings
from watchlist_service.layers.acquisition import AcquisitionLayer, TwseError
from watchlist_service.layers.cache import BulkFeedCache
from watchlist_service.layers.processing import (
    ProcessingLayer,
    compute_change_percent,
    get_processing_layer,
)
from watchlist_service.models.quote import PriceSnapshot, Quote

logger = logging.getLogger(__name__)


def _exchange_today() -> date:
    return datetime.now(ZoneInfo(settings.TZ)).date()


def to_code(symbol: str) -> str:
    """2330.TW → 2330"""
    code = symbol.strip()
    suffix = settings.SYMBOL_SUFFIX
    if code.upper().endswith(suffix.upper()):
        code = code[: -len(suffix)]
    return code


def to_symbol(code: str) -> str:
    return f"{code}{settings.SYMBOL_SUFFIX}"


def parse_symbols(raw: str) -> List[str]:
    """逗号分隔的代码串 → 代码列表（忽略空项）"""
    return [to_code(part) for part in raw.split(",") if part.strip()]


class QuoteService:
    """报价与搜索业务服务，持有唯一的全市场日行情缓存"""

    def __init__(
        self,
        acquisition: Optional[AcquisitionLayer] = None,
        processing: Optional[ProcessingLayer] = None,
        cache: Optional[BulkFeedCache] = None,
        today: Callable[[], date] = _exchange_today,
    ):
        self._acq = acquisition or AcquisitionLayer()
        self._proc = processing or get_processing_layer()
        self._cache = cache or BulkFeedCache(self._acq.fetch_stock_day_all)
        self._today = today

    @property
    def cache(self) -> BulkFeedCache:
        return self._cache

    async def aclose(self) -> None:
        await self._acq.aclose()

    # ── 搜索 ──────────────────────────────────────────────

    async def search(self, query: str) -> List[Quote]:
        """按代码或名称搜索，最多返回 SEARCH_RESULT_LIMIT 条"""
        records = await self._cache.get_or_refresh()
        df = self._proc.normalize_stock_day_all(records)
        matched = self._proc.search(df, query, settings.SEARCH_RESULT_LIMIT)

        results = []
        for row in matched.to_dict(orient="records"):
            close = float(row["ClosingPrice"])
            change = float(row["Change"])
            pct = compute_change_percent(close, change) if settings.SEARCH_COMPUTE_CHANGE_PERCENT else 0.0
            results.append(Quote(
                symbol=to_symbol(row["Code"]),
                regularMarketPrice=close,
                regularMarketChange=change,
                regularMarketChangePercent=pct,
                shortName=row["Name"],
                longName=row["Name"],
            ))
        return results

    # ── 批量报价 ──────────────────────────────────────────

    async def get_quotes(self, codes: List[str]) -> List[Quote]:
        """
        批量获取报价

        Args:
            codes: 不带 .TW 后缀的股票代码列表

        两个数据源都拿不到的代码直接从结果中剔除。
        """
        if not codes:
            return []

        # 个股接口不便取名称，名称统一来自全市场日行情
        records = await self._cache.get_or_refresh()
        index = self._proc.index_by_code(self._proc.normalize_stock_day_all(records))
        day = self._today()

        quotes = await asyncio.gather(
            *(self.resolve_quote(code, index.get(code), day) for code in codes)
        )
        return [q for q in quotes if q is not None]

    async def resolve_quote(
        self,
        code: str,
        summary: Optional[Dict[str, Any]],
        day: date,
    ) -> Optional[Quote]:
        """单个股报价流水线：个股日报 → 全市场缓存 → 剔除"""
        name = summary["Name"] if summary else code

        snapshot = await self.fetch_fresh_snapshot(code, day)
        if snapshot is None and summary is not None:
            logger.info(f"{code} 个股数据不可用，使用缓存收盘价")
            snapshot = self._proc.snapshot_from_summary(summary)
        if snapshot is None:
            logger.warning(f"{code} 无可用报价，已剔除")
            return None

        return Quote.from_snapshot(to_symbol(code), name, snapshot)

    async def fetch_fresh_snapshot(self, code: str, day: date) -> Optional[PriceSnapshot]:
        try:
            payload = await self._acq.fetch_stock_day(code, day)
        except TwseError as exc:
            logger.warning(f"{code} 个股数据获取失败: {exc}")
            return None
        try:
            return self._proc.snapshot_from_stock_day(payload)
        except (TypeError, KeyError, IndexError, AttributeError) as exc:
            logger.warning(f"{code} 个股数据解析失败: {exc}")
            return None


# ── 模块级别单例 ──────────────────────────────────────────
_quote_service: Optional[QuoteService] = None


def get_quote_service() -> QuoteService:
    global _quote_service
    if _quote_service is None:
        _quote_service = QuoteService()
    return _quote_service
