"""
Layer 2 – 缓存层
全市场日行情（STOCK_DAY_ALL）的进程内 TTL 缓存，重启即失效。
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from watchlist_service.config import settings

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[List[Dict[str, Any]]]]


class BulkFeedCache:
    """
    单值 TTL 缓存

    刷新不加锁，并发请求可能重复拉取上游。
    """

    def __init__(
        self,
        loader: Loader,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self._ttl = settings.SEARCH_CACHE_TTL if ttl is None else ttl
        self._clock = clock
        self._data: Optional[List[Dict[str, Any]]] = None
        self._fetched_at = 0.0
        self.hits = 0
        self.misses = 0
        self.failures = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    def is_fresh(self, now: float) -> bool:
        return self._data is not None and now - self._fetched_at < self._ttl

    async def get_or_refresh(self, now: Optional[float] = None) -> List[Dict[str, Any]]:
        """命中则直接返回；过期则调用 loader 刷新，失败时退回旧值（无旧值返回空列表）"""
        if now is None:
            now = self._clock()

        if self.is_fresh(now):
            self.hits += 1
            logger.debug("缓存命中（STOCK_DAY_ALL）")
            return self._data

        self.misses += 1
        try:
            data = await self._loader()
        except Exception as exc:
            self.failures += 1
            logger.error(f"STOCK_DAY_ALL 刷新失败: {exc}")
            return self._data or []

        self._data = data
        self._fetched_at = now
        return data

    def peek(self) -> Optional[List[Dict[str, Any]]]:
        """返回当前缓存值，不触发刷新"""
        return self._data

    def invalidate(self) -> None:
        self._data = None
        self._fetched_at = 0.0
        logger.info("STOCK_DAY_ALL 缓存已清理")

    def stats(self) -> dict:
        age = None
        if self._data is not None:
            age = round(self._clock() - self._fetched_at, 3)
        return {
            "rows": len(self._data) if self._data is not None else 0,
            "age_seconds": age,
            "ttl_seconds": self._ttl,
            "hits": self.hits,
            "misses": self.misses,
            "failures": self.failures,
        }
