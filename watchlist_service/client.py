"""
自选股轮询客户端
读取自选股列表，按固定间隔轮询报价；支持搜索与增删自选股。

启动方式:
    python -m watchlist_service.client
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import httpx
from pydantic import BaseModel

from watchlist_service.config import settings

logger = logging.getLogger(__name__)

QUOTE_ERROR_MESSAGE = "無法取得股價資訊"


class PollResult(BaseModel):
    """单轮轮询结果；失败时 error 非空，quotes 为空"""
    quotes: List[Dict[str, Any]] = []
    error: Optional[str] = None
    updated_at: Optional[datetime] = None


UpdateCallback = Callable[[PollResult], Union[None, Awaitable[None]]]


def format_quote(quote: Dict[str, Any]) -> str:
    """台積電 (2330.TW)  580.00  +5.00 (+0.87%)"""
    change = quote.get("regularMarketChange") or 0
    pct = quote.get("regularMarketChangePercent") or 0
    sign = "+" if change > 0 else ""
    name = quote.get("shortName") or quote.get("symbol", "")
    price = quote.get("regularMarketPrice") or 0
    return f"{name} ({quote.get('symbol', '')})  {price:.2f}  {sign}{change:.2f} ({sign}{pct:.2f}%)"


class WatchlistClient:
    """自选股服务的 HTTP 客户端，本地维护一份自选股列表"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.CLIENT_BASE_URL,
            timeout=settings.HTTP_TIMEOUT,
        )
        self.symbols: List[str] = []

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── 自选股 ────────────────────────────────────────────

    async def load_portfolio(self) -> List[str]:
        """从服务端读取自选股；网络失败时使用默认列表"""
        try:
            resp = await self._client.get("/api/portfolio")
            body = resp.json() if resp.status_code == 200 else {}
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"读取自选股失败: {exc}")
            self.symbols = list(settings.DEFAULT_SYMBOLS)
            return self.symbols

        symbols = body.get("symbols")
        if isinstance(symbols, list):
            self.symbols = symbols
        return self.symbols

    async def save_portfolio(self, symbols: List[str]) -> bool:
        try:
            resp = await self._client.post("/api/portfolio", json={"symbols": symbols})
        except httpx.HTTPError as exc:
            logger.error(f"保存自选股失败: {exc}")
            return False
        if resp.status_code != 200:
            logger.error(f"保存自选股失败: HTTP {resp.status_code} {resp.text}")
            return False
        return True

    async def add_symbol(self, symbol: str) -> List[str]:
        """追加一只股票（已存在则忽略），并整体保存"""
        if symbol not in self.symbols:
            self.symbols = self.symbols + [symbol]
            await self.save_portfolio(self.symbols)
        return self.symbols

    async def remove_symbol(self, symbol: str) -> List[str]:
        self.symbols = [s for s in self.symbols if s != symbol]
        await self.save_portfolio(self.symbols)
        return self.symbols

    # ── 搜索 / 报价 ───────────────────────────────────────

    async def search(self, query: str) -> List[Dict[str, Any]]:
        if not query.strip():
            return []
        try:
            resp = await self._client.get("/api/stocks", params={"query": query})
            return resp.json().get("results") or []
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"搜索失败: {exc}")
            return []

    async def fetch_quotes(self) -> PollResult:
        """拉取当前自选股的报价，附带时间戳参数避免中间缓存"""
        if not self.symbols:
            return PollResult()

        params = {
            "symbols": ",".join(self.symbols),
            "t": str(int(time.time() * 1000)),
        }
        try:
            resp = await self._client.get("/api/stocks", params=params)
            if resp.status_code != 200:
                raise ValueError(f"HTTP {resp.status_code}")
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"获取报价失败: {exc}")
            return PollResult(error=QUOTE_ERROR_MESSAGE)

        if "data" in body:
            return PollResult(quotes=body["data"], updated_at=datetime.now())
        return PollResult(error=body.get("error") or QUOTE_ERROR_MESSAGE)

    async def poll(
        self,
        on_update: UpdateCallback,
        interval: Optional[float] = None,
        max_rounds: Optional[int] = None,
    ) -> None:
        """
        固定间隔轮询报价

        Args:
            on_update: 每轮结果回调，可为同步或异步函数
            interval: 轮询间隔（秒），默认 POLL_INTERVAL
            max_rounds: 最多轮询次数，None 表示一直运行
        """
        if interval is None:
            interval = settings.POLL_INTERVAL
        rounds = 0
        while max_rounds is None or rounds < max_rounds:
            result = await self.fetch_quotes()
            outcome = on_update(result)
            if asyncio.iscoroutine(outcome):
                await outcome
            rounds += 1
            if max_rounds is not None and rounds >= max_rounds:
                break
            await asyncio.sleep(interval)


def _log_result(result: PollResult) -> None:
    if result.error:
        logger.warning(result.error)
        return
    for quote in result.quotes:
        logger.info(format_quote(quote))
    if result.updated_at:
        logger.info(f"更新时间: {result.updated_at:%H:%M:%S}")


async def _main() -> None:
    client = WatchlistClient()
    try:
        await client.load_portfolio()
        logger.info(f"自选股: {', '.join(client.symbols) or '（空）'}")
        await client.poll(_log_result)
    finally:
        await client.aclose()


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    asyncio.run(_main())
