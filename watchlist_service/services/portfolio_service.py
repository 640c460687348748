"""
自选股存储服务
整个自选股列表以 JSON 数组形式保存在单一文件中，每次保存整体覆盖
"""

import json
import logging
import os
from typing import List, Optional

from watchlist_service.config import settings

logger = logging.getLogger(__name__)


class PortfolioStore:
    """自选股 JSON 文件存储（不加锁，不做原子写入）"""

    def __init__(self, path: Optional[str] = None, defaults: Optional[List[str]] = None):
        self._path = str(path or settings.PORTFOLIO_FILE)
        self._defaults = list(defaults if defaults is not None else settings.DEFAULT_SYMBOLS)

    @property
    def path(self) -> str:
        return self._path

    @property
    def defaults(self) -> List[str]:
        return list(self._defaults)

    def ensure_initialized(self) -> None:
        """文件不存在时写入默认自选股，仅在启动时调用一次"""
        if os.path.exists(self._path):
            return
        if self.save(self._defaults):
            logger.info(f"已创建自选股文件: {self._path}")

    def load(self) -> List[str]:
        """读取自选股列表；文件缺失、损坏或格式不符时返回默认列表"""
        if not os.path.exists(self._path):
            return self.defaults
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.error(f"读取自选股文件失败: {exc}")
            return self.defaults
        if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
            logger.warning(f"自选股文件格式不符（期望字符串 JSON 数组）: {self._path}")
            return self.defaults
        return data

    def save(self, symbols: List[str]) -> bool:
        """整体覆盖写入，返回是否成功"""
        try:
            with open(self._path, "w", encoding="utf-8") as fh:
                json.dump(symbols, fh, ensure_ascii=False, indent=2)
            return True
        except (OSError, TypeError) as exc:
            logger.error(f"写入自选股文件失败: {exc}")
            return False


# ── 模块级别单例 ──────────────────────────────────────────
_store: Optional[PortfolioStore] = None


def get_portfolio_store() -> PortfolioStore:
    global _store
    if _store is None:
        _store = PortfolioStore()
    return _store
