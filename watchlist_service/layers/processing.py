"""
Layer 3 – 数据处理层
对 TWSE 原始数据进行清洗、格式化，提供搜索过滤与涨跌幅计算。
"""

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from watchlist_service.models.quote import PriceSnapshot

logger = logging.getLogger(__name__)

_TEXT_COLS = ["Code", "Name"]
_NUMERIC_COLS = ["ClosingPrice", "Change"]

# STOCK_DAY 数据行: [日期, 成交股数, 成交金额, 开盘, 最高, 最低, 收盘, 涨跌价差, 成交笔数]
_ROW_CLOSE = 6
_ROW_CHANGE = 7


def parse_number(raw: Any) -> float:
    """去掉千分位与除权息标记 X 后转为 float，无法解析时返回 0"""
    if raw is None:
        return 0.0
    text = str(raw).replace(",", "").replace("X", "").strip()
    try:
        return float(text)
    except ValueError:
        return 0.0


def compute_change_percent(close: float, change: float) -> float:
    """涨跌幅 = 涨跌 / 昨收 * 100，其中 昨收 = 收盘 - 涨跌；昨收为 0 时返回 0"""
    prev_close = close - change
    if prev_close == 0:
        return 0.0
    return change / prev_close * 100


class ProcessingLayer:
    """数据处理层：清洗 + 过滤 + 指标"""

    def normalize_stock_day_all(self, records: List[Dict[str, Any]]) -> pd.DataFrame:
        """
        将 STOCK_DAY_ALL 原始记录标准化为 DataFrame

        标准列：Code, Name, ClosingPrice, Change
        """
        if not records:
            return pd.DataFrame(columns=_TEXT_COLS + _NUMERIC_COLS)

        df = pd.DataFrame(records)

        for col in _TEXT_COLS:
            if col not in df.columns:
                df[col] = ""
            df[col] = df[col].fillna("").astype(str).str.strip()

        for col in _NUMERIC_COLS:
            if col not in df.columns:
                df[col] = 0.0
            df[col] = df[col].map(parse_number).astype(float)

        return df[_TEXT_COLS + _NUMERIC_COLS].reset_index(drop=True)

    def search(self, df: pd.DataFrame, query: str, limit: int) -> pd.DataFrame:
        """按代码或名称做不区分大小写的子串匹配，保留原始顺序，最多 limit 条"""
        kw = query.strip().lower()
        if df.empty or not kw:
            return df.iloc[0:0]
        mask = (
            df["Code"].str.lower().str.contains(kw, regex=False)
            | df["Name"].str.lower().str.contains(kw, regex=False)
        )
        return df[mask].head(limit).reset_index(drop=True)

    def index_by_code(self, df: pd.DataFrame) -> Dict[str, Dict[str, Any]]:
        """代码 → 记录，重复代码保留第一条"""
        if df.empty:
            return {}
        unique = df.drop_duplicates(subset=["Code"], keep="first")
        return {row["Code"]: row for row in unique.to_dict(orient="records")}

    def snapshot_from_summary(self, row: Dict[str, Any]) -> PriceSnapshot:
        """由全市场日行情的一行生成价格快照"""
        close = float(row.get("ClosingPrice", 0.0))
        change = float(row.get("Change", 0.0))
        return PriceSnapshot(
            price=close,
            change=change,
            change_percent=compute_change_percent(close, change),
        )

    def snapshot_from_stock_day(self, payload: Dict[str, Any]) -> Optional[PriceSnapshot]:
        """
        由 STOCK_DAY 响应生成价格快照

        stat 非 OK 或无数据时返回 None；取最后一行（当月最近交易日）。
        """
        rows = payload.get("data") or []
        if payload.get("stat") != "OK" or not rows:
            return None
        if not isinstance(rows, list):
            logger.warning(f"STOCK_DAY data 字段格式不符: {type(rows).__name__}")
            return None

        last = rows[-1]
        if not isinstance(last, (list, tuple)) or len(last) <= _ROW_CHANGE:
            logger.warning(f"STOCK_DAY 数据行字段不足: {last}")
            return None

        close = parse_number(last[_ROW_CLOSE])
        change = parse_number(last[_ROW_CHANGE])
        return PriceSnapshot(
            price=close,
            change=change,
            change_percent=compute_change_percent(close, change),
        )


# ── 模块级别单例 ──────────────────────────────────────────
_processor: Optional[ProcessingLayer] = None


def get_processing_layer() -> ProcessingLayer:
    global _processor
    if _processor is None:
        _processor = ProcessingLayer()
    return _processor
