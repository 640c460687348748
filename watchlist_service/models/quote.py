"""报价数据模型（字段名与前端约定一致，沿用 camelCase）"""

from pydantic import BaseModel


class PriceSnapshot(BaseModel):
    """单一数据源给出的价格快照"""
    price: float
    change: float
    change_percent: float


class Quote(BaseModel):
    symbol: str
    regularMarketPrice: float
    regularMarketChange: float
    regularMarketChangePercent: float
    shortName: str
    longName: str

    @classmethod
    def from_snapshot(cls, symbol: str, name: str, snapshot: PriceSnapshot) -> "Quote":
        return cls(
            symbol=symbol,
            regularMarketPrice=snapshot.price,
            regularMarketChange=snapshot.change,
            regularMarketChangePercent=snapshot.change_percent,
            shortName=name,
            longName=name,
        )
