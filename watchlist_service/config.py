"""
自选股服务配置模块
支持从环境变量 / .env 读取配置
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WatchlistSettings(BaseSettings):
    """自选股服务配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── 基础配置 ──────────────────────────────────────────
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)
    DEBUG: bool = Field(default=False)
    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"]
    )

    # ── 自选股存储 ─────────────────────────────────────────
    PORTFOLIO_FILE: str = Field(default="./stocks.json")
    DEFAULT_SYMBOLS: List[str] = Field(
        default_factory=lambda: ["2330.TW", "0050.TW", "2454.TW"]
    )
    SYMBOL_SUFFIX: str = Field(default=".TW")

    # ── TWSE 数据源 ────────────────────────────────────────
    TWSE_OPENAPI_BASE_URL: str = Field(default="https://openapi.twse.com.tw/v1")
    TWSE_REPORT_BASE_URL: str = Field(default="https://www.twse.com.tw")
    HTTP_TIMEOUT: float = Field(default=10.0)

    @property
    def STOCK_DAY_ALL_URL(self) -> str:
        return f"{self.TWSE_OPENAPI_BASE_URL.rstrip('/')}/exchangeReport/STOCK_DAY_ALL"

    @property
    def STOCK_DAY_URL(self) -> str:
        return f"{self.TWSE_REPORT_BASE_URL.rstrip('/')}/exchangeReport/STOCK_DAY"

    # ── 搜索 / 缓存配置 ────────────────────────────────────
    SEARCH_CACHE_TTL: int = Field(default=60)        # 全市场日行情缓存 TTL（秒）
    SEARCH_RESULT_LIMIT: int = Field(default=10)
    SEARCH_COMPUTE_CHANGE_PERCENT: bool = Field(default=False)

    # ── 轮询客户端 ─────────────────────────────────────────
    CLIENT_BASE_URL: str = Field(default="http://localhost:8000")
    POLL_INTERVAL: float = Field(default=10.0)

    # ── 日志配置 ──────────────────────────────────────────
    LOG_LEVEL: str = Field(default="INFO")
    TZ: str = Field(default="Asia/Taipei")


@lru_cache
def get_settings() -> WatchlistSettings:
    """获取全局配置（单例）"""
    return WatchlistSettings()


settings = get_settings()
