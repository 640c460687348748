"""
TWSE 自选股看板服务
轻量的台股自选股管理 + 报价网关，提供 HTTP 接口

架构分层：
  数据获取层 (Acquisition)  → 调用 TWSE 开放接口拉取原始行情
  缓存层     (Cache)        → 全市场日行情的进程内 TTL 缓存
  处理层     (Processing)   → 数值清洗、搜索过滤、涨跌幅计算
"""

__version__ = "1.0.0"
