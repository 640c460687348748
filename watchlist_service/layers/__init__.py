"""
数据流分层架构
  Layer 1 – Acquisition  : 数据获取（TWSE STOCK_DAY_ALL / STOCK_DAY）
  Layer 2 – Cache        : 全市场日行情进程内 TTL 缓存
  Layer 3 – Processing   : 数值清洗、搜索过滤、涨跌幅计算
"""
