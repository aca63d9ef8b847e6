"""
投資組合相關 Schema

定義持股彙總結果與投資組合畫面的回應模型。
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel


class PortfolioPosition(BaseModel):
    """單一股票的持股彙總（同代號多筆紀錄合併後）"""
    stock_id: str
    stock_name: str | None
    stock_short_name: str | None
    quantity: int
    unit_price: Decimal
    total_value: Decimal
    buy_at: datetime | None = None


class PortfolioSummary(BaseModel):
    """投資組合彙總"""
    positions: list[PortfolioPosition]
    total_value: Decimal
    total_shares: int

    @property
    def stock_count(self) -> int:
        return len(self.positions)


class PortfolioView(BaseModel):
    """投資組合畫面資料"""
    status: Literal["loading", "login_required", "empty", "ready"]
    message: str | None = None
    hint: str | None = None
    summary: PortfolioSummary | None = None
    summary_line: str | None = None
