"""
股票相關 Schema

後端以 camelCase 欄位傳輸（_id、stockName、unitPrice...），
此處以 alias 對應，Python 端使用 snake_case 屬性。
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class Stock(BaseModel):
    """可交易的股票（目錄項目）"""
    id: str = Field(alias="_id")
    stock_name: str = Field(alias="stockName")
    stock_short_name: str = Field(alias="stockShortName")
    quantity: int | None = 0  # 可購買數量，後端可能回傳 null
    unit_price: float | None = Field(default=None, alias="unitPrice")
    is_available: bool = Field(default=False, alias="isAvailable")
    tags: list[str] | None = None
    buy_at: datetime | None = Field(default=None, alias="buyAt")
    last_updated_at: datetime | None = Field(default=None, alias="lastUpdatedAt")

    # 保留後端多給的欄位，持久化時原樣寫回
    model_config = {"populate_by_name": True, "extra": "allow"}

    @field_validator("quantity", mode="before")
    @classmethod
    def null_quantity_as_zero(cls, v):
        """後端回傳 null 數量時視為 0"""
        return 0 if v is None else v


class Holding(Stock):
    """
    用戶持有的股票紀錄

    quantity 為該筆購買數量、buy_at 為購買時間；
    同一檔股票可能有多筆紀錄（多次購買）。
    """
    id: str | None = Field(default=None, alias="_id")
    stock_name: str | None = Field(default=None, alias="stockName")
    stock_short_name: str | None = Field(default=None, alias="stockShortName")


class StockCard(BaseModel):
    """股票列表中單一卡片的畫面資料"""
    stock: Stock
    availability_label: str
    quantity_label: str
    can_buy: bool
    action_label: str


class BuyRequest(BaseModel):
    """購買請求"""
    quantity: int = 1
