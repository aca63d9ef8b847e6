"""
股票目錄服務層

保存最近一次取得的股票列表，並產生股票卡片畫面資料。
"""

import logging

from stockdesk.client.backend import BackendClient
from stockdesk.client.errors import ApiError
from stockdesk.schemas.stock import Stock, StockCard
from stockdesk.services.locale import LocaleStore

logger = logging.getLogger(__name__)


class StockCatalog:
    """股票目錄狀態（列表、載入中、錯誤訊息）"""

    def __init__(self, client: BackendClient):
        self._client = client
        self.stocks: list[Stock] = []
        self.loading = False
        self.error: str | None = None

    async def refresh(self) -> list[Stock]:
        """重新取得股票列表；失敗時保留舊列表並記錄錯誤訊息"""
        self.loading = True
        self.error = None
        try:
            self.stocks = await self._client.list_stocks()
            logger.info("股票列表已更新 (%d 筆)", len(self.stocks))
        except ApiError as e:
            logger.warning("股票列表更新失敗: %s", e)
            self.error = str(e)
        finally:
            self.loading = False
        return self.stocks


def build_stock_card(stock: Stock, logged_in: bool, locale: LocaleStore) -> StockCard:
    """產生單一股票卡片"""
    purchasable = stock.is_available and stock.quantity > 0

    if stock.is_available:
        availability = locale.format("stock.available", default="可購買")
    else:
        availability = locale.format("stock.unavailable", default="暫停交易")

    if not logged_in:
        action = locale.format("stock.loginToBuy", default="登入後即可購買")
    elif purchasable:
        action = locale.format("stock.buy", default="購買")
    else:
        action = locale.format("stock.unavailable", default="暫停交易")

    return StockCard(
        stock=stock,
        availability_label=availability,
        quantity_label=locale.format(
            "stock.quantity", {"quantity": stock.quantity}, default="數量：{quantity}"
        ),
        can_buy=logged_in and purchasable,
        action_label=action,
    )


def build_stock_cards(
    stocks: list[Stock], logged_in: bool, locale: LocaleStore
) -> list[StockCard]:
    return [build_stock_card(stock, logged_in, locale) for stock in stocks]
