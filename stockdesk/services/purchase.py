"""
購買流程

對應購買對話框：先檢查數量範圍，再呼叫後端購買，
成功後更新登入狀態、關閉對話框並通知呼叫端重新整理股票列表。
"""

import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal

from stockdesk.client.backend import BackendClient
from stockdesk.client.errors import ApiError, PURCHASE_FAILED_MESSAGE
from stockdesk.schemas.stock import Stock
from stockdesk.services.locale import LocaleStore
from stockdesk.services.session import SessionStore

logger = logging.getLogger(__name__)

OnSuccess = Callable[[], Awaitable[object]]


class BuyStockDialog:
    """
    購買對話框狀態

    使用方式：
        dialog = BuyStockDialog(client, session, stock, on_success=catalog.refresh)
        dialog.quantity = 3
        if await dialog.confirm():
            ...
    """

    def __init__(
        self,
        client: BackendClient,
        session: SessionStore,
        stock: Stock,
        on_success: OnSuccess | None = None,
        locale: LocaleStore | None = None,
    ):
        self._client = client
        self._session = session
        self.stock = stock
        self.on_success = on_success
        self._locale = locale or LocaleStore()
        self.open = True
        self.quantity = 1
        self.loading = False
        self.error: str | None = None

    @property
    def max_quantity(self) -> int:
        return self.stock.quantity or 0

    @property
    def total_price(self) -> Decimal:
        unit_price = Decimal(str(self.stock.unit_price or 0))
        return unit_price * self.quantity

    @property
    def title(self) -> str:
        return self._locale.format(
            "buy.title", {"stockName": self.stock.stock_name}, default="購買 {stockName}"
        )

    @property
    def symbol_label(self) -> str:
        return self._locale.format(
            "buy.symbol", {"symbol": self.stock.stock_short_name}, default="代號：{symbol}"
        )

    @property
    def available_label(self) -> str:
        return self._locale.format(
            "buy.available", {"quantity": self.max_quantity}, default="可購買：{quantity}"
        )

    def validate_quantity(self) -> str | None:
        """回傳數量錯誤訊息，數量有效時回傳 None"""
        if self.quantity < 1 or self.quantity > self.max_quantity:
            return self._locale.format(
                "buy.invalidQuantity", {"max": self.max_quantity}, default="數量無效 (1-{max})"
            )
        return None

    def close(self) -> None:
        self.open = False

    async def confirm(self) -> bool:
        """
        確認購買。

        Returns:
            True 表示購買成功；False 表示數量無效或後端失敗（訊息見 error）
        """
        bounds_error = self.validate_quantity()
        if bounds_error:
            self.error = bounds_error
            return False

        self.loading = True
        self.error = None
        try:
            updated_user = await self._client.buy_stock(self.stock.id, self.quantity)
            await self._session.update_user(updated_user)
        except ApiError as e:
            logger.warning("購買 %s 失敗: %s", self.stock.id, e)
            self.error = str(e) or PURCHASE_FAILED_MESSAGE
            return False
        finally:
            self.loading = False

        logger.info("購買成功: %s x%d", self.stock.id, self.quantity)
        self.close()
        self.quantity = 1
        if self.on_success is not None:
            await self.on_success()
        return True
