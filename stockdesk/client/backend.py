"""
StockDesk 後端 REST 客戶端

透過 httpx 呼叫後端股票與用戶 API。
HTTP 非 2xx 回應一律轉為 ApiError 子類別；後端錯誤內容 {"error": "..."}
以盡力而為的方式解析，解析失敗時使用固定的預設訊息。
本模組只讀取本地儲存中的 token，不寫入任何狀態。
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from stockdesk.client.errors import (
    ApiError,
    FetchFailedError,
    LoginFailedError,
    NotAuthenticatedError,
    PurchaseFailedError,
    RegistrationFailedError,
    StockNotFoundError,
)
from stockdesk.schemas.stock import Stock
from stockdesk.schemas.user import RegisterData, User
from stockdesk.storage import TOKEN_KEY, LocalStorage

logger = logging.getLogger(__name__)


def _read_json(response: httpx.Response) -> Any | None:
    """解析回應 JSON，失敗時回傳 None"""
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str | None:
    """從錯誤回應取出 error 欄位，無法解析時回傳 None"""
    body = _read_json(response)
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error:
            return error
    return None


class BackendClient:
    """
    後端 API 客戶端

    使用方式：
        client = BackendClient("http://localhost:3000", storage)
        stocks = await client.list_stocks()
    """

    def __init__(
        self,
        base_url: str,
        storage: LocalStorage,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._storage = storage
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def _send(
        self, error_cls: type[ApiError], method: str, url: str, **kwargs
    ) -> httpx.Response:
        """送出請求，連線層錯誤轉為指定的 ApiError"""
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s 連線失敗: %s", method, url, e)
            raise error_cls() from e

    # === 股票 ===

    async def list_stocks(self) -> list[Stock]:
        """取得所有股票"""
        response = await self._send(FetchFailedError, "GET", "/api/stock/all")
        if not response.is_success:
            raise FetchFailedError(status_code=response.status_code)

        data = _read_json(response)
        if not isinstance(data, dict):
            raise FetchFailedError(status_code=response.status_code)
        try:
            return [Stock.model_validate(item) for item in data.get("stocks") or []]
        except ValueError as e:
            raise FetchFailedError(status_code=response.status_code) from e

    async def get_stock(self, stock_id: str) -> Stock:
        """依 ID 取得單一股票"""
        path = f"/api/stock/{quote(stock_id, safe='')}"
        response = await self._send(StockNotFoundError, "GET", path)
        if not response.is_success:
            raise StockNotFoundError(status_code=response.status_code)

        data = _read_json(response)
        try:
            return Stock.model_validate(data["stock"])
        except (TypeError, KeyError, ValueError) as e:
            raise StockNotFoundError(status_code=response.status_code) from e

    # === 用戶 ===

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """
        用戶登入。

        Returns:
            (User, token)

        Raises:
            LoginFailedError: 帳密錯誤（訊息取自後端）或連線失敗
        """
        response = await self._send(
            LoginFailedError,
            "POST",
            "/api/users/login",
            json={"email": email, "password": password},
        )
        if not response.is_success:
            raise LoginFailedError(
                _error_message(response), status_code=response.status_code
            )

        data = _read_json(response)
        try:
            user = User.model_validate(data["user"])
            token = data["token"]
        except (TypeError, KeyError, ValueError) as e:
            raise LoginFailedError(status_code=response.status_code) from e
        if not isinstance(token, str) or not token:
            raise LoginFailedError(status_code=response.status_code)
        return user, token

    async def register(self, data: RegisterData) -> None:
        """用戶註冊（後端不回傳 token，需再登入一次）"""
        response = await self._send(
            RegistrationFailedError,
            "POST",
            "/api/users/register",
            json={"user": data.model_dump(mode="json", by_alias=True)},
        )
        if not response.is_success:
            raise RegistrationFailedError(
                _error_message(response), status_code=response.status_code
            )

    async def buy_stock(self, stock_id: str, quantity: int) -> User:
        """
        購買股票，回傳後端更新後的用戶資料。

        Raises:
            NotAuthenticatedError: 本地沒有 token（不會發出請求）
            PurchaseFailedError: 後端拒絕或連線失敗
        """
        token = await self._storage.get_item(TOKEN_KEY)
        if not token:
            raise NotAuthenticatedError()

        logger.info("購買股票 %s x%d", stock_id, quantity)
        response = await self._send(
            PurchaseFailedError,
            "PUT",
            "/api/users/buystock",
            json={"stockId": stock_id, "quantity": quantity},
            headers={"Authorization": f"Bearer {token}"},
        )
        if not response.is_success:
            raise PurchaseFailedError(
                _error_message(response), status_code=response.status_code
            )

        data = _read_json(response)
        try:
            return User.model_validate(data["user"])
        except (TypeError, KeyError, ValueError) as e:
            raise PurchaseFailedError(status_code=response.status_code) from e

    async def close(self) -> None:
        """關閉 HTTP 連線"""
        await self._client.aclose()
