"""
後端 API 錯誤類別

所有錯誤的 str(exc) 即為可直接顯示給用戶的訊息。
"""

# 預設錯誤訊息（後端未提供可解析的錯誤內容時使用）
FETCH_FAILED_MESSAGE = "取得股票列表失敗"
STOCK_NOT_FOUND_MESSAGE = "找不到該股票"
NOT_AUTHENTICATED_MESSAGE = "尚未登入"
PURCHASE_FAILED_MESSAGE = "購買失敗"
LOGIN_FAILED_MESSAGE = "連線錯誤"
REGISTRATION_FAILED_MESSAGE = "註冊失敗"


class ApiError(Exception):
    """後端 API 錯誤"""

    default_message = "API 錯誤"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class FetchFailedError(ApiError):
    """取得股票列表失敗"""
    default_message = FETCH_FAILED_MESSAGE


class StockNotFoundError(ApiError):
    """找不到股票"""
    default_message = STOCK_NOT_FOUND_MESSAGE


class NotAuthenticatedError(ApiError):
    """缺少認證 Token"""
    default_message = NOT_AUTHENTICATED_MESSAGE


class PurchaseFailedError(ApiError):
    """購買失敗"""
    default_message = PURCHASE_FAILED_MESSAGE


class LoginFailedError(ApiError):
    """登入失敗"""
    default_message = LOGIN_FAILED_MESSAGE


class RegistrationFailedError(ApiError):
    """註冊失敗"""
    default_message = REGISTRATION_FAILED_MESSAGE
