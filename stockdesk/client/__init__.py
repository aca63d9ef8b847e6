from stockdesk.client.backend import BackendClient
from stockdesk.client.errors import (
    ApiError,
    FetchFailedError,
    LoginFailedError,
    NotAuthenticatedError,
    PurchaseFailedError,
    RegistrationFailedError,
    StockNotFoundError,
)

__all__ = [
    "BackendClient",
    "ApiError",
    "FetchFailedError",
    "LoginFailedError",
    "NotAuthenticatedError",
    "PurchaseFailedError",
    "RegistrationFailedError",
    "StockNotFoundError",
]
