"""
依賴注入

各狀態容器在應用程式啟動時建立並掛在 app.state，路由透過 Depends 取得。
"""

from fastapi import Request

from stockdesk.client.backend import BackendClient
from stockdesk.services.catalog import StockCatalog
from stockdesk.services.locale import LocaleStore
from stockdesk.services.session import SessionStore


def get_client(request: Request) -> BackendClient:
    return request.app.state.client


def get_session(request: Request) -> SessionStore:
    return request.app.state.session


def get_locale(request: Request) -> LocaleStore:
    return request.app.state.locale


def get_catalog(request: Request) -> StockCatalog:
    return request.app.state.catalog
