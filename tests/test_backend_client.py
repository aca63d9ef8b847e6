"""Tests for the REST client: paths, auth header, error-body parsing and fallbacks."""

from __future__ import annotations

import asyncio
from datetime import date

import httpx
import pytest

from stockdesk.client.errors import (
    FETCH_FAILED_MESSAGE,
    LOGIN_FAILED_MESSAGE,
    NOT_AUTHENTICATED_MESSAGE,
    PURCHASE_FAILED_MESSAGE,
    FetchFailedError,
    LoginFailedError,
    NotAuthenticatedError,
    PurchaseFailedError,
    RegistrationFailedError,
    StockNotFoundError,
)
from stockdesk.schemas.user import RegisterData
from stockdesk.storage import MemoryLocalStorage

from tests.conftest import make_client, stock_payload, user_payload


def test_list_stocks_returns_stocks_field():
    """GET /api/stock/all without auth header; stocks parsed with wire aliases."""
    client, stub, _ = make_client(
        lambda r: httpx.Response(200, json={"stocks": [stock_payload(), stock_payload(_id="s2")]})
    )
    stocks = asyncio.run(client.list_stocks())
    assert [s.id for s in stocks] == ["s1", "s2"]
    assert stocks[0].stock_short_name == "AAPL"
    assert stocks[0].unit_price == 150.0
    req = stub.requests[0]
    assert req.method == "GET"
    assert req.url.path == "/api/stock/all"
    assert "authorization" not in req.headers


def test_list_stocks_non_success_is_generic_error():
    """The error body is not consulted for the catalog listing."""
    client, _, _ = make_client(lambda r: httpx.Response(500, json={"error": "db down"}))
    with pytest.raises(FetchFailedError) as exc:
        asyncio.run(client.list_stocks())
    assert str(exc.value) == FETCH_FAILED_MESSAGE
    assert exc.value.status_code == 500


def test_list_stocks_transport_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client, _, _ = make_client(handler)
    with pytest.raises(FetchFailedError):
        asyncio.run(client.list_stocks())


def test_get_stock_uses_id_in_path():
    client, stub, _ = make_client(lambda r: httpx.Response(200, json={"stock": stock_payload(_id="abc")}))
    stock = asyncio.run(client.get_stock("abc"))
    assert stock.id == "abc"
    assert stub.requests[0].url.path == "/api/stock/abc"


def test_get_stock_escapes_reserved_characters():
    client, stub, _ = make_client(lambda r: httpx.Response(200, json={"stock": stock_payload()}))
    asyncio.run(client.get_stock("abc?admin=1"))
    url = stub.requests[0].url
    assert url.raw_path == b"/api/stock/abc%3Fadmin%3D1"
    assert url.query == b""

    asyncio.run(client.get_stock("../users/me"))
    assert stub.requests[1].url.raw_path == b"/api/stock/..%2Fusers%2Fme"


def test_null_quantity_is_read_as_zero():
    client, _, _ = make_client(
        lambda r: httpx.Response(200, json={"stocks": [stock_payload(), stock_payload(_id="s2", quantity=None)]})
    )
    stocks = asyncio.run(client.list_stocks())
    assert [s.id for s in stocks] == ["s1", "s2"]
    assert stocks[1].quantity == 0


def test_login_accepts_holding_with_null_quantity():
    user = user_payload(stocks=[stock_payload(quantity=None)])
    client, _, _ = make_client(lambda r: httpx.Response(200, json={"user": user, "token": "T"}))
    logged_in, _ = asyncio.run(client.login("amy@example.com", "secret1"))
    assert logged_in.stocks[0].quantity == 0


def test_get_stock_not_found():
    client, _, _ = make_client(lambda r: httpx.Response(404))
    with pytest.raises(StockNotFoundError):
        asyncio.run(client.get_stock("missing"))


def test_buy_without_token_fails_before_request():
    client, stub, _ = make_client(lambda r: httpx.Response(200, json={"user": user_payload()}))
    with pytest.raises(NotAuthenticatedError) as exc:
        asyncio.run(client.buy_stock("s1", 1))
    assert str(exc.value) == NOT_AUTHENTICATED_MESSAGE
    assert stub.requests == []


def test_buy_sends_bearer_token_and_body():
    storage = MemoryLocalStorage({"token": "tok-123"})
    client, stub, _ = make_client(
        lambda r: httpx.Response(200, json={"user": user_payload(stocks=[stock_payload(quantity=2)])}),
        storage,
    )
    user = asyncio.run(client.buy_stock("s1", 2))
    assert user.stocks[0].quantity == 2
    req = stub.requests[0]
    assert req.method == "PUT"
    assert req.url.path == "/api/users/buystock"
    assert req.headers["authorization"] == "Bearer tok-123"
    assert stub.json_bodies()[0] == {"stockId": "s1", "quantity": 2}
    # the client never writes storage
    assert storage.snapshot() == {"token": "tok-123"}


def test_buy_error_message_from_body():
    storage = MemoryLocalStorage({"token": "t"})
    client, _, _ = make_client(lambda r: httpx.Response(400, json={"error": "Stock insuffisant"}), storage)
    with pytest.raises(PurchaseFailedError) as exc:
        asyncio.run(client.buy_stock("s1", 1))
    assert str(exc.value) == "Stock insuffisant"


def test_buy_unparseable_error_body_falls_back():
    storage = MemoryLocalStorage({"token": "t"})
    client, _, _ = make_client(lambda r: httpx.Response(502, text="<html>Bad gateway</html>"), storage)
    with pytest.raises(PurchaseFailedError) as exc:
        asyncio.run(client.buy_stock("s1", 1))
    assert str(exc.value) == PURCHASE_FAILED_MESSAGE


def test_login_returns_user_and_token():
    client, stub, _ = make_client(lambda r: httpx.Response(200, json={"user": user_payload(), "token": "T"}))
    user, token = asyncio.run(client.login("amy@example.com", "secret1"))
    assert user.id == "u1"
    assert token == "T"
    assert stub.requests[0].url.path == "/api/users/login"
    assert stub.json_bodies()[0] == {"email": "amy@example.com", "password": "secret1"}


def test_login_failure_uses_server_message_or_generic():
    client, _, _ = make_client(lambda r: httpx.Response(401, json={"error": "Identifiants invalides"}))
    with pytest.raises(LoginFailedError) as exc:
        asyncio.run(client.login("a@b.co", "secret1"))
    assert str(exc.value) == "Identifiants invalides"

    client, _, _ = make_client(lambda r: httpx.Response(500, json={"message": "no error field"}))
    with pytest.raises(LoginFailedError) as exc:
        asyncio.run(client.login("a@b.co", "secret1"))
    assert str(exc.value) == LOGIN_FAILED_MESSAGE


def test_register_wraps_payload_in_user_key():
    client, stub, _ = make_client(lambda r: httpx.Response(201, json={"message": "ok"}))
    data = RegisterData(
        name="Amy",
        email="amy@example.com",
        password="secret1",
        date_of_birth=date(1990, 5, 17),
        address="1 Main Street",
    )
    asyncio.run(client.register(data))
    assert stub.requests[0].url.path == "/api/users/register"
    assert stub.json_bodies()[0] == {
        "user": {
            "name": "Amy",
            "email": "amy@example.com",
            "password": "secret1",
            "dateOfBirth": "1990-05-17",
            "address": "1 Main Street",
        }
    }


def test_register_failure_message():
    client, _, _ = make_client(lambda r: httpx.Response(409, json={"error": "Email déjà utilisé"}))
    data = RegisterData(
        name="Amy", email="amy@example.com", password="secret1",
        date_of_birth=date(1990, 1, 1), address="1 Main Street",
    )
    with pytest.raises(RegistrationFailedError) as exc:
        asyncio.run(client.register(data))
    assert str(exc.value) == "Email déjà utilisé"
