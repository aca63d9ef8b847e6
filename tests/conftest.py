"""Shared fixtures: in-memory storage and a stubbed backend built on httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from stockdesk.client.backend import BackendClient
from stockdesk.services.locale import LocaleStore
from stockdesk.storage import MemoryLocalStorage

BASE_URL = "http://backend.test"


def stock_payload(**overrides: Any) -> dict:
    data = {
        "_id": "s1",
        "stockName": "Apple Inc.",
        "stockShortName": "AAPL",
        "quantity": 5,
        "unitPrice": 150.0,
        "isAvailable": True,
        "tags": ["tech"],
    }
    data.update(overrides)
    return data


def user_payload(**overrides: Any) -> dict:
    data = {
        "_id": "u1",
        "name": "Amy",
        "email": "amy@example.com",
        "stocks": [],
    }
    data.update(overrides)
    return data


class StubBackend:
    """Records every request and answers with the registered handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    storage: MemoryLocalStorage | None = None,
) -> tuple[BackendClient, StubBackend, MemoryLocalStorage]:
    storage = storage if storage is not None else MemoryLocalStorage()
    stub = StubBackend(handler)
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(stub))
    return BackendClient(BASE_URL, storage, http_client=http_client), stub, storage


@pytest.fixture
def storage() -> MemoryLocalStorage:
    return MemoryLocalStorage()


@pytest.fixture
def locale() -> LocaleStore:
    return LocaleStore("zh-TW")
