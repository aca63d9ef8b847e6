"""Tests for login/register form validation and submission."""

from __future__ import annotations

import asyncio
from datetime import date

import httpx
import pytest
from pydantic import ValidationError

from stockdesk.schemas.user import LoginForm, RegisterForm, is_adult
from stockdesk.services.forms import submit_login, submit_register
from stockdesk.services.session import SessionStore

from tests.conftest import make_client, user_payload


def _register_data(**overrides) -> dict:
    data = {
        "name": "Amy",
        "email": "amy@example.com",
        "address": "1 Main Street",
        "password": "secret1",
        "confirm_password": "secret1",
        "date_of_birth": date(1990, 5, 17),
    }
    data.update(overrides)
    return data


def _error_fields(exc: ValidationError) -> set[str]:
    return {str(err["loc"][0]) for err in exc.errors() if err["loc"]}


def test_login_form_validation():
    LoginForm(email="amy@example.com", password="secret1")
    with pytest.raises(ValidationError) as exc:
        LoginForm(email="not-an-email", password="123")
    assert _error_fields(exc.value) == {"email", "password"}


def test_register_form_accepts_valid_data():
    form = RegisterForm(**_register_data())
    payload = form.to_payload()
    assert payload.model_dump(mode="json", by_alias=True) == {
        "name": "Amy",
        "email": "amy@example.com",
        "password": "secret1",
        "dateOfBirth": "1990-05-17",
        "address": "1 Main Street",
    }


@pytest.mark.parametrize("overrides,field", [
    ({"name": "A"}, "name"),
    ({"email": "nope"}, "email"),
    ({"address": "x"}, "address"),
    ({"password": "12345", "confirm_password": "12345"}, "password"),
    ({"confirm_password": "different"}, "confirm_password"),
    ({"date_of_birth": date(1899, 12, 31)}, "date_of_birth"),
])
def test_register_form_field_errors(overrides, field):
    with pytest.raises(ValidationError) as exc:
        RegisterForm(**_register_data(**overrides))
    assert field in _error_fields(exc.value)


def test_register_form_rejects_minor():
    today = date.today()
    with pytest.raises(ValidationError) as exc:
        RegisterForm(**_register_data(date_of_birth=date(today.year - 10, 1, 1)))
    assert _error_fields(exc.value) == {"date_of_birth"}


def test_is_adult_compares_year_and_month_only():
    today = date(2026, 6, 15)
    assert is_adult(date(2000, 1, 1), today)
    assert is_adult(date(2008, 6, 30), today)  # same month counts, day ignored
    assert not is_adult(date(2008, 7, 1), today)
    assert not is_adult(date(2010, 1, 1), today)


def test_submit_login_reports_server_error():
    client, _, storage = make_client(lambda r: httpx.Response(401, json={"error": "Identifiants invalides"}))
    session = SessionStore(client, storage)
    result = asyncio.run(submit_login(session, LoginForm(email="amy@example.com", password="secret1")))
    assert result.ok is False
    assert result.error == "Identifiants invalides"


def test_submit_register_logs_in():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/register"):
            return httpx.Response(201, json={})
        return httpx.Response(200, json={"user": user_payload(), "token": "T"})

    client, stub, storage = make_client(handler)
    session = SessionStore(client, storage)
    result = asyncio.run(submit_register(session, RegisterForm(**_register_data())))
    assert result.ok is True
    assert result.error is None
    assert session.is_logged_in
    # the confirmation password never leaves the form
    assert "confirm_password" not in stub.json_bodies()[0]["user"]
