"""POST /api/waitlist — verifies every row of the HTTP response contract.

Invariants:
    - 200 {"success": true, ...} on first signup, 409 on the same email again
    - 400 with a fixed message per validation rule; nothing written
    - 500 "Database connection failed" on storage failure, no detail leaked
    - Every response is application/json
    - Each failure is logged once, by the error handler, at its own severity
"""

import logging

import pytest
from sqlalchemy import func, select

from waitlist_api.api.routes.waitlist import get_entrant_gateway
from waitlist_api.core.domain_types import StorageUnavailable
from waitlist_api.main import app
from waitlist_api.models.entrant import Entrant

URL = "/api/waitlist"


async def _count_rows(test_session_factory) -> int:
    async with test_session_factory() as session:
        return await session.scalar(select(func.count()).select_from(Entrant))


async def test_signup_returns_200_and_stores_row(client, fetch_entrants):
    res = await client.post(URL, json={"email": "ada@example.com", "name": "Ada"})

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/json")
    assert res.json() == {"success": True, "message": "Joined waitlist successfully"}

    [row] = await fetch_entrants("ada@example.com")
    assert row.name == "Ada"
    assert row.id is not None
    assert row.created_at is not None
    assert row.interest is None
    assert row.message is None


async def test_optional_fields_stored_verbatim(client, fetch_entrants):
    res = await client.post(URL, json={
        "email": "grace@example.com", "name": "Grace",
        "interest": "compilers", "message": "Please let me in early!",
    })
    assert res.status_code == 200

    [row] = await fetch_entrants("grace@example.com")
    assert row.interest == "compilers"
    assert row.message == "Please let me in early!"


async def test_duplicate_email_returns_409(client, fetch_entrants):
    body = {"email": "ada@example.com", "name": "Ada"}
    first = await client.post(URL, json=body)
    second = await client.post(URL, json=body)

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json() == {"error": "This email is already on the waitlist"}
    assert len(await fetch_entrants("ada@example.com")) == 1


@pytest.mark.parametrize("body", [
    {"email": "not-an-email", "name": "Ada"},
    {"email": "a@b", "name": "Ada"},
    {"email": "ada@example.com\n", "name": "Ada"},
    {"email": "", "name": "Ada"},
    {"name": "Ada"},
])
async def test_invalid_email_returns_400(client, test_session_factory, body):
    res = await client.post(URL, json=body)
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid email address"}
    assert await _count_rows(test_session_factory) == 0


@pytest.mark.parametrize("body", [
    {"email": "ada@example.com", "name": ""},
    {"email": "ada@example.com", "name": "   "},
    {"email": "ada@example.com"},
])
async def test_missing_name_returns_400(client, test_session_factory, body):
    res = await client.post(URL, json=body)
    assert res.status_code == 400
    assert res.json() == {"error": "Name is required"}
    assert await _count_rows(test_session_factory) == 0


@pytest.mark.parametrize("content", [b"{not json", b"", b"[1, 2"])
async def test_malformed_body_returns_400(client, test_session_factory, content):
    res = await client.post(
        URL, content=content, headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.headers["content-type"].startswith("application/json")
    assert res.json() == {"error": "Invalid request"}
    assert await _count_rows(test_session_factory) == 0


async def test_json_array_body_returns_400(client):
    res = await client.post(URL, json=[{"email": "ada@example.com", "name": "Ada"}])
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request"}


async def test_trailing_newline_email_is_not_a_second_signup(client, test_session_factory):
    first = await client.post(URL, json={"email": "ada@example.com", "name": "Ada"})
    second = await client.post(URL, json={"email": "ada@example.com\n", "name": "Ada"})

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json() == {"error": "Invalid email address"}
    assert await _count_rows(test_session_factory) == 1


async def test_deeply_nested_body_returns_400(client, test_session_factory):
    content = (
        b'{"email": "ada@example.com", "name": "Ada", "message": '
        + b"[" * 100_000 + b"]" * 100_000 + b"}"
    )
    res = await client.post(
        URL, content=content, headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request"}
    assert await _count_rows(test_session_factory) == 0


async def test_non_finite_number_returns_400(client, test_session_factory):
    res = await client.post(
        URL, content=b'{"email": "ada@example.com", "name": "Ada", "interest": NaN}',
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request"}
    assert await _count_rows(test_session_factory) == 0


@pytest.mark.parametrize("name", [7, ["Ada"], {"first": "Ada"}])
async def test_non_string_name_returns_400(client, test_session_factory, name):
    res = await client.post(URL, json={"email": "ada@example.com", "name": name})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request"}
    assert await _count_rows(test_session_factory) == 0


async def test_falsy_optional_fields_stored_as_null(client, fetch_entrants):
    res = await client.post(URL, json={
        "email": "ada@example.com", "name": "Ada", "interest": 0, "message": False,
    })
    assert res.status_code == 200
    [row] = await fetch_entrants("ada@example.com")
    assert row.interest is None
    assert row.message is None


class _FailingGateway:
    async def register_entrant(self, entry):
        return StorageUnavailable(reason="could not connect to server at 10.0.0.5")


async def test_storage_failure_returns_500_without_detail(client):
    app.dependency_overrides[get_entrant_gateway] = lambda: _FailingGateway()
    try:
        res = await client.post(URL, json={"email": "ada@example.com", "name": "Ada"})
    finally:
        app.dependency_overrides.pop(get_entrant_gateway, None)

    assert res.status_code == 500
    assert res.json() == {"error": "Database connection failed"}
    assert "10.0.0.5" not in res.text


async def test_storage_failure_logged_once_at_critical(client, caplog):
    app.dependency_overrides[get_entrant_gateway] = lambda: _FailingGateway()
    try:
        with caplog.at_level(logging.DEBUG, logger="waitlist_api"):
            res = await client.post(URL, json={"email": "ada@example.com", "name": "Ada"})
    finally:
        app.dependency_overrides.pop(get_entrant_gateway, None)

    assert res.status_code == 500
    handler_records = [
        r for r in caplog.records if r.name == "waitlist_api.api.error_handlers"
    ]
    assert len(handler_records) == 1
    assert handler_records[0].levelno == logging.CRITICAL
    assert handler_records[0].error_code == "DATABASE_ERROR"
    assert not [
        r for r in caplog.records if r.name == "waitlist_api.services.registration"
    ]


async def test_validation_failure_logged_at_warning(client, caplog):
    with caplog.at_level(logging.DEBUG, logger="waitlist_api"):
        res = await client.post(URL, json={"email": "nope", "name": "Ada"})
    assert res.status_code == 400
    [record] = [
        r for r in caplog.records if r.name == "waitlist_api.api.error_handlers"
    ]
    assert record.levelno == logging.WARNING


async def test_cors_preflight_allows_landing_page(client):
    res = await client.options(URL, headers={
        "origin": "http://localhost:4321",
        "access-control-request-method": "POST",
    })
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "http://localhost:4321"
