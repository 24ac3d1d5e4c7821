# This file tests the plain-text greeting routes.
# It exists to keep the routing smoke-test endpoints stable for deployment checks.

from __future__ import annotations

from tests.api.support import api_test_client


def test_hello() -> None:
    with api_test_client() as client:
        response = client.get("/")

    assert response.status_code == 200
    assert response.text == "Hello world!"


def test_echo() -> None:
    with api_test_client() as client:
        response = client.post("/echo", content=b"test")

    assert response.status_code == 200
    assert response.text == "Hello test!"


def test_manual_hello() -> None:
    with api_test_client() as client:
        response = client.get("/hey")

    assert response.status_code == 200
    assert response.text == "Hey there!"


def test_echo_rejects_invalid_utf8() -> None:
    with api_test_client() as client:
        response = client.post("/echo", content=b"\xff\xfe")

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_BODY"
