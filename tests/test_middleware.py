# tests/test_middleware.py
"""Tests for request logging and security headers."""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from forum_core.core.exception_handlers import setup_exception_handlers
from forum_core.core.middleware import setup_middleware


@pytest.fixture()
def logged_client() -> TestClient:
    app = FastAPI()
    setup_middleware(app)
    setup_exception_handlers(app)

    @app.get("/ok")
    def _ok() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/boom")
    def _boom() -> None:
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


def test_successful_request_is_logged(logged_client, caplog) -> None:
    caplog.set_level(logging.INFO, logger="forum_core.requests")

    response = logged_client.get("/ok")

    assert response.status_code == 200
    assert "GET /ok -> 200" in caplog.text


def test_failing_request_is_still_logged(logged_client, caplog) -> None:
    caplog.set_level(logging.INFO, logger="forum_core.requests")

    response = logged_client.get("/boom")

    assert response.status_code == 500
    assert "GET /boom -> 500" in caplog.text
