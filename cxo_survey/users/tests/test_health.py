from http import HTTPStatus
from unittest import mock

import pytest
from django.db import connection as dj_conn
from django.urls import reverse


class DummyDbError(Exception):
    """Synthetic DB error for testing."""


@pytest.fixture
def redis_up():
    with mock.patch("config.health.redis.Redis.ping", return_value=True):
        yield


@pytest.mark.django_db
@pytest.mark.usefixtures("redis_up")
@pytest.mark.parametrize("path", ["/health/", "/api/health/"])
def test_health_ok(client, path):
    resp = client.get(path)
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert data["components"]["db"]["ok"] is True
    assert data["components"]["redis"]["ok"] is True
    assert "timestamp" in data


@pytest.mark.django_db
def test_health_degraded_when_redis_fails(client):
    with mock.patch(
        "config.health.redis.Redis.ping",
        side_effect=TimeoutError("redis timeout"),
    ):
        resp = client.get(reverse("api:health"))
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["redis"]["ok"] is False
    assert data["status"] == "degraded"


@pytest.mark.django_db
def test_health_down_when_everything_fails(client, monkeypatch):
    msg = "db down"

    def raise_cursor():
        raise DummyDbError(msg)

    monkeypatch.setattr(dj_conn, "cursor", raise_cursor, raising=True)
    with mock.patch(
        "config.health.redis.Redis.ping",
        side_effect=ConnectionError("redis down"),
    ):
        resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["db"]["ok"] is False
    assert data["status"] == "down"


@pytest.mark.django_db
@pytest.mark.usefixtures("redis_up")
def test_health_reports_chatbot_without_failing(client, settings):
    settings.GEMINI_API_KEY = ""
    data = client.get("/health/").json()
    assert data["status"] == "ok"
    assert data["service"] == "cxo-survey"
    assert data["features"]["chatbot"] is False

    settings.GEMINI_API_KEY = "test-key"
    assert client.get("/health/").json()["features"]["chatbot"] is True
