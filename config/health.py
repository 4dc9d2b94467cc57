"""Liveness of the stores the survey API needs, plus optional integrations."""

from __future__ import annotations

from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_redis() -> dict[str, Any]:
    """Celery broker used for OTP and invite expiry."""
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return {"ok": False, "error": "REDIS_URL not configured"}
    try:
        redis.Redis.from_url(
            url, socket_timeout=0.5, socket_connect_timeout=0.5
        ).ping()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


CHECKS = {"db": check_db, "redis": check_redis}


def _google_app() -> dict[str, Any]:
    google = getattr(settings, "SOCIALACCOUNT_PROVIDERS", {}).get("google", {})
    apps = google.get("APPS") or [{}]
    return apps[0]


def feature_flags() -> dict[str, bool]:
    """Optional integrations; a missing one never fails the health check."""
    return {
        "chatbot": bool(getattr(settings, "GEMINI_API_KEY", "")),
        "google_login": bool(_google_app().get("client_id")),
    }


def health(request):
    components = {name: check() for name, check in CHECKS.items()}
    up = [c["ok"] for c in components.values()]

    if all(up):
        status = "ok"
    elif any(up):
        status = "degraded"
    else:
        status = "down"

    return JsonResponse(
        {
            "status": status,
            "service": "cxo-survey",
            "timestamp": timezone.now().isoformat(),
            "components": components,
            "features": feature_flags(),
        },
        status=200 if status == "ok" else 503,
    )
