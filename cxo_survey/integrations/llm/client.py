from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from django.conf import settings

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(Exception):
    """Raised when an LLM client is requested but missing configuration."""


@dataclass
class LLMConfig:
    provider: str = "gemini"
    model: str = "gemini-1.5-flash"
    api_key: str | None = None
    timeout: float = 15.0
    temperature: float = 0.7


class LLMClient:
    """Provider-agnostic interface for free-text generation."""

    def generate_text(self, prompt: str) -> str | None:
        raise NotImplementedError


class GeminiClient(LLMClient):
    """Minimal Gemini HTTP client using REST; no external deps."""

    def __init__(self, cfg: LLMConfig):
        if not cfg.api_key:
            msg = "GEMINI_API_KEY missing"
            raise LLMNotConfiguredError(msg)
        self.cfg = cfg

    def _endpoint(self) -> str:
        return (
            f"https://generativelanguage.googleapis.com/v1beta/models/"
            f"{self.cfg.model}:generateContent?key={self.cfg.api_key}"
        )

    def _post(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        data = json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(  # noqa: S310 - external URL by config
            self._endpoint(),
            data=data,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.cfg.timeout) as resp:  # noqa: S310 - external URL by config
                return json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:  # pragma: no cover - network
            logger.warning("Gemini HTTPError: %s", e.read().decode("utf-8", "ignore"))
            return None
        except Exception as e:  # noqa: BLE001 - catch-all for network/JSON
            logger.warning("Gemini request failed: %s", e)
            return None

    @staticmethod
    def _first_text(obj: dict[str, Any] | None) -> str | None:
        if not obj:
            return None
        candidates = obj.get("candidates") or []
        if not candidates:
            return None
        parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
        if not parts:
            return None
        text = parts[0].get("text")
        return text.strip() if isinstance(text, str) and text.strip() else None

    def generate_text(self, prompt: str) -> str | None:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.cfg.temperature},
        }
        return self._first_text(self._post(payload))


def get_llm_client_from_settings() -> LLMClient | None:
    """Factory reading settings to return a configured LLM client.

    Returns None when the provider is unsupported or the key is missing.
    """
    cfg = LLMConfig(
        provider=getattr(settings, "LLM_PROVIDER", "gemini"),
        model=getattr(settings, "LLM_MODEL", "gemini-1.5-flash"),
        api_key=getattr(settings, "GEMINI_API_KEY", None),
        timeout=float(getattr(settings, "LLM_TIMEOUT", 15.0)),
    )
    if cfg.provider == "gemini":
        try:
            return GeminiClient(cfg)
        except LLMNotConfiguredError:
            logger.info("GEMINI_API_KEY missing; chatbot disabled")
            return None
    logger.info("LLM provider '%s' not supported; skipping LLM", cfg.provider)
    return None
