"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("GOOGLE_AI_API_KEY", "test-key")
os.environ.setdefault("ENVIRONMENT", "test")

from mentor_proxy.config import Settings  # noqa: E402
from mentor_proxy.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    monkeypatch.setenv("GOOGLE_AI_API_KEY", "test-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


def gemini_reply(text: str) -> dict:
    """Build a minimal generateContent response body."""

    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}
