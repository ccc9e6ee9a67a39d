"""Shared fixtures for provider tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest
import requests

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from active_agent.core import config as config_module
from active_agent.models.dto import Message, Prompt

PROVIDER_ENV_VARS = (
    "OLLAMA_API_KEY",
    "OLLAMA_ACCESS_TOKEN",
    "OPENAI_API_KEY",
    "OPENAI_ACCESS_TOKEN",
    "ACTIVE_AGENT_OLLAMA_HOST",
    "ACTIVE_AGENT_OLLAMA_API_VERSION",
    "ACTIVE_AGENT_OLLAMA_EMBED_MODEL",
    "ACTIVE_AGENT_OPENAI_HOST",
    "ACTIVE_AGENT_OPENAI_API_VERSION",
    "ACTIVE_AGENT_OPENAI_EMBED_MODEL",
    "ACTIVE_AGENT_REQUEST_TIMEOUT_SEC",
    "ACTIVE_AGENT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables from leaking into provider defaults."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_module.reload_settings()
    yield
    config_module.reload_settings()


@pytest.fixture
def ollama_config() -> Dict[str, Any]:
    return {
        "service": "Ollama",
        "model": "gemma3:latest",
        "host": "http://localhost:11434",
        "api_version": "v1",
        "embedding_model": "nomic-embed-text",
    }


@pytest.fixture
def prompt() -> Prompt:
    return Prompt(
        message=Message(content="Test content for embedding"),
        instructions="You are a test agent",
    )


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def fake_response():
    return FakeResponse
