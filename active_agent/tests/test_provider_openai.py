"""The generic OpenAI-compatible provider and its default embedding shape."""

from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
import requests

from active_agent.core.config import ProviderConfig
from active_agent.models.dto import Message, Prompt, Response
from active_agent.models.errors import ProviderResponseError
from active_agent.models.provider_openai import OpenAICompatibleProvider, OpenAIEmbeddingStrategy


def _config(**overrides: Any) -> ProviderConfig:
    values: Dict[str, Any] = {"service": "OpenAI", "host": "https://api.openai.com", "api_version": "v1"}
    values.update(overrides)
    return ProviderConfig(**values)


def test_openai_strategy_builds_input_parameters(prompt):
    strategy = OpenAIEmbeddingStrategy()
    params = strategy.build_parameters(_config(), prompt)
    assert params == {"model": "text-embedding-3-small", "input": "Test content for embedding"}


def test_openai_strategy_parses_data_array(prompt):
    strategy = OpenAIEmbeddingStrategy()
    raw = {"data": [{"embedding": [0.4, 0.5], "index": 0}], "model": "text-embedding-3-small"}

    response = strategy.parse_response(prompt, raw, {"model": "m", "input": "x"})

    assert response.message.content == [0.4, 0.5]
    assert response.message.role == "assistant"
    assert response.raw_request == {"model": "m", "input": "x"}


def test_openai_strategy_rejects_ollama_shape(prompt):
    with pytest.raises(ProviderResponseError):
        OpenAIEmbeddingStrategy().parse_response(prompt, {"embedding": [0.1]})


class _ReversedStrategy:
    """Custom strategy used to show the provider defers to whatever is injected."""

    default_model = "reverse-1"

    def build_parameters(self, config, prompt, input=None, model=None):
        text = input if input is not None else prompt.message.content
        return {"model": model or self.default_model, "text": text[::-1]}

    def parse_response(self, prompt, raw_response, raw_request: Optional[Dict[str, Any]] = None):
        return Response(
            prompt=prompt,
            message=Message(role="assistant", content=raw_response["vector"]),
            raw_response=raw_response,
            raw_request=raw_request,
        )


def test_provider_uses_injected_strategy(monkeypatch, fake_response):
    sent: Dict[str, Any] = {}

    def fake_post(self, url, json=None, timeout=None, **_kwargs):  # noqa: A002
        sent.update(url=url, json=json)
        return fake_response({"vector": [9.0]})

    monkeypatch.setattr(requests.Session, "post", fake_post)
    provider = OpenAICompatibleProvider(_config(host="http://embedder:8080"), embeddings=_ReversedStrategy())

    response = provider.embed(Prompt(message=Message(content="abc")))

    assert sent == {"url": "http://embedder:8080/v1/embeddings", "json": {"model": "reverse-1", "text": "cba"}}
    assert response.embedding == [9.0]
    assert provider.name() == "openai"


def test_provider_defaults_to_openai_strategy():
    provider = OpenAICompatibleProvider(_config(embedding_model="text-embedding-3-large"))

    assert isinstance(provider.embeddings, OpenAIEmbeddingStrategy)
    assert provider.embeddings_parameters(input="hi") == {"model": "text-embedding-3-large", "input": "hi"}


def test_embeddings_parameters_without_bound_prompt():
    provider = OpenAICompatibleProvider(_config())
    assert provider.prompt is None
    assert provider.embeddings_parameters() == {"model": "text-embedding-3-small", "input": None}
