from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from ..core.config import (
    DEFAULT_OLLAMA_EMBED_MODEL,
    OLLAMA_TOKEN_ENV_VARS,
    CredentialResolver,
    ProviderConfig,
    Settings,
    env_credential_resolver,
    get_settings,
    resolve_provider_config,
)
from .client import OpenAICompatibleClient
from .dto import Message, Prompt, Response
from .errors import ProviderResponseError
from .provider_openai import OpenAICompatibleProvider

logger = logging.getLogger(__name__)


class OllamaEmbeddingStrategy:
    """Ollama embeddings take ``prompt`` and return a single ``embedding`` field."""

    def __init__(self, default_model: str = DEFAULT_OLLAMA_EMBED_MODEL) -> None:
        self.default_model = default_model

    def build_parameters(
        self,
        config: ProviderConfig,
        prompt: Optional[Prompt],
        input: Any = None,
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        if input is None and prompt is not None:
            input = prompt.message.content
        return {
            "model": config.embedding_model or model or self.default_model,
            "prompt": input,
        }

    def parse_response(
        self,
        prompt: Optional[Prompt],
        raw_response: Mapping[str, Any],
        raw_request: Optional[Dict[str, Any]] = None,
    ) -> Response:
        embedding = raw_response.get("embedding") if isinstance(raw_response, Mapping) else None
        if embedding is None:
            logger.warning("Ollama response missing 'embedding' field: %s", raw_response)
            raise ProviderResponseError("ollama response missing embedding")
        return Response(
            prompt=prompt,
            message=Message(content=embedding, role="assistant"),
            raw_response=raw_response,
            raw_request=raw_request,
        )


class OllamaProvider(OpenAICompatibleProvider):
    """Adapter for Ollama's OpenAI-compatible REST API."""

    def __init__(
        self,
        config: Mapping[str, Any],
        *,
        credentials: Optional[CredentialResolver] = None,
        settings: Optional[Settings] = None,
        client: Optional[OpenAICompatibleClient] = None,
    ) -> None:
        """Resolve host, API version, token and models; no request is made."""
        settings = settings or get_settings()
        credentials = credentials or env_credential_resolver(*OLLAMA_TOKEN_ENV_VARS)
        resolved = resolve_provider_config(
            config,
            service="ollama",
            default_host=settings.ollama_host,
            default_api_version=settings.ollama_api_version,
            credentials=credentials,
            timeout_sec=settings.request_timeout_sec,
        )
        super().__init__(
            resolved,
            embeddings=OllamaEmbeddingStrategy(default_model=settings.ollama_embed_model),
            client=client,
        )

    def name(self) -> str:
        """Return the provider identifier."""

        return "ollama"
