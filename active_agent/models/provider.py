from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol

from ..core.config import ProviderConfig
from .dto import Prompt, Response


class GenerationProvider(Protocol):
    """Protocol implemented by all provider adapters."""

    def name(self) -> str:
        """Return the provider identifier (e.g. ollama, openai)."""

    def embed(self, prompt: Prompt) -> Response:
        """Return an embedding of the prompt's message content."""


class EmbeddingStrategy(Protocol):
    """Backend-specific request builder and response parser for embeddings."""

    default_model: str

    def build_parameters(
        self,
        config: ProviderConfig,
        prompt: Optional[Prompt],
        input: Any = None,
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Return the JSON body sent to the embeddings endpoint."""

    def parse_response(
        self,
        prompt: Optional[Prompt],
        raw_response: Mapping[str, Any],
        raw_request: Optional[Dict[str, Any]] = None,
    ) -> Response:
        """Translate the endpoint payload into a Response."""
