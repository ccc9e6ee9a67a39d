from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from ..core.config import ProviderConfig
from .client import OpenAICompatibleClient
from .dto import Message, Prompt, Response
from .errors import ProviderResponseError
from .provider import EmbeddingStrategy, GenerationProvider

logger = logging.getLogger(__name__)


class OpenAIEmbeddingStrategy:
    """Embedding shape used by OpenAI's ``/v1/embeddings`` endpoint."""

    def __init__(self, default_model: str = "text-embedding-3-small") -> None:
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
            "input": input,
        }

    def parse_response(
        self,
        prompt: Optional[Prompt],
        raw_response: Mapping[str, Any],
        raw_request: Optional[Dict[str, Any]] = None,
    ) -> Response:
        embedding = self._extract_embedding(raw_response)
        if embedding is None:
            logger.warning("Embeddings response missing 'data[0].embedding': %s", raw_response)
            raise ProviderResponseError("embeddings response missing data")
        return Response(
            prompt=prompt,
            message=Message(content=embedding, role="assistant"),
            raw_response=raw_response,
            raw_request=raw_request,
        )

    def _extract_embedding(self, data: Mapping[str, Any]) -> Any:
        if not isinstance(data, Mapping):
            return None
        items = data.get("data")
        if isinstance(items, list) and items:
            first = items[0]
            if isinstance(first, Mapping):
                return first.get("embedding")
        return None


class OpenAICompatibleProvider(GenerationProvider):
    """Provider for any backend exposing the OpenAI REST layout.

    Backend differences are confined to the injected ``EmbeddingStrategy``;
    transport, auth headers and error logging stay in the shared client.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        embeddings: Optional[EmbeddingStrategy] = None,
        client: Optional[OpenAICompatibleClient] = None,
    ) -> None:
        self.config = config
        self.embeddings: EmbeddingStrategy = embeddings or OpenAIEmbeddingStrategy()
        self.client = client or OpenAICompatibleClient(
            host=config.host,
            api_version=config.api_version,
            access_token=config.access_token,
            timeout_sec=config.timeout_sec,
            log_errors=True,
        )
        self.prompt: Optional[Prompt] = None
        self.response: Optional[Response] = None

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def api_version(self) -> str:
        return self.config.api_version

    @property
    def access_token(self) -> Optional[str]:
        return self.config.access_token

    @property
    def model_name(self) -> Optional[str]:
        return self.config.model

    def name(self) -> str:
        """Return the provider identifier."""

        return self.config.service.lower()

    def embeddings_parameters(self, input: Any = None, model: Optional[str] = None) -> Dict[str, Any]:
        """Build the embeddings request body for ``input`` or the bound prompt."""

        return self.embeddings.build_parameters(self.config, self.prompt, input=input, model=model)

    def embeddings_response(
        self, raw_response: Mapping[str, Any], raw_request: Optional[Dict[str, Any]] = None
    ) -> Response:
        """Parse an embeddings payload into a Response bound to the current prompt."""

        self.response = self.embeddings.parse_response(self.prompt, raw_response, raw_request)
        return self.response

    def embed(self, prompt: Prompt) -> Response:
        """Embed the prompt's message content through the remote endpoint."""

        parameters = self.embeddings.build_parameters(self.config, prompt)
        logger.debug("Requesting %s embedding with model %s", self.name(), parameters.get("model"))
        raw_response = self.client.embeddings(parameters)
        response = self.embeddings.parse_response(prompt, raw_response, parameters)
        # Last call only; concurrent callers rely on the returned Response.
        self.prompt = prompt
        self.response = response
        return response
