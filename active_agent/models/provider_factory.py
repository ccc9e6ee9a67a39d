"""Factory helpers for selecting a provider from a config mapping."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..core.config import (
    OPENAI_TOKEN_ENV_VARS,
    CredentialResolver,
    Settings,
    env_credential_resolver,
    get_settings,
    resolve_provider_config,
)
from .provider import GenerationProvider
from .provider_ollama import OllamaProvider
from .provider_openai import OpenAICompatibleProvider, OpenAIEmbeddingStrategy

logger = logging.getLogger(__name__)

SUPPORTED_SERVICES = ("ollama", "openai")


def build_provider(
    config: Mapping[str, Any],
    *,
    settings: Optional[Settings] = None,
    credentials: Optional[CredentialResolver] = None,
) -> GenerationProvider:
    """Return the provider named by ``config["service"]`` (ollama when unset)."""

    settings = settings or get_settings()
    key = str(config.get("service") or "ollama").strip().lower()

    if key == "ollama":
        return OllamaProvider(config, credentials=credentials, settings=settings)

    if key == "openai":
        resolved = resolve_provider_config(
            config,
            service="openai",
            default_host=settings.openai_host,
            default_api_version=settings.openai_api_version,
            credentials=credentials or env_credential_resolver(*OPENAI_TOKEN_ENV_VARS),
            timeout_sec=settings.request_timeout_sec,
        )
        return OpenAICompatibleProvider(
            resolved,
            embeddings=OpenAIEmbeddingStrategy(default_model=settings.openai_embed_model),
        )

    logger.warning("Unknown provider service '%s'; expected one of %s", key, ", ".join(SUPPORTED_SERVICES))
    raise ValueError(f"Unknown provider service: {key}")


def fetch_ollama_tags(host: str, timeout: float = 1.0) -> Optional[Dict[str, Any]]:
    """Return the decoded ``/api/tags`` body, or None when the host is unreachable."""

    url = f"{host.rstrip('/')}/api/tags"
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError):
        return None
    return data if isinstance(data, dict) else {}


def model_names(tags: Mapping[str, Any]) -> List[str]:
    models = tags.get("models")
    names: List[str] = []
    if isinstance(models, list):
        for entry in models:
            if isinstance(entry, dict):
                name = entry.get("name")
                if isinstance(name, str):
                    names.append(name)
    return names


def list_ollama_models(host: str, timeout: float = 1.0) -> List[str]:
    """Return model names served by the Ollama host, or an empty list when unreachable."""

    return model_names(fetch_ollama_tags(host, timeout) or {})


def probe_ollama(host: str, timeout: float = 1.0) -> bool:
    return fetch_ollama_tags(host, timeout) is not None
