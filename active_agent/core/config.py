import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_API_VERSION = "v1"
DEFAULT_OLLAMA_EMBED_MODEL = "nomic-embed-text"
OLLAMA_TOKEN_ENV_VARS = ("OLLAMA_API_KEY", "OLLAMA_ACCESS_TOKEN")
OPENAI_TOKEN_ENV_VARS = ("OPENAI_API_KEY", "OPENAI_ACCESS_TOKEN")
ENV_PREFIX = "ACTIVE_AGENT_"
PROJECT_ROOT = Path(__file__).resolve().parents[2]

CredentialResolver = Callable[[Mapping[str, Any]], Optional[str]]


def normalize_host(value: str) -> str:
    """Return the host with an http scheme and no trailing slash.

    Accepts bare ``host:port`` values such as ``0.0.0.0:11434``, the form the
    Ollama server uses for its own bind address.
    """
    host = (value or "").strip().rstrip("/")
    if host and "://" not in host:
        host = f"http://{host}"
    return host


class Settings(BaseSettings):
    """Process-wide provider defaults derived from environment variables."""

    ollama_host: str = DEFAULT_OLLAMA_HOST
    ollama_api_version: str = DEFAULT_API_VERSION
    ollama_embed_model: str = DEFAULT_OLLAMA_EMBED_MODEL
    openai_host: str = "https://api.openai.com"
    openai_api_version: str = DEFAULT_API_VERSION
    openai_embed_model: str = "text-embedding-3-small"
    request_timeout_sec: int = 20
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("ollama_host", "openai_host")
    @classmethod
    def clean_host(cls, value: str) -> str:
        """Add a missing scheme and drop trailing slashes."""
        return normalize_host(value)

    @field_validator("request_timeout_sec")
    @classmethod
    def positive_timeout(cls, value: int) -> int:
        """Clamp the request timeout to at least one second."""
        return max(1, int(value))

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        """Uppercase known level names; unknown names fall back to INFO."""
        level = (value or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return "INFO"
        return level


class ProviderConfig(BaseModel):
    """Resolved settings for a single provider instance."""

    service: str
    model: Optional[str] = None
    host: str
    api_version: str
    access_token: Optional[str] = Field(default=None, repr=False)
    embedding_model: Optional[str] = None
    timeout_sec: int = 20

    @field_validator("host")
    @classmethod
    def strip_host(cls, value: str) -> str:
        return normalize_host(value)


def env_credential_resolver(
    *names: str, environ: Optional[Mapping[str, str]] = None
) -> CredentialResolver:
    """Build a resolver that checks config keys first, then the named env vars.

    The lookup order is ``api_key`` and ``access_token`` from the config mapping,
    followed by each environment variable in ``names``. ``environ`` defaults to
    ``os.environ`` at call time; tests can pass a plain dict instead.
    """

    def resolve(config: Mapping[str, Any]) -> Optional[str]:
        for key in ("api_key", "access_token"):
            value = config.get(key)
            if value:
                return str(value)
        env = os.environ if environ is None else environ
        for name in names:
            value = env.get(name)
            if value:
                return value
        return None

    return resolve


def resolve_provider_config(
    config: Mapping[str, Any],
    *,
    service: str,
    default_host: str,
    default_api_version: str,
    credentials: CredentialResolver,
    timeout_sec: int = 20,
) -> ProviderConfig:
    """Merge an explicit config mapping with defaults into a ProviderConfig."""
    return ProviderConfig(
        service=config.get("service") or service,
        model=config.get("model"),
        host=config.get("host") or default_host,
        api_version=config.get("api_version") or default_api_version,
        access_token=credentials(config),
        embedding_model=config.get("embedding_model"),
        timeout_sec=config.get("timeout_sec") or timeout_sec,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (re-computed only when module reloaded)."""
    return Settings()


def reload_settings() -> None:
    """Clear cached settings, primarily for tests."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
