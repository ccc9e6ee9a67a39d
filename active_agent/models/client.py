from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .errors import ProviderRequestError

logger = logging.getLogger(__name__)


class OpenAICompatibleClient:
    """Thin JSON client for endpoints that follow the OpenAI REST layout."""

    def __init__(
        self,
        host: str,
        api_version: str,
        access_token: Optional[str] = None,
        timeout_sec: int = 20,
        log_errors: bool = True,
    ) -> None:
        self.host = host.rstrip("/")
        self.api_version = api_version.strip("/")
        self.access_token = access_token
        self.timeout_sec = timeout_sec
        self.log_errors = log_errors
        self.session = requests.Session()
        self.session.headers["Content-Type"] = "application/json"
        if access_token:
            self.session.headers["Authorization"] = f"Bearer {access_token}"

    def url(self, path: str) -> str:
        path = path.lstrip("/")
        if self.api_version:
            return f"{self.host}/{self.api_version}/{path}"
        return f"{self.host}/{path}"

    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded JSON body."""

        url = self.url(path)
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout_sec)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            if self.log_errors:
                logger.warning("Request to %s failed: %s", url, exc)
            raise ProviderRequestError(f"request to {url} failed") from exc
        if not isinstance(data, dict):
            if self.log_errors:
                logger.warning("Unexpected response body from %s: %r", url, data)
            raise ProviderRequestError(f"unexpected response body from {url}")
        return data

    def embeddings(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        return self.post("embeddings", parameters)

    def close(self) -> None:
        self.session.close()
