#!/usr/bin/env python3
"""Quick check that the local Ollama host can serve embeddings."""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from active_agent.core.config import get_settings
from active_agent.models.dto import Message, Prompt
from active_agent.models.errors import ProviderError
from active_agent.models.provider_factory import build_provider, fetch_ollama_tags, model_names

TEXT = "Confirm the local embedding model is ready."  # short, deterministic
LOG_PATH = Path("logs/ollama-embed-check.txt")


@dataclass
class EmbedResult:
    model: Optional[str]
    dimensions: Optional[int]
    latency: Optional[float]
    message: str


def measure_embedding(host: str, model: str) -> EmbedResult:
    provider = build_provider({"service": "ollama", "host": host, "embedding_model": model})
    prompt = Prompt(message=Message(content=TEXT), instructions="Embedding check")
    start = time.perf_counter()
    try:
        response = provider.embed(prompt)
    except ProviderError as exc:
        return EmbedResult(model, None, None, f"Embedding failed: {exc}")
    vector = response.embedding
    if not isinstance(vector, list):
        return EmbedResult(model, None, None, f"Unexpected embedding payload: {type(vector).__name__}")
    return EmbedResult(model, len(vector), time.perf_counter() - start, "ok")


def format_result(result: EmbedResult) -> str:
    if result.message != "ok" or result.latency is None:
        return f"Embedding check: {result.message}"
    return f"Embedding check ({result.model}): {result.dimensions} dimensions in {result.latency:.2f}s."


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    host = settings.ollama_host
    model = settings.ollama_embed_model
    LOG_PATH.parent.mkdir(parents=True, exist_ok=True)

    tags = fetch_ollama_tags(host)
    if tags is None:
        lines = [f"Ollama not reachable at {host}"]
    else:
        available = model_names(tags)
        if available and not any(name.split(":")[0] == model.split(":")[0] for name in available):
            lines = [f"Model {model} not pulled on {host}; available: {', '.join(available)}"]
        else:
            lines = [format_result(measure_embedding(host, model))]

    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with LOG_PATH.open("a", encoding="utf-8") as handle:
        for line in lines:
            handle.write(f"{stamp} {line}\n")
    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
